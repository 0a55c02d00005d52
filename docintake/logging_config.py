import logging
import sys
from pathlib import Path

from docintake import config


def setup_logging():
    """Setup logging configuration."""
    logs_dir = Path(config.LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "app.log"),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger("docintake")

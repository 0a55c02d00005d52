import logging
import os
from dataclasses import dataclass

from unstructured.partition.auto import partition

logger = logging.getLogger(__name__)


@dataclass
class ParsedPdf:
    text: str
    page_count: int


def parse_pdf(path: str) -> ParsedPdf:
    """
    Extract the text of a PDF with unstructured's fast (pdfminer) strategy.

    Blocking; callers on the event loop should run it in a thread. The page
    count is the highest page number seen on any element, at least 1.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"PDF not found: {path}")

    elements = partition(filename=path, strategy="fast")
    text = "\n".join([el.text for el in elements if el.text])

    page_numbers = [el.metadata.page_number for el in elements if el.metadata.page_number]
    page_count = max(page_numbers, default=1)

    logger.debug("Parsed %s: %d elements, %d pages", path, len(elements), page_count)
    return ParsedPdf(text=text, page_count=page_count)

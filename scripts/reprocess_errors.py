"""Queue every document in "error" status for reprocessing.

Usage:
    python scripts/reprocess_errors.py --base-url http://localhost:5005
"""
import argparse
import logging
import sys
import time

import requests

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("reprocess_errors")


def fetch_error_ids(session: requests.Session, base_url: str) -> list:
    response = session.get(f"{base_url}/api/documents", timeout=30)
    response.raise_for_status()
    return [doc["_id"] for doc in response.json() if doc.get("status") == "error"]


def retry_documents(session: requests.Session, base_url: str, doc_ids: list, delay: float) -> int:
    count = 0
    for doc_id in doc_ids:
        logger.info("  Retrying document: %s", doc_id)
        try:
            response = session.post(f"{base_url}/api/documents/{doc_id}/retry", timeout=30)
        except requests.RequestException as e:
            logger.warning("  Could not retry %s: %s", doc_id, e)
            time.sleep(delay)
            continue
        if response.ok:
            count += 1
        else:
            logger.warning("  Could not retry %s: %s %s", doc_id, response.status_code, response.text)
        time.sleep(delay)
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Reprocess all documents that failed processing.")
    parser.add_argument("--base-url", default="http://localhost:5005", help="API base URL")
    parser.add_argument("--user-id", default=None, help="Act as this user (X-User-Id header)")
    parser.add_argument("--delay", type=float, default=0.5, help="Seconds to wait between retries")
    args = parser.parse_args(argv)

    base_url = args.base_url.rstrip("/")
    session = requests.Session()
    if args.user_id:
        session.headers["X-User-Id"] = args.user_id

    logger.info("Fetching error documents...")
    try:
        error_ids = fetch_error_ids(session, base_url)
    except requests.RequestException as e:
        logger.error("Failed to list documents: %s", e)
        return 1

    if not error_ids:
        logger.info("No error documents found!")
        return 0

    logger.info("Reprocessing error documents...")
    count = retry_documents(session, base_url, error_ids, args.delay)

    logger.info("\nQueued %d documents for reprocessing!", count)
    logger.info("Documents will be processed in the background. Refresh the page in a few seconds.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

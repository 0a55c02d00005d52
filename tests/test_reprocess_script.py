"""
Tests for the error reprocessing script
"""
import importlib.util
from pathlib import Path
from types import SimpleNamespace

import requests

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "reprocess_errors.py"
_spec = importlib.util.spec_from_file_location("reprocess_errors", SCRIPT)
reprocess_errors = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(reprocess_errors)


class FakeSession:
    def __init__(self, documents=(), unreachable=()):
        self.documents = list(documents)
        self.unreachable = set(unreachable)
        self.posted = []

    def get(self, url, timeout):
        return SimpleNamespace(json=lambda: self.documents, raise_for_status=lambda: None)

    def post(self, url, timeout):
        self.posted.append(url)
        if any(doc_id in url for doc_id in self.unreachable):
            raise requests.ConnectionError("connection refused")
        return SimpleNamespace(ok=True, status_code=200, text="")


class TestReprocessErrors:
    """Retry loop"""

    def test_only_error_documents_are_listed(self):
        session = FakeSession([{"_id": "a", "status": "error"}, {"_id": "b", "status": "completed"}])
        assert reprocess_errors.fetch_error_ids(session, "http://api") == ["a"]

    def test_connection_error_does_not_stop_the_loop(self):
        session = FakeSession(unreachable={"first"})

        count = reprocess_errors.retry_documents(session, "http://api", ["first", "second"], delay=0)

        assert count == 1
        assert session.posted == [
            "http://api/api/documents/first/retry",
            "http://api/api/documents/second/retry",
        ]

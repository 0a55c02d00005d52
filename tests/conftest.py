"""
Test configuration and fixtures
"""
import asyncio
import os
import tempfile
from uuid import uuid4

# Configure the environment before any docintake module reads it
_tmp = tempfile.mkdtemp(prefix="docintake-tests-")
os.environ["LOG_DIR"] = os.path.join(_tmp, "logs")
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["GEMINI_API_KEY"] = ""
os.environ["GEN_AI_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from docintake import config
from docintake.database import document_crud
import docintake.database.mongo as mongo
from docintake.main import app
from docintake.services import pipeline

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


def run(coro):
    """Run a coroutine from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def db(monkeypatch):
    """In-memory MongoDB standing in for the real database."""
    client = AsyncMongoMockClient()
    monkeypatch.setattr(mongo, "db", client["docintake_test"])
    return mongo.db


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(config, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def scheduled(monkeypatch):
    """Record processing jobs instead of starting them."""
    calls = []
    monkeypatch.setattr(pipeline, "schedule_processing", lambda doc_id, path: calls.append((doc_id, path)))
    return calls


@pytest.fixture
def client(db, upload_dir, scheduled):
    """Test client; startup hooks are not run so the mock database stays in place."""
    return TestClient(app)


@pytest.fixture
def make_document(db, upload_dir):
    """Factory storing a document record, optionally with its file on disk."""
    def _make(user_id=config.DEFAULT_USER_ID, original_name="report.pdf", status="completed",
              with_file=True, **fields):
        filename = f"{uuid4()}.pdf"
        if with_file:
            (upload_dir / filename).write_bytes(PDF_BYTES)
        doc = {
            "user_id": user_id,
            "filename": filename,
            "original_name": original_name,
            "mime_type": "application/pdf",
            "file_size": len(PDF_BYTES),
            "status": status,
            "processing_progress": 100 if status == "completed" else 0,
        }
        doc.update(fields)
        return run(document_crud.create_document(doc))
    return _make

import logging
import os
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from docintake.auth import get_current_user
from docintake.database import document_crud
from docintake.models.documents import DocumentDetail, DocumentOut, RetryResponse
from docintake.services import pipeline
from docintake.utils import FileTooLargeError, delete_upload, save_upload_file, upload_path

logger = logging.getLogger(__name__)

router = APIRouter()

PDF_MIME_TYPE = "application/pdf"


async def get_owned_document(doc_id: str, user_id: str, with_extractions: bool = False) -> dict:
    if not doc_id or not ObjectId.is_valid(doc_id):
        raise HTTPException(status_code=400, detail="Invalid document ID")
    if with_extractions:
        doc = await document_crud.get_document_with_extractions(doc_id)
    else:
        doc = await document_crud.get_document(doc_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    if doc["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    return doc


@router.get("", response_model=List[DocumentOut])
async def list_documents(
    q: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user),
):
    try:
        if q:
            return await document_crud.search_documents(user_id, q)
        return await document_crud.get_documents(user_id)
    except Exception:
        logger.exception("Error fetching documents")
        raise HTTPException(status_code=500, detail="Failed to fetch documents")


@router.post("/upload", response_model=DocumentOut)
async def upload_document_file(
    file: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if file.content_type != PDF_MIME_TYPE:
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")

    try:
        stored = await save_upload_file(file)
    except FileTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except OSError:
        logger.exception("File upload failed")
        raise HTTPException(status_code=500, detail="File upload failed")

    document_data = {
        "user_id": user_id,
        "filename": stored["filename"],
        "original_name": file.filename,
        "mime_type": file.content_type,
        "file_size": stored["size"],
        "status": "processing",
        "processing_progress": 0,
    }

    try:
        doc = await document_crud.create_document(document_data)
    except Exception as e:
        # Clean up the uploaded file if DB insert fails
        delete_upload(stored["filename"])
        logger.exception("Error creating document record")
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    logger.info("Uploaded %s as document %s (%d bytes)", file.filename, doc["_id"], stored["size"])
    pipeline.schedule_processing(doc["_id"], stored["path"])
    return doc


@router.get("/{doc_id}", response_model=DocumentDetail)
async def get_document(doc_id: str, user_id: str = Depends(get_current_user)):
    return await get_owned_document(doc_id, user_id, with_extractions=True)


@router.delete("/{doc_id}", response_model=dict)
async def delete_document(doc_id: str, user_id: str = Depends(get_current_user)):
    doc = await get_owned_document(doc_id, user_id)
    try:
        delete_upload(doc["filename"])
        await document_crud.delete_document(doc_id)
    except Exception:
        logger.exception("Error deleting document %s", doc_id)
        raise HTTPException(status_code=500, detail="Failed to delete document")
    return {"message": "Document deleted"}


@router.post("/{doc_id}/retry", response_model=RetryResponse)
async def retry_document(doc_id: str, user_id: str = Depends(get_current_user)):
    doc = await get_owned_document(doc_id, user_id)

    file_path = upload_path(doc["filename"])
    if not os.path.exists(file_path):
        raise HTTPException(status_code=404, detail="Document file not found")

    try:
        await document_crud.update_document(doc_id, {"status": "processing", "processing_progress": 0})
    except Exception:
        logger.exception("Error retrying document %s", doc_id)
        raise HTTPException(status_code=500, detail="Failed to retry document")

    pipeline.schedule_processing(doc_id, file_path)
    return {"message": "Document reprocessing started", "status": "processing"}

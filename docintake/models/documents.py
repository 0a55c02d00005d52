# docintake/models/documents.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal, Optional

DocumentStatus = Literal["processing", "completed", "error"]


class DocumentIn(BaseModel):
    user_id: str
    filename: str
    original_name: str
    mime_type: str
    file_size: int  # in bytes
    status: DocumentStatus = "processing"
    # -1 marks a failed run
    processing_progress: int = Field(0, ge=-1, le=100)


class DocumentOut(DocumentIn):
    id: str = Field(alias="_id")
    upload_date: datetime
    processed_at: Optional[datetime] = None
    page_count: Optional[int] = None


class Entity(BaseModel):
    text: str
    type: str
    count: int = 1


class DocumentAnalysis(BaseModel):
    summary: str
    keywords: List[str] = []
    entities: List[Entity] = []
    tables: List[dict] = []
    word_count: int = 0
    character_count: int = 0


class ExtractionOut(BaseModel):
    id: str = Field(alias="_id")
    document_id: str
    extraction_type: str
    data: DocumentAnalysis
    created_at: datetime
    updated_at: Optional[datetime] = None


class DocumentDetail(DocumentOut):
    extractions: List[ExtractionOut] = []
    extracted_text: Optional[str] = None


class RetryResponse(BaseModel):
    message: str
    status: DocumentStatus

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional

from docintake.models.documents import DocumentOut


class UserOut(BaseModel):
    id: str = Field(alias="_id")
    user_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DashboardStats(BaseModel):
    total_documents: int
    processing_count: int
    completed_count: int
    error_count: int
    recent_documents: List[DocumentOut]


class KeywordCount(BaseModel):
    keyword: str
    count: int


class DailyUploads(BaseModel):
    date: str
    count: int


class ReportsData(BaseModel):
    total_documents: int
    status_breakdown: Dict[str, int]
    total_pages: int
    total_words: int
    total_characters: int
    average_words_per_document: int
    total_chat_messages: int
    top_keywords: List[KeywordCount]
    entity_types: Dict[str, int]
    uploads_by_day: List[DailyUploads]

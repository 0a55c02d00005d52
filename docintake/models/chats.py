from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

class ChatRequest(BaseModel):
    # Both are checked in the handler so a missing field answers 400
    document_id: Optional[str] = None
    content: Optional[str] = None


class ChatMessageOut(BaseModel):
    id: str = Field(alias="_id")
    document_id: str
    user_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime

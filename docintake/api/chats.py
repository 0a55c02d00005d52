import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from docintake import config
from docintake.api.documents import get_owned_document
from docintake.auth import get_current_user
from docintake.database import document_crud
from docintake.models.chats import ChatMessageOut, ChatRequest
from docintake.services import openai_chat

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "I'm sorry, I couldn't process your question. Please try again."

# Create the API router
router = APIRouter()


@router.get("/{document_id}", response_model=List[ChatMessageOut])
async def get_chat_history(document_id: str, user_id: str = Depends(get_current_user)):
    await get_owned_document(document_id, user_id)
    try:
        return await document_crud.get_chat_messages(document_id)
    except Exception:
        logger.exception("Error fetching chat messages for %s", document_id)
        raise HTTPException(status_code=500, detail="Failed to fetch chat messages")


@router.post("", response_model=ChatMessageOut)
async def send_message(request: ChatRequest, user_id: str = Depends(get_current_user)):
    if not request.document_id or not request.content:
        raise HTTPException(status_code=400, detail="Missing document_id or content")

    doc = await get_owned_document(request.document_id, user_id, with_extractions=True)

    try:
        await document_crud.create_chat_message({
            "document_id": request.document_id,
            "user_id": user_id,
            "role": "user",
            "content": request.content,
        })
        chat_history = await document_crud.get_chat_messages(request.document_id)
    except Exception:
        logger.exception("Error saving chat message")
        raise HTTPException(status_code=500, detail="Failed to send message")

    history = [
        {"role": m["role"], "content": m["content"]}
        for m in chat_history[-config.CHAT_HISTORY_LIMIT:]
    ]

    try:
        answer = await openai_chat.generate_chat_response(
            doc.get("extracted_text") or "No text extracted from document.",
            request.content,
            history,
        )
    except Exception as e:
        logger.error("AI error answering about document %s: %s", request.document_id, e)
        answer = FALLBACK_ANSWER

    try:
        return await document_crud.create_chat_message({
            "document_id": request.document_id,
            "user_id": user_id,
            "role": "assistant",
            "content": answer,
        })
    except Exception:
        logger.exception("Error saving assistant message")
        raise HTTPException(status_code=500, detail="Failed to send message")

import logging
from typing import Optional

from fastapi import Header, HTTPException

from docintake import config
from docintake.database import document_crud

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
) -> str:
    """
    Resolve the caller from the ``X-User-Id`` header set by the fronting
    identity proxy. Without one the request runs as ``DEFAULT_USER_ID``.
    """
    user_id = (x_user_id or config.DEFAULT_USER_ID).strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        await document_crud.upsert_user({"user_id": user_id, "email": x_user_email})
    except Exception as e:
        logger.exception("Failed to record user %s", user_id)
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    return user_id

import logging
import os
from uuid import uuid4

import aiofiles
from fastapi import UploadFile

from docintake import config

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FileTooLargeError(Exception):
    pass


def upload_path(filename: str) -> str:
    return os.path.join(config.UPLOAD_DIR, filename)


# ================== local uploads =====================
async def save_upload_file(file: UploadFile) -> dict:
    """
    Stream an uploaded file to the upload directory under a unique name.

    :param file: the incoming multipart file
    :return: dict with the stored ``filename``, its ``path`` and ``size`` in bytes
    :raises FileTooLargeError: when the upload exceeds ``MAX_UPLOAD_SIZE``; the
        partial file is removed first
    """
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    ext = os.path.splitext(file.filename or "")[1]
    unique_name = f"{uuid4()}{ext}"
    file_path = upload_path(unique_name)

    size = 0
    try:
        async with aiofiles.open(file_path, "wb") as buffer:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > config.MAX_UPLOAD_SIZE:
                    raise FileTooLargeError(
                        f"File exceeds the {config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit"
                    )
                await buffer.write(chunk)
    except Exception:
        delete_upload(unique_name)
        raise

    return {"filename": unique_name, "path": file_path, "size": size}


def delete_upload(filename: str) -> bool:
    file_path = upload_path(filename)
    if os.path.exists(file_path):
        os.remove(file_path)
        logger.debug("Removed upload %s", file_path)
        return True
    return False

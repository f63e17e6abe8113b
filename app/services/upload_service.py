import logging
import os
import time
import uuid
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from app.config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadService:
    """Stores uploaded media on local disk under ``UPLOAD_PATH``.

    Files land in ``category_<id>/`` sub folders; the returned ``filename`` is
    relative to ``UPLOAD_PATH`` so it can be served from ``/uploads/<filename>``
    and removed again with ``delete_file``.
    """

    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = upload_dir or settings.UPLOAD_PATH

    def _check_extension(self, original_name: str) -> str:
        ext = os.path.splitext(original_name)[1].lower()
        if ext.lstrip(".") not in settings.allowed_extensions:
            logger.warning(f"Rejected upload {original_name!r}: type not allowed")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File type {ext or '(none)'} is not allowed",
            )
        return ext

    async def save_file(self, file: UploadFile, category_id: int) -> dict:
        original_name = file.filename or ""
        ext = self._check_extension(original_name)

        folder = f"category_{category_id}"
        os.makedirs(os.path.join(self.upload_dir, folder), exist_ok=True)
        stored_name = f"image-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}{ext}"
        filename = f"{folder}/{stored_name}"
        path = os.path.join(self.upload_dir, folder, stored_name)

        size = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > settings.MAX_FILE_SIZE:
                        raise HTTPException(
                            status_code=status.HTTP_400_BAD_REQUEST,
                            detail="File too large",
                        )
                    out.write(chunk)
        except Exception:
            # Never leave a partial file behind
            if os.path.exists(path):
                os.remove(path)
            raise

        logger.info(f"Stored upload {original_name!r} as {filename} ({size} bytes)")
        return {
            "filename": filename,
            "original_name": original_name,
            "file_size": size,
            "mime_type": file.content_type,
        }

    def delete_file(self, filename: Optional[str]) -> bool:
        if not filename:
            return False
        path = os.path.join(self.upload_dir, filename)
        if not os.path.isfile(path):
            logger.debug(f"Upload {filename} already gone, nothing to remove")
            return False
        os.remove(path)
        return True

    def get_file_url(self, filename: str) -> str:
        return f"/uploads/{filename}"

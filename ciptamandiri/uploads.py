# ciptamandiri/uploads.py
import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.staticfiles import StaticFiles

from . import config
from .auth import get_current_admin
from .models import Admin
from .schemas import UploadOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["upload"])

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "svg"}
CHUNK_SIZE = 64 * 1024
# MediaFiles sends these with Content-Disposition: attachment
ATTACHMENT_EXTENSIONS = {"svg"}


def safe_folder(folder: str) -> str:
    cleaned = re.sub(r"[^a-z0-9_-]", "", (folder or "").lower())
    return cleaned or "general"


def file_extension(filename: str) -> str:
    return Path(filename or "").suffix.lstrip(".").lower()


def build_storage_name(folder: str, ext: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{safe_folder(folder)}/{now_ms}.{ext}"


@router.post("", response_model=UploadOut, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    folder: str = Form("general"),
    current_admin: Admin = Depends(get_current_admin),
):
    ext = file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Format file tidak didukung")

    name = build_storage_name(folder, ext)
    target = Path(config.MEDIA_DIR) / name
    target.parent.mkdir(parents=True, exist_ok=True)

    size = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > config.MAX_UPLOAD_BYTES:
                    raise HTTPException(status_code=413, detail="Ukuran file terlalu besar")
                out.write(chunk)
    except HTTPException:
        target.unlink(missing_ok=True)
        raise
    finally:
        await file.close()

    logger.info("Uploaded %s (%s bytes) by %s", name, size, current_admin.email)
    return {"url": f"{config.MEDIA_URL.rstrip('/')}/{name}"}


class MediaFiles(StaticFiles):
    """StaticFiles for uploads: SVGs are sent as attachments."""

    def file_response(self, full_path, stat_result, scope, status_code=200):
        response = super().file_response(full_path, stat_result, scope, status_code)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if file_extension(str(full_path)) in ATTACHMENT_EXTENSIONS:
            response.headers["Content-Disposition"] = f'attachment; filename="{Path(full_path).name}"'
        return response

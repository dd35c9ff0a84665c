# mye_backend/api/upload.py
# Загрузка изображений товаров. Файлы раздаются статикой по /uploads.
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile

from mye_backend.core.errors import InvalidUploadError
from mye_backend.services import uploads as upload_service

router = APIRouter()


def _upload_dir(request: Request) -> Path:
    return Path(request.app.state.settings.UPLOAD_DIR)


@router.post("/single")
def upload_single(request: Request, image: Optional[UploadFile] = File(None)):
    if image is None or not image.filename:
        raise InvalidUploadError("No file uploaded")
    settings = request.app.state.settings
    stored = upload_service.save_upload(image, _upload_dir(request), settings.MAX_UPLOAD_SIZE)
    return {"success": True, "data": stored}


@router.post("/multiple")
def upload_multiple(request: Request, images: Optional[list[UploadFile]] = File(None)):
    files = [f for f in images or [] if f.filename]
    if not files:
        raise InvalidUploadError("No file uploaded")
    settings = request.app.state.settings
    stored = upload_service.save_uploads(files, _upload_dir(request), settings.MAX_UPLOAD_SIZE)
    return {"success": True, "data": stored}


@router.delete("/{filename}")
def delete_file(filename: str, request: Request):
    upload_service.delete_upload(_upload_dir(request), filename)
    return {"success": True, "message": "File deleted successfully"}

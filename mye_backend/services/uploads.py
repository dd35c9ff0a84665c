# mye_backend/services/uploads.py
# Сохранение и удаление изображений товаров в UPLOAD_DIR.
# Для ядра загруженный файл — просто URL-строка /uploads/<filename>.
import logging
import random
import time
from pathlib import Path

from fastapi import UploadFile

from mye_backend.core.errors import InvalidUploadError, UploadNotFoundError
from mye_backend.schemas.upload import UploadedFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
UPLOAD_URL_PREFIX = "/uploads"
MAX_FILES_PER_REQUEST = 10
CHUNK_SIZE = 64 * 1024


def unique_filename(original_name: str) -> str:
    """<имя>-<миллисекунды>-<случайное число><расширение>"""
    original = Path(original_name).name
    suffix = Path(original).suffix.lower()
    stem = Path(original).stem or "image"
    return f"{stem}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


def check_image(upload: UploadFile) -> None:
    extension = Path(upload.filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS or (upload.content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError("Only image files can be uploaded (jpeg, jpg, png, gif, webp)")


def save_upload(upload: UploadFile, upload_dir: Path, max_size: int) -> UploadedFile:
    check_image(upload)
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = unique_filename(upload.filename)
    target = upload_dir / filename

    size = 0
    try:
        with target.open("wb") as out:
            while chunk := upload.file.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_size:
                    raise InvalidUploadError(f"File is too large, limit is {max_size // (1024 * 1024)} MB")
                out.write(chunk)
    except Exception:
        # Недописанный файл не должен остаться на диске
        target.unlink(missing_ok=True)
        raise

    logger.info(f"Uploaded {upload.filename} as {filename} ({size} bytes)")
    return UploadedFile(
        url=f"{UPLOAD_URL_PREFIX}/{filename}",
        filename=filename,
        original_name=upload.filename,
        size=size,
        mimetype=upload.content_type,
    )


def save_uploads(uploads: list[UploadFile], upload_dir: Path, max_size: int) -> list[UploadedFile]:
    if len(uploads) > MAX_FILES_PER_REQUEST:
        raise InvalidUploadError(f"At most {MAX_FILES_PER_REQUEST} files can be uploaded at once")
    # Сначала проверяем все файлы, чтобы не сохранять часть пачки
    for upload in uploads:
        check_image(upload)
    saved: list[UploadedFile] = []
    try:
        for upload in uploads:
            saved.append(save_upload(upload, upload_dir, max_size))
    except Exception:
        for stored in saved:
            (upload_dir / stored.filename).unlink(missing_ok=True)
        raise
    return saved


def delete_upload(upload_dir: Path, filename: str) -> None:
    if not filename or Path(filename).name != filename or filename in (".", ".."):
        raise InvalidUploadError("Invalid file name")
    target = upload_dir / filename
    if not target.is_file():
        raise UploadNotFoundError(filename)
    target.unlink()
    logger.info(f"Deleted upload {filename}")

# mye_backend/schemas/upload.py
from mye_backend.schemas.common import CamelModel


class UploadedFile(CamelModel):
    url: str
    filename: str
    original_name: str
    size: int
    mimetype: str

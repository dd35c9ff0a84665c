# mye_backend/schemas/brand.py
from datetime import datetime
from typing import Optional

from mye_backend.schemas.common import CamelModel


class BrandCreate(CamelModel):
    name: Optional[str] = None


class BrandOut(CamelModel):
    id: int
    name: str
    created_at: datetime

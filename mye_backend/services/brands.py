# mye_backend/services/brands.py
# Справочник брендов с мягким удалением и восстановлением по имени.
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mye_backend.core.errors import BrandNotFoundError, DuplicateError, RequestValidationFailed
from mye_backend.models.brand import Brand

logger = logging.getLogger(__name__)

BRAND_EXISTS = "Brand already exists"


def list_brands(db: Session) -> list[Brand]:
    rows = db.scalars(select(Brand).where(Brand.is_deleted.is_(False)).order_by(Brand.name.asc()))
    return list(rows)


def create_brand(db: Session, name: str | None) -> tuple[Brand, bool]:
    """
    Создаёт бренд либо восстанавливает ранее удалённый с тем же именем.

    Returns:
        (бренд, restored) — restored=True, если ожила старая строка с прежним id
    """
    name = (name or "").strip()
    if not name:
        raise RequestValidationFailed("Brand name is required", ["name"])

    existing = db.scalar(select(Brand).where(Brand.name == name))
    if existing is not None:
        if not existing.is_deleted:
            raise DuplicateError(BRAND_EXISTS)
        existing.is_deleted = False
        existing.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(existing)
        logger.info(f"Brand {name} restored (id={existing.id})")
        return existing, True

    brand = Brand(name=name)
    db.add(brand)
    try:
        db.commit()
    except IntegrityError as e:
        # Параллельный запрос успел создать такое же имя
        db.rollback()
        raise DuplicateError(BRAND_EXISTS) from e
    db.refresh(brand)
    return brand, False


def delete_brand(db: Session, brand_id: int) -> None:
    brand = db.scalar(select(Brand).where(Brand.id == brand_id, Brand.is_deleted.is_(False)))
    if brand is None:
        raise BrandNotFoundError(brand_id)
    brand.is_deleted = True
    brand.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"Brand {brand.name} soft-deleted")

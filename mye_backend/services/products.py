# mye_backend/services/products.py
# CRUD товаров с мягким удалением. Все чтения и обновления видят только is_deleted = False.
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from mye_backend.core.errors import (
    DuplicateError,
    EmptyUpdateError,
    ProductNotFoundError,
    RequestValidationFailed,
)
from mye_backend.models.product import Product, ProductFeature, StockStatus
from mye_backend.schemas.product import ProductCreate, ProductPatch
from mye_backend.services.stock import stock_status_for

logger = logging.getLogger(__name__)

PRODUCT_SORT_FIELDS = {
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
    "name": Product.name,
    "sku": Product.sku,
    "brand": Product.brand,
    "current_price": Product.current_price,
    "stock_quantity": Product.stock_quantity,
}

# Поле ProductPatch -> атрибут Product. Только эти колонки можно менять через PUT.
PATCH_COLUMNS = {
    "name": "name",
    "sku": "sku",
    "brand": "brand",
    "category": "category",
    "description": "description",
    "original_price": "original_price",
    "current_price": "current_price",
    "stock_status": "stock_status",
    "stock_quantity": "stock_quantity",
    "rating": "rating",
    "review_count": "review_count",
    "technical_specs": "technical_specs",
    "reviews": "reviews",
    "images": "images",
}
# Колонки NOT NULL: явный null для них — ошибка запроса
REQUIRED_PATCH_FIELDS = {"name", "sku", "brand", "original_price", "current_price", "stock_status", "stock_quantity", "images"}

SKU_TAKEN = "A product with this SKU already exists"


def _live_products():
    return select(Product).where(Product.is_deleted.is_(False))


def _sku_taken(db: Session, sku: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Product.id).where(Product.sku == sku, Product.is_deleted.is_(False))
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    return db.scalar(query) is not None


def list_products(
    db: Session,
    search: Optional[str] = None,
    brand: Optional[str] = None,
    stock_status: Optional[StockStatus] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "created_at",
    sort_order: str = "DESC",
) -> tuple[list[Product], int]:
    query = _live_products()
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(Product.name.ilike(pattern), Product.sku.ilike(pattern), Product.description.ilike(pattern))
        )
    if brand:
        query = query.where(Product.brand == brand)
    if stock_status:
        query = query.where(Product.stock_status == stock_status)
    if min_price is not None:
        query = query.where(Product.current_price >= min_price)
    if max_price is not None:
        query = query.where(Product.current_price <= max_price)

    total = db.scalar(select(func.count()).select_from(query.subquery()))

    sort_column = PRODUCT_SORT_FIELDS.get(sort_by, Product.created_at)
    ordering = sort_column.asc() if sort_order.upper() == "ASC" else sort_column.desc()
    products = db.scalars(
        query.options(selectinload(Product.features))
        .order_by(ordering, Product.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).all()
    return list(products), total


def get_product(db: Session, product_id: int, lock: bool = False) -> Product:
    query = _live_products().where(Product.id == product_id).options(selectinload(Product.features))
    if lock:
        query = query.with_for_update(of=Product)
    product = db.scalar(query)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


def create_product(db: Session, data: ProductCreate) -> Product:
    if _sku_taken(db, data.sku):
        raise DuplicateError(SKU_TAKEN)

    product = Product(
        name=data.name,
        sku=data.sku,
        brand=data.brand,
        category=data.category or None,
        description=data.description or None,
        original_price=data.original_price,
        current_price=data.current_price,
        # Без явного статуса он выводится из количества
        stock_status=data.stock_status or stock_status_for(data.stock_quantity),
        stock_quantity=data.stock_quantity,
        images=list(data.images),
        rating=data.rating,
        review_count=data.review_count,
        technical_specs=data.technical_specs or None,
        reviews=data.reviews or None,
        features=[ProductFeature(feature=f) for f in data.features],
    )
    db.add(product)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # SKU совпал с удалённым товаром — уникальный индекс покрывает и его
        raise DuplicateError(f"{SKU_TAKEN} (including deleted products)") from e
    db.refresh(product)
    logger.info(f"Product {product.sku} created (id={product.id})")
    return product


def update_product(db: Session, product_id: int, patch: ProductPatch) -> Product:
    fields = patch.model_fields_set
    if not fields:
        raise EmptyUpdateError()

    nulls = sorted(f for f in fields & REQUIRED_PATCH_FIELDS if getattr(patch, f) is None)
    if nulls:
        raise RequestValidationFailed(f"Fields cannot be null: {', '.join(nulls)}", nulls)

    try:
        product = get_product(db, product_id, lock=True)

        if "sku" in fields and _sku_taken(db, patch.sku, exclude_id=product.id):
            raise DuplicateError(SKU_TAKEN)

        for field in fields & PATCH_COLUMNS.keys():
            value = getattr(patch, field)
            if field in ("technical_specs", "reviews") and not value:
                value = None
            setattr(product, PATCH_COLUMNS[field], value)

        if "stock_quantity" in fields and "stock_status" not in fields:
            product.stock_status = stock_status_for(patch.stock_quantity)

        # Список особенностей, если передан, заменяется целиком
        if "features" in fields:
            product.features = [ProductFeature(feature=f) for f in patch.features or []]

        product.updated_at = datetime.utcnow()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(f"{SKU_TAKEN} (including deleted products)") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Мягкое удаление: строка остаётся, чтобы позиции старых заказов не потеряли ссылку."""
    product = db.scalar(_live_products().where(Product.id == product_id))
    if product is None:
        raise ProductNotFoundError(product_id)
    product.is_deleted = True
    product.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"Product {product_id} soft-deleted")

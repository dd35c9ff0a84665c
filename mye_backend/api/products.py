# mye_backend/api/products.py
# CRUD товаров: поиск, фильтры, сортировка, пагинация и мягкое удаление.
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mye_backend.db.session import get_db
from mye_backend.models.product import StockStatus
from mye_backend.schemas.common import Pagination
from mye_backend.schemas.product import ProductCreate, ProductOut, ProductPatch
from mye_backend.services import products as product_service

router = APIRouter()


@router.get("")
def list_products(
    search: Optional[str] = None,
    brand: Optional[str] = None,
    stock_status: Optional[StockStatus] = Query(None, alias="stockStatus"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    products, total = product_service.list_products(
        db,
        search=search,
        brand=brand,
        stock_status=stock_status,
        min_price=min_price,
        max_price=max_price,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {
        "success": True,
        "data": [ProductOut.model_validate(p) for p in products],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    return {"success": True, "data": ProductOut.model_validate(product)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(body: ProductCreate, db: Session = Depends(get_db)):
    product = product_service.create_product(db, body)
    return {"success": True, "data": ProductOut.model_validate(product)}


@router.put("/{product_id}")
def update_product(product_id: int, body: ProductPatch, db: Session = Depends(get_db)):
    product = product_service.update_product(db, product_id, body)
    return {"success": True, "data": ProductOut.model_validate(product)}


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    return {"success": True, "message": "Product deleted successfully"}

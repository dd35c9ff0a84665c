# mye_backend/api/brands.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from mye_backend.db.session import get_db
from mye_backend.schemas.brand import BrandCreate, BrandOut
from mye_backend.services import brands as brand_service

router = APIRouter()


@router.get("")
def list_brands(db: Session = Depends(get_db)):
    return {"success": True, "data": [BrandOut.model_validate(b) for b in brand_service.list_brands(db)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_brand(body: BrandCreate, response: Response, db: Session = Depends(get_db)):
    """Новый бренд — 201; повторное имя удалённого бренда восстанавливает его — 200."""
    brand, restored = brand_service.create_brand(db, body.name)
    if restored:
        response.status_code = status.HTTP_200_OK
        return {"success": True, "data": BrandOut.model_validate(brand), "restored": True}
    return {"success": True, "data": BrandOut.model_validate(brand)}


@router.delete("/{brand_id}")
def delete_brand(brand_id: int, db: Session = Depends(get_db)):
    brand_service.delete_brand(db, brand_id)
    return {"success": True, "message": "Brand deleted successfully"}

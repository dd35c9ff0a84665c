# mye_backend/schemas/product.py
# Схемы товара: создание, частичное обновление (ProductPatch) и ответ.
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from mye_backend.models.product import StockStatus
from mye_backend.schemas.common import CamelModel


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    sku: str = Field(min_length=1, max_length=100)
    brand: str = Field(min_length=1, max_length=100)
    category: Optional[str] = None
    description: Optional[str] = None
    original_price: float = Field(gt=0)
    current_price: float = Field(gt=0)
    stock_status: Optional[StockStatus] = None
    stock_quantity: int = Field(default=0, ge=0)
    rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    features: list[str] = []
    technical_specs: list[Any] = []
    reviews: list[Any] = []
    images: list[str] = []


class ProductPatch(CamelModel):
    """
    Частичное обновление товара. Присваиваются только поля, пришедшие в теле
    запроса (model_fields_set); явный null означает "очистить" для nullable-колонок.
    is_deleted сюда не входит — удаление только через DELETE.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    sku: Optional[str] = Field(default=None, min_length=1, max_length=100)
    brand: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = None
    description: Optional[str] = None
    original_price: Optional[float] = Field(default=None, gt=0)
    current_price: Optional[float] = Field(default=None, gt=0)
    stock_status: Optional[StockStatus] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    features: Optional[list[str]] = None
    technical_specs: Optional[list[Any]] = None
    reviews: Optional[list[Any]] = None
    images: Optional[list[str]] = None


class ProductOut(CamelModel):
    id: int
    name: str
    sku: str
    brand: str
    category: Optional[str] = None
    description: Optional[str] = None
    original_price: float
    current_price: float
    stock_status: StockStatus
    stock_quantity: int
    images: list[str] = []
    rating: Optional[float] = 0
    review_count: Optional[int] = 0
    technical_specs: Optional[list[Any]] = None
    reviews: Optional[list[Any]] = None
    features: list[str] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("features", mode="before")
    @classmethod
    def feature_texts(cls, v):
        # ORM отдаёт строки ProductFeature, наружу уходит список текстов
        return [getattr(f, "feature", f) for f in (v or [])]

    @field_validator("images", mode="before")
    @classmethod
    def images_list(cls, v):
        return v or []

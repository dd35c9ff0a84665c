# mye_backend/models/product.py
# Модели товара (Product) и его списка особенностей (ProductFeature).
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, Text, JSON, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from mye_backend.db.base import Base
import enum


class StockStatus(str, enum.Enum):
    in_stock = "in_stock"
    low_stock = "low_stock"
    out_of_stock = "out_of_stock"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # SKU уникален с учётом удалённых товаров
    sku = Column(String(100), unique=True, index=True, nullable=False)
    brand = Column(String(100), nullable=False, index=True)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    original_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    current_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    stock_status = Column(
        Enum(StockStatus, native_enum=False, length=20),
        nullable=False,
        default=StockStatus.in_stock,
        index=True,
    )
    stock_quantity = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=False, default=list)
    rating = Column(Numeric(3, 2, asdecimal=False), default=0)
    review_count = Column(Integer, default=0)
    # Непрозрачные JSON-блобы: ядро их не интерпретирует, только хранит и отдаёт
    technical_specs = Column(JSON, nullable=True)
    reviews = Column(JSON, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    features = relationship(
        "ProductFeature",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductFeature.id",
    )


class ProductFeature(Base):
    __tablename__ = "product_features"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    feature = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("Product", back_populates="features")

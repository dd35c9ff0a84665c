# mye_backend/models/brand.py
# Справочник брендов. Удаление мягкое: is_deleted = True.
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime
from mye_backend.db.base import Base

DEFAULT_BRANDS = ("SCHNEIDER ELECTRIC", "ABB", "SIEMENS", "LEGRAND", "EATON")


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    # Уникальность распространяется и на удалённые строки — их восстанавливают, а не дублируют
    name = Column(String(100), unique=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

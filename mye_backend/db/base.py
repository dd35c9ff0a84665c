# mye_backend/db/base.py
# Общая declarative база для SQLAlchemy и соглашение об именах ограничений.
# Модуль не импортирует модели (иначе циклические импорты), модели берут Base отсюда.

from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# Стабильные имена индексов/ключей, чтобы autogenerate в Alembic не дёргал их зря
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

# mye_backend/db/seed.py
# Идемпотентное заполнение справочников: статусы заказов и бренды по умолчанию.
# В рабочей БД это делает миграция 0001; функция нужна для тестов и scripts/seed_data.py.
from sqlalchemy import select
from sqlalchemy.orm import Session

from mye_backend.models.brand import Brand, DEFAULT_BRANDS
from mye_backend.models.order import ORDER_STATUS_CATALOG, OrderStatusDefinition


def seed_order_statuses(db: Session) -> int:
    existing = set(db.scalars(select(OrderStatusDefinition.value)))
    added = 0
    for status, name, name_en, color, display_order in ORDER_STATUS_CATALOG:
        if status.value in existing:
            continue
        db.add(
            OrderStatusDefinition(
                value=status.value,
                name=name,
                name_en=name_en,
                color=color,
                display_order=display_order,
                is_active=True,
            )
        )
        added += 1
    return added


def seed_brands(db: Session, names=DEFAULT_BRANDS) -> int:
    existing = set(db.scalars(select(Brand.name)))
    new = [Brand(name=n) for n in names if n not in existing]
    db.add_all(new)
    return len(new)


def seed_defaults(db: Session) -> None:
    seed_order_statuses(db)
    seed_brands(db)
    db.commit()

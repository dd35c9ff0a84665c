# scripts/seed_data.py
# Заполняет БД демо-данными: справочники и несколько товаров.
# Схема должна быть уже создана: alembic upgrade head
from sqlalchemy import select

from mye_backend.core.config import settings
from mye_backend.db.seed import seed_defaults
from mye_backend.db.session import Database
from mye_backend.models.product import Product
from mye_backend.schemas.product import ProductCreate
from mye_backend.services.products import create_product

DEMO_PRODUCTS = [
    {
        "name": "Schneider Electric Acti9 iC60N 3P 25A C Curve MCB",
        "sku": "SCH-IC60N-3P25A",
        "brand": "SCHNEIDER ELECTRIC",
        "category": "Devre Kesiciler",
        "originalPrice": 119.90,
        "currentPrice": 89.90,
        "rating": 4.8,
        "reviewCount": 127,
        "stockQuantity": 45,
        "images": ["/placeholder-product.jpg"],
        "description": "Acti9 iC60N series circuit breaker for industrial and commercial installations.",
        "features": ["3 poles (3P)", "25A rated current", "C curve", "6kA breaking capacity", "DIN rail mounting"],
        "technicalSpecs": [
            {"label": "Poles", "value": "3P"},
            {"label": "Rated current", "value": "25A"},
            {"label": "Standard", "value": "IEC 60898-1"},
        ],
    },
    {
        "name": "ABB S201M-C16 Miniature Circuit Breaker - 1P - 16A",
        "sku": "SKU-002",
        "brand": "ABB",
        "category": "Devre Kesiciler",
        "originalPrice": 65.00,
        "currentPrice": 55.90,
        "stockQuantity": 8,
        "features": ["1 pole", "16A rated current", "10kA breaking capacity"],
    },
    {
        "name": "SIEMENS 5SY4206-7 Circuit Breaker - 2P - 20A - C Curve",
        "sku": "SKU-003",
        "brand": "SIEMENS",
        "category": "Devre Kesiciler",
        "originalPrice": 140.00,
        "currentPrice": 129.50,
        "stockQuantity": 0,
    },
    {
        "name": "LEGRAND DX3 MCB - 3P - 32A - C Curve",
        "sku": "SKU-004",
        "brand": "LEGRAND",
        "category": "Devre Kesiciler",
        "originalPrice": 210.00,
        "currentPrice": 189.00,
        "stockQuantity": 25,
    },
]


def main() -> None:
    database = Database(settings.DATABASE_URL)
    database.start()
    try:
        with database.session() as db:
            seed_defaults(db)
            existing = set(db.scalars(select(Product.sku)))
            created = 0
            for data in DEMO_PRODUCTS:
                if data["sku"] in existing:
                    continue
                create_product(db, ProductCreate.model_validate(data))
                created += 1
            print(f"Seed complete: {created} products created")
    finally:
        database.shutdown()


if __name__ == "__main__":
    main()

# mye_backend/services/stock.py
# Пересчёт остатков склада. Чистые функции, без обращения к БД.
from mye_backend.core.errors import InsufficientStockError
from mye_backend.models.product import StockStatus

# Остаток <= порога считается "low_stock"
LOW_STOCK_THRESHOLD = 10


def stock_status_for(quantity: int) -> StockStatus:
    """Статус склада как функция количества: 0 / <=10 / >10."""
    if quantity <= 0:
        return StockStatus.out_of_stock
    if quantity <= LOW_STOCK_THRESHOLD:
        return StockStatus.low_stock
    return StockStatus.in_stock


def adjust_stock(current_quantity: int, requested_quantity: int, item_name: str = "item") -> tuple[int, StockStatus]:
    """
    Списывает requested_quantity со склада.

    Returns:
        (новое количество, новый статус склада)

    Raises:
        InsufficientStockError: если на складе меньше, чем запрошено
    """
    if requested_quantity < 0:
        raise ValueError("requested_quantity must not be negative")
    if current_quantity < requested_quantity:
        raise InsufficientStockError(item_name, current_quantity, requested_quantity)
    new_quantity = current_quantity - requested_quantity
    return new_quantity, stock_status_for(new_quantity)

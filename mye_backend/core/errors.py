# mye_backend/core/errors.py
# Иерархия доменных ошибок. Каждый класс знает свой HTTP-статус,
# обработчик в main.py превращает их в JSON-ответ.


class ShopError(Exception):
    """Базовое исключение для всех ошибок бэкенда."""

    status_code = 500


class RequestValidationFailed(ShopError):
    """Некорректные или отсутствующие поля запроса."""

    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class InsufficientStockError(ShopError):
    """Запрошено больше единиц товара, чем есть на складе."""

    status_code = 400

    def __init__(self, item_name: str, available: int, requested: int):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item_name}: {available} available, {requested} requested."
        )


class UnknownStatusError(ShopError):
    status_code = 400

    def __init__(self, status: str | None, valid: list[str]):
        self.status = status
        self.valid = valid
        super().__init__(f"Status must be one of: {', '.join(valid)}")


class StatusUnchangedError(ShopError):
    status_code = 400

    def __init__(self, status: str):
        self.status = status
        super().__init__("Order is already in this status")


class InvalidStatusTransitionError(ShopError):
    """Переход отсутствует в таблице переходов."""

    status_code = 400

    def __init__(self, current: str, target: str, allowed: list[str], current_name: str, target_name: str):
        self.current = current
        self.target = target
        self.allowed = allowed
        reachable = ", ".join(allowed) if allowed else "none"
        super().__init__(
            f'Cannot transition from "{current_name}" to "{target_name}". '
            f"Allowed transitions: {reachable}"
        )


class DuplicateError(ShopError):
    """Нарушение уникальности (SKU, имя бренда)."""

    status_code = 400


class EmptyUpdateError(ShopError):
    status_code = 400

    def __init__(self):
        super().__init__("No fields provided to update")


class InvalidUploadError(ShopError):
    status_code = 400


class NotFoundError(ShopError):
    status_code = 404


class OrderNotFoundError(NotFoundError):
    def __init__(self, ref: int | str):
        self.ref = ref
        if isinstance(ref, str):
            super().__init__(f'Order with number "{ref}" not found')
        else:
            super().__init__("Order not found")


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("Product not found or deleted")


class BrandNotFoundError(NotFoundError):
    def __init__(self, brand_id: int):
        self.brand_id = brand_id
        super().__init__("Brand not found or already deleted")


class UploadNotFoundError(NotFoundError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"File not found: {filename}")


class ConflictError(ShopError):
    """Параллельный запрос занял уникальное значение — клиент может повторить запрос."""

    status_code = 409


class OrderNumberConflictError(ConflictError):
    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Order number {order_number} is already taken, please retry")


class CustomerConflictError(ConflictError):
    """Два первых заказа с одним новым email пришли одновременно."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Customer {email} was registered by a concurrent order, please retry")

# mye_backend/services/order_status.py
# Машина состояний заказа: таблица переходов и проверка запрошенного статуса.
from mye_backend.core.errors import (
    InvalidStatusTransitionError,
    StatusUnchangedError,
    UnknownStatusError,
)
from mye_backend.models.order import ORDER_STATUS_CATALOG, OrderStatus

INITIAL_STATUS = OrderStatus.order_received

TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.order_received: (OrderStatus.preparing, OrderStatus.cancelled),
    OrderStatus.preparing: (OrderStatus.shipped, OrderStatus.cancelled),
    OrderStatus.shipped: (OrderStatus.completed, OrderStatus.returned),
    OrderStatus.returned: (OrderStatus.completed, OrderStatus.cancelled),
    OrderStatus.cancelled: (),
    OrderStatus.completed: (),
}

_DISPLAY_NAMES = {status: name for status, name, *_ in ORDER_STATUS_CATALOG}


def display_name(status: OrderStatus | str) -> str:
    try:
        return _DISPLAY_NAMES[OrderStatus(status)]
    except ValueError:
        return str(status)


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def allowed_targets(status: OrderStatus | str) -> list[OrderStatus]:
    return list(TRANSITIONS[OrderStatus(status)])


def parse_status(value: str | None) -> OrderStatus:
    """Строка из запроса -> OrderStatus, иначе UnknownStatusError."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise UnknownStatusError(value, [s.value for s in OrderStatus])


def validate_transition(current: OrderStatus | str, target: OrderStatus | str) -> OrderStatus:
    """
    Проверяет переход current -> target.

    Returns:
        target в виде OrderStatus

    Raises:
        UnknownStatusError: target не входит в список статусов
        StatusUnchangedError: заказ уже в этом статусе
        InvalidStatusTransitionError: перехода нет в таблице
    """
    target = parse_status(target)
    current = OrderStatus(current)
    if current == target:
        raise StatusUnchangedError(target.value)
    allowed = TRANSITIONS[current]
    if target not in allowed:
        raise InvalidStatusTransitionError(
            current.value,
            target.value,
            [s.value for s in allowed],
            display_name(current),
            display_name(target),
        )
    return target

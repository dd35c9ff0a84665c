# mye_backend/services/orders.py
# Чтение заказов (список, карточка, история, сводка) и смена статуса.
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from mye_backend.core.errors import OrderNotFoundError
from mye_backend.models.order import (
    Order,
    OrderStatus,
    OrderStatusDefinition,
    OrderStatusHistory,
)
from mye_backend.models.user import User
from mye_backend.services.notifications import StatusChangeEvent
from mye_backend.services.order_status import display_name, parse_status, validate_transition

logger = logging.getLogger(__name__)

ORDER_SORT_FIELDS = {
    "created_at": Order.created_at,
    "updated_at": Order.updated_at,
    "grand_total": Order.grand_total,
    "order_number": Order.order_number,
}

_ORDER_LOAD_OPTIONS = (
    joinedload(Order.user),
    joinedload(Order.delivery_address),
    joinedload(Order.payment_info),
    selectinload(Order.items),
)


def list_orders(
    db: Session,
    email: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "created_at",
    sort_order: str = "DESC",
) -> tuple[list[Order], int]:
    """Страница заказов и общее количество под фильтром."""
    query = select(Order).outerjoin(User, Order.user_id == User.id)
    if email:
        query = query.where(User.email == email)
    if status:
        query = query.where(Order.status == status)

    total = db.scalar(select(func.count()).select_from(query.subquery()))

    # Неизвестное поле сортировки молча заменяется на created_at
    sort_column = ORDER_SORT_FIELDS.get(sort_by, Order.created_at)
    ordering = sort_column.asc() if sort_order.upper() == "ASC" else sort_column.desc()

    orders = db.scalars(
        query.options(*_ORDER_LOAD_OPTIONS)
        .order_by(ordering, Order.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).unique().all()
    return list(orders), total


def get_order(db: Session, order_id: int) -> Order:
    order = db.scalar(
        select(Order)
        .where(Order.id == order_id)
        .options(*_ORDER_LOAD_OPTIONS, selectinload(Order.status_history))
    )
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


def get_status_history(db: Session, order_id: int) -> list[OrderStatusHistory]:
    if db.scalar(select(Order.id).where(Order.id == order_id)) is None:
        raise OrderNotFoundError(order_id)
    rows = db.scalars(
        select(OrderStatusHistory)
        .where(OrderStatusHistory.order_id == order_id)
        .order_by(OrderStatusHistory.created_at.desc(), OrderStatusHistory.id.desc())
    )
    return list(rows)


def orders_summary(db: Session) -> dict:
    total_orders = db.scalar(select(func.count(Order.id))) or 0
    # Выручка считается только по завершённым заказам
    total_revenue = db.scalar(
        select(func.coalesce(func.sum(Order.grand_total), 0)).where(Order.status == OrderStatus.completed)
    )
    counts = {s: 0 for s in OrderStatus}
    for status, count in db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)):
        counts[OrderStatus(status)] = count
    return {
        "total_orders": total_orders,
        "total_revenue": float(total_revenue or 0),
        "order_received_orders": counts[OrderStatus.order_received],
        "preparing_orders": counts[OrderStatus.preparing],
        "shipped_orders": counts[OrderStatus.shipped],
        "returned_orders": counts[OrderStatus.returned],
        "cancelled_orders": counts[OrderStatus.cancelled],
        "completed_orders": counts[OrderStatus.completed],
    }


def list_status_definitions(db: Session) -> list[OrderStatusDefinition]:
    rows = db.scalars(
        select(OrderStatusDefinition)
        .where(OrderStatusDefinition.is_active.is_(True))
        .order_by(OrderStatusDefinition.display_order.asc())
    )
    return list(rows)


def order_lock_query(order_ref: int | str) -> Select:
    """Заказ по id или номеру с блокировкой строки orders (FOR UPDATE OF orders)."""
    query = select(Order).options(joinedload(Order.user))
    if isinstance(order_ref, str):
        query = query.where(Order.order_number == order_ref)
    else:
        query = query.where(Order.id == order_ref)
    # Две смены статуса одного заказа выполняются по очереди
    return query.with_for_update(of=Order)


def change_status(
    db: Session,
    order_ref: int | str,
    target: Optional[str],
    actor: str,
    notes: Optional[str] = None,
) -> tuple[Order, StatusChangeEvent]:
    """
    Переводит заказ в новый статус и пишет строку истории в одной транзакции.

    order_ref — id заказа (int) или его номер (str).

    Returns:
        (обновлённый заказ, событие для уведомления после коммита)
    """
    new_status = parse_status(target)
    try:
        order = db.scalar(order_lock_query(order_ref))
        if order is None:
            raise OrderNotFoundError(order_ref)

        old_status = OrderStatus(order.status)
        validate_transition(old_status, new_status)

        order.status = new_status
        order.updated_at = datetime.utcnow()
        db.add(
            OrderStatusHistory(
                order_id=order.id,
                old_status=old_status,
                new_status=new_status,
                changed_by=actor,
                notes=notes or None,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f'Order #{order.order_number} status updated from "{display_name(old_status)}" '
        f'to "{display_name(new_status)}" by {actor}'
    )
    event = StatusChangeEvent(
        order_id=order.id,
        order_number=order.order_number,
        email=order.user.email if order.user else None,
        old_status=old_status.value,
        new_status=new_status.value,
    )
    return order, event

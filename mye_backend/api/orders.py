# mye_backend/api/orders.py
# Роуты заказов: список, сводка, справочник статусов, карточка, история и смена статуса.
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from mye_backend.core.security import get_actor
from mye_backend.db.session import get_db
from mye_backend.models.order import OrderStatus
from mye_backend.schemas.common import Pagination
from mye_backend.schemas.order import (
    OrderDetailOut,
    OrderOut,
    OrderStatusDefinitionOut,
    OrderSummary,
    StatusChangeRequest,
    StatusHistoryOut,
)
from mye_backend.services import orders as order_service
from mye_backend.services.notifications import dispatch_status_change
from mye_backend.services.order_status import display_name

router = APIRouter()


@router.get("")
def list_orders(
    email: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    orders, total = order_service.list_orders(
        db, email=email, status=status, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
    )
    return {
        "success": True,
        "data": [OrderOut.from_order(o) for o in orders],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/summary")
def orders_summary(db: Session = Depends(get_db)):
    return {"success": True, "data": OrderSummary(**order_service.orders_summary(db))}


@router.get("/statuses")
def order_statuses(db: Session = Depends(get_db)):
    rows = order_service.list_status_definitions(db)
    return {"success": True, "data": [OrderStatusDefinitionOut.model_validate(r) for r in rows]}


@router.get("/{order_id}")
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = order_service.get_order(db, order_id)
    return {"success": True, "data": OrderDetailOut.from_order(order)}


@router.get("/{order_id}/status-history")
def status_history(order_id: int, db: Session = Depends(get_db)):
    rows = order_service.get_status_history(db, order_id)
    return {"success": True, "data": [StatusHistoryOut.model_validate(r) for r in rows]}


def _change_status(
    order_ref: int | str,
    body: StatusChangeRequest,
    actor: str,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session,
) -> dict:
    order, event = order_service.change_status(db, order_ref, body.status, actor, body.notes)
    # Уведомление уходит после ответа и уже закоммиченной транзакции
    background_tasks.add_task(dispatch_status_change, request.app.state.notifier, event)
    order = order_service.get_order(db, order.id)
    return {
        "success": True,
        "message": (
            f'Order #{order.order_number} status updated from "{display_name(event.old_status)}" '
            f'to "{display_name(event.new_status)}"'
        ),
        "data": OrderDetailOut.from_order(order),
    }


@router.patch("/by-number/{order_number}/status")
def change_status_by_number(
    order_number: str,
    body: StatusChangeRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return _change_status(order_number, body, actor, request, background_tasks, db)


@router.patch("/{order_id}/status")
def change_status(
    order_id: int,
    body: StatusChangeRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return _change_status(order_id, body, actor, request, background_tasks, db)

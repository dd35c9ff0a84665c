# mye_backend/schemas/order.py
# Схемы ответов по заказам и тело запроса смены статуса.
from datetime import datetime
from typing import Optional

from mye_backend.models.order import Order, OrderStatus, PaymentStatus
from mye_backend.schemas.common import CamelModel


class OrderItemOut(CamelModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_price: float
    quantity: int
    product_image: Optional[str] = None


class DeliveryAddressOut(CamelModel):
    id: int
    address: str
    city: str
    district: str
    postal_code: Optional[str] = None


class PaymentInfoOut(CamelModel):
    id: int
    payment_status: PaymentStatus


class StatusHistoryOut(CamelModel):
    id: int
    old_status: Optional[OrderStatus] = None
    new_status: OrderStatus
    changed_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class OrderOut(CamelModel):
    id: int
    order_number: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    total_price: float
    kdv: float
    grand_total: float
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    delivery_address: Optional[DeliveryAddressOut] = None
    payment_info: Optional[PaymentInfoOut] = None
    items: list[OrderItemOut] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderOut":
        # Контактные поля берутся из пользователя; он может быть удалён (SET NULL)
        user = order.user
        return cls(
            id=order.id,
            order_number=order.order_number,
            first_name=user.first_name if user else None,
            last_name=user.last_name if user else None,
            email=user.email if user else None,
            phone=user.phone if user else None,
            total_price=order.total_price,
            kdv=order.kdv,
            grand_total=order.grand_total,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
            delivery_address=(
                DeliveryAddressOut.model_validate(order.delivery_address) if order.delivery_address else None
            ),
            payment_info=PaymentInfoOut.model_validate(order.payment_info) if order.payment_info else None,
            items=[OrderItemOut.model_validate(item) for item in order.items],
        )


class OrderDetailOut(OrderOut):
    status_history: list[StatusHistoryOut] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderDetailOut":
        base = OrderOut.from_order(order)
        history = [StatusHistoryOut.model_validate(row) for row in order.status_history]
        return cls(**dict(base), status_history=history)


class StatusChangeRequest(CamelModel):
    status: Optional[str] = None
    notes: Optional[str] = None


class OrderSummary(CamelModel):
    total_orders: int
    total_revenue: float
    order_received_orders: int
    preparing_orders: int
    shipped_orders: int
    returned_orders: int
    cancelled_orders: int
    completed_orders: int


class OrderStatusDefinitionOut(CamelModel):
    value: str
    name: str
    name_en: str
    color: Optional[str] = None
    display_order: int
    is_active: bool

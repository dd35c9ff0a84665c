# mye_backend/models/order.py
# Модели заказа: Order, OrderItem, DeliveryAddress, PaymentInfo,
# журнал смены статусов OrderStatusHistory и справочник статусов.
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, Enum, Text, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from mye_backend.db.base import Base
import enum


class OrderStatus(str, enum.Enum):
    order_received = "order_received"
    preparing = "preparing"
    shipped = "shipped"
    returned = "returned"
    cancelled = "cancelled"
    completed = "completed"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


# Сид справочника order_statuses: value, name (TR), name_en, color, display_order
ORDER_STATUS_CATALOG = (
    (OrderStatus.order_received, "Sipariş Alındı", "Order Received", "blue", 1),
    (OrderStatus.preparing, "Hazırlanıyor", "Preparing", "orange", 2),
    (OrderStatus.shipped, "Kargoya Verildi", "Shipped", "cyan", 3),
    (OrderStatus.returned, "İade Edildi", "Returned", "purple", 4),
    (OrderStatus.cancelled, "İptal", "Cancelled", "red", 5),
    (OrderStatus.completed, "Tamamlandı", "Completed", "green", 6),
)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), unique=True, index=True, nullable=False)
    # Слабая ссылка: удаление пользователя не удаляет его заказы
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    total_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    kdv = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    grand_total = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status = Column(
        Enum(OrderStatus, native_enum=False, length=20),
        nullable=False,
        default=OrderStatus.order_received,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User")
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")
    delivery_address = relationship("DeliveryAddress", back_populates="order", uselist=False)
    payment_info = relationship("PaymentInfo", back_populates="order", uselist=False)
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        order_by="OrderStatusHistory.id.desc()",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Снимок товара на момент покупки; product_id — лишь обратная ссылка
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = Column(String(255), nullable=False)
    product_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    quantity = Column(Integer, nullable=False)
    product_image = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="items")


class DeliveryAddress(Base):
    __tablename__ = "delivery_addresses"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    district = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="delivery_address")


class PaymentInfo(Base):
    __tablename__ = "payment_info"

    # Данные карты здесь не хранятся — только статус оплаты
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)
    payment_status = Column(
        Enum(PaymentStatus, native_enum=False, length=20),
        nullable=False,
        default=PaymentStatus.pending,
    )
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="payment_info")


class OrderStatusHistory(Base):
    __tablename__ = "order_status_history"

    # Только вставка: строки не меняются и не удаляются
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    old_status = Column(Enum(OrderStatus, native_enum=False, length=20), nullable=True)
    new_status = Column(Enum(OrderStatus, native_enum=False, length=20), nullable=False)
    changed_by = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="status_history")


class OrderStatusDefinition(Base):
    __tablename__ = "order_statuses"

    id = Column(Integer, primary_key=True, index=True)
    value = Column(String(50), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    name_en = Column(String(100), nullable=False)
    color = Column(String(20), nullable=True)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

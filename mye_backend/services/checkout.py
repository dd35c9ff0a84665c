# mye_backend/services/checkout.py
# Оформление заказа: одна транзакция на пользователя, заказ, адрес, оплату,
# позиции и списание склада. Любая ошибка откатывает всё целиком.
import logging
import random
import time

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mye_backend.core.errors import CustomerConflictError, OrderNumberConflictError
from mye_backend.models.order import (
    DeliveryAddress,
    Order,
    OrderItem,
    OrderStatusHistory,
    PaymentInfo,
    PaymentStatus,
)
from mye_backend.models.product import Product
from mye_backend.models.user import User
from mye_backend.schemas.checkout import CheckoutRequest, CheckoutResult, PersonalInfo
from mye_backend.services.order_status import INITIAL_STATUS
from mye_backend.services.stock import adjust_stock

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


def generate_order_number(prefix: str = "MYE") -> str:
    """Человекочитаемый номер: PREFIX-<миллисекунды>-<0..999>. Уникальность страхует индекс."""
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{random.randint(0, 999)}"


def upsert_user(db: Session, info: PersonalInfo) -> User:
    """Находит покупателя по email и обновляет контакты, либо создаёт нового."""
    user = db.scalar(select(User).where(User.email == info.email))
    if user is None:
        user = User(
            first_name=info.first_name,
            last_name=info.last_name,
            email=info.email,
            phone=info.phone,
        )
        db.add(user)
    else:
        user.first_name = info.first_name
        user.last_name = info.last_name
        user.phone = info.phone
    return user


def product_lock_query(product_ids: set[int]) -> Select:
    # SELECT ... FOR UPDATE в порядке id: параллельный заказ тех же товаров
    # ждёт коммита и видит уже списанный остаток, порядок исключает взаимную блокировку
    return select(Product).where(Product.id.in_(product_ids)).order_by(Product.id).with_for_update()


def _lock_products(db: Session, product_ids: set[int]) -> dict[int, Product]:
    if not product_ids:
        return {}
    return {p.id: p for p in db.scalars(product_lock_query(product_ids))}


def _conflict_for(error: IntegrityError, order_number: str, email: str):
    """Нарушение уникальности номера заказа или email -> 409, иначе None."""
    message = str(error.orig)
    if "order_number" in message:
        return OrderNumberConflictError(order_number)
    # sqlite: "users.email", Postgres: индекс ix_users_email
    if "users.email" in message or "ix_users_email" in message:
        return CustomerConflictError(email)
    return None


def place_order(db: Session, payload: CheckoutRequest, order_number_prefix: str = "MYE") -> CheckoutResult:
    """
    Превращает корзину в заказ.

    Raises:
        InsufficientStockError: товара на складе меньше, чем в корзине
        OrderNumberConflictError: сгенерированный номер заказа уже занят
        CustomerConflictError: тот же новый покупатель создан параллельным заказом
    """
    order_number = generate_order_number(order_number_prefix)
    try:
        user = upsert_user(db, payload.personal_info)

        order = Order(
            order_number=order_number,
            user=user,
            total_price=payload.total_price,
            kdv=payload.kdv,
            grand_total=payload.grand_total,
            status=INITIAL_STATUS,
        )
        db.add(order)
        db.add(
            OrderStatusHistory(
                order=order,
                old_status=None,
                new_status=INITIAL_STATUS,
                changed_by=SYSTEM_ACTOR,
                notes="Order created",
            )
        )

        address = payload.delivery_address
        db.add(
            DeliveryAddress(
                order=order,
                address=address.address,
                city=address.city,
                district=address.district,
                postal_code=address.postal_code or None,
            )
        )

        # Оплата проходная: внешнего шлюза нет, карта проверена схемой и отброшена
        db.add(PaymentInfo(order=order, payment_status=PaymentStatus.completed))

        products = _lock_products(db, {i.product_id for i in payload.cart_items if i.product_id is not None})

        for item in payload.cart_items:
            product = products.get(item.product_id) if item.product_id is not None else None
            db.add(
                OrderItem(
                    order=order,
                    # ссылка только на реально существующий товар
                    product_id=product.id if product is not None else None,
                    product_name=item.name,
                    product_price=item.unit_price,
                    quantity=item.quantity,
                    product_image=item.image,
                )
            )

            if product is None or product.is_deleted:
                continue

            old_quantity = product.stock_quantity or 0
            new_quantity, new_status = adjust_stock(old_quantity, item.quantity, item.name)
            product.stock_quantity = new_quantity
            product.stock_status = new_status
            logger.info(
                f"✅ Stock updated: {item.name} - old: {old_quantity}, new: {new_quantity}, status: {new_status.value}"
            )

        db.commit()
    except IntegrityError as e:
        db.rollback()
        conflict = _conflict_for(e, order_number, payload.personal_info.email)
        if conflict is not None:
            raise conflict from e
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(f"Order {order_number} created for {payload.personal_info.email}")
    return CheckoutResult(order_id=order.id, order_number=order.order_number, grand_total=order.grand_total)

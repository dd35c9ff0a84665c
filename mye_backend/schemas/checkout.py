# mye_backend/schemas/checkout.py
# Тело запроса оформления заказа. Данные карты проверяются только по форме
# и дальше схемы не уходят — в БД их нет.
import re
from typing import Optional, Union

from pydantic import EmailStr, Field, field_validator

from mye_backend.schemas.common import CamelModel

EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")
CVV_RE = re.compile(r"^\d{3,4}$")


class PersonalInfo(CamelModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=20)


class DeliveryAddressIn(CamelModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1, max_length=100)
    district: str = Field(min_length=1, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)


class PaymentCard(CamelModel):
    card_number: str
    card_name: str = Field(min_length=1)
    expiry_date: str
    cvv: str

    @field_validator("card_number")
    @classmethod
    def check_card_number(cls, v: str) -> str:
        digits = re.sub(r"[\s-]", "", v)
        if not digits.isdigit() or not 12 <= len(digits) <= 19:
            raise ValueError("card number must contain 12-19 digits")
        return digits

    @field_validator("expiry_date")
    @classmethod
    def check_expiry(cls, v: str) -> str:
        if not EXPIRY_RE.match(v.strip()):
            raise ValueError("expiry date must be in MM/YY format")
        return v.strip()

    @field_validator("cvv")
    @classmethod
    def check_cvv(cls, v: str) -> str:
        if not CVV_RE.match(v.strip()):
            raise ValueError("cvv must be 3 or 4 digits")
        return v.strip()


class CartItemIn(CamelModel):
    id: Optional[Union[int, str]] = None
    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    current_price: Optional[float] = Field(default=None, ge=0)
    quantity: int = Field(ge=1)
    image: Optional[str] = Field(default=None, max_length=500)

    @property
    def unit_price(self) -> float:
        return self.current_price if self.current_price is not None else self.price

    @property
    def product_id(self) -> Optional[int]:
        """Целочисленный id товара, если корзина ссылается на существующий товар."""
        if isinstance(self.id, int):
            return self.id
        if isinstance(self.id, str) and self.id.strip().isdigit():
            return int(self.id.strip())
        return None


class CheckoutRequest(CamelModel):
    personal_info: PersonalInfo
    delivery_address: DeliveryAddressIn
    payment_info: PaymentCard
    cart_items: list[CartItemIn] = Field(min_length=1)
    total_price: float = Field(ge=0)
    kdv: float = Field(ge=0)
    grand_total: float = Field(ge=0)


class CheckoutResult(CamelModel):
    order_id: int
    order_number: str
    grand_total: float

# mye_backend/api/checkout.py
# Оформление заказа. /payment оставлен для совместимости со старым фронтендом.
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mye_backend.db.session import get_db
from mye_backend.schemas.checkout import CheckoutRequest
from mye_backend.services.checkout import place_order

router = APIRouter()


@router.post("/checkout", status_code=status.HTTP_201_CREATED)
@router.post("/payment", status_code=status.HTTP_201_CREATED, include_in_schema=False)
def checkout(payload: CheckoutRequest, request: Request, db: Session = Depends(get_db)):
    """
    Проверка корзины, создание заказа и списание склада одной транзакцией.
    Данные карты проверяются по форме и не сохраняются.
    """
    result = place_order(db, payload, order_number_prefix=request.app.state.settings.ORDER_NUMBER_PREFIX)
    return {"success": True, "message": "Payment processed successfully", "data": result}

# mye_backend/core/security.py
# JWT для идентификации администратора, меняющего статусы заказов.
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from mye_backend.core.config import Settings

# Актор по умолчанию, если запрос не несёт ни токена, ни X-User-Id
DEFAULT_ACTOR = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(subject: str, settings: Settings, expires_delta: timedelta | None = None) -> str:
    """Создаём JWT токен с полем sub = subject (имя или id администратора)."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(subject), "exp": datetime.now(timezone.utc) + expires_delta}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_subject(token: str, settings: Settings) -> str:
    """Возвращает sub из токена или бросает 401."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise credentials_exception
    subject = payload.get("sub")
    if not subject:
        raise credentials_exception
    return subject


def get_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    x_user_id: str | None = Header(default=None),
) -> str:
    """
    Кто меняет статус: sub из Bearer-токена, иначе заголовок X-User-Id,
    иначе "admin". Значение пишется в order_status_history.changed_by.
    """
    if credentials is not None:
        return decode_subject(credentials.credentials, request.app.state.settings)
    if x_user_id:
        return x_user_id
    return DEFAULT_ACTOR

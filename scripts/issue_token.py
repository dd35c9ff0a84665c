# scripts/issue_token.py
# Выпускает Bearer-токен администратора. sub токена попадает в
# order_status_history.changed_by при смене статуса заказа.
import argparse
from datetime import timedelta

from mye_backend.core.config import settings
from mye_backend.core.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue an admin bearer token")
    parser.add_argument("subject", help="admin name or id recorded as the status-change actor")
    parser.add_argument("--minutes", type=int, default=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    args = parser.parse_args()
    print(create_access_token(args.subject, settings, expires_delta=timedelta(minutes=args.minutes)))


if __name__ == '__main__':
    main()

# scripts/check_db.py
# Проверяет подключение к DATABASE_URL из mye_backend.core.config.settings
import sys

from mye_backend.core.config import settings
from mye_backend.db.session import Database


def main() -> int:
    database = Database(settings.DATABASE_URL)
    database.start()
    try:
        print('Trying to connect to:', database.engine.url.render_as_string(hide_password=True))
        if database.ping():
            print('Connection OK')
            return 0
        print('Connection failed')
        return 1
    finally:
        database.shutdown()


if __name__ == '__main__':
    sys.exit(main())

# mye_backend/db/session.py
# Клиент хранилища: engine + фабрика сессий с явным start/shutdown.
# Экземпляр создаётся в main.create_app и живёт в app.state, глобального engine нет.
# Поддерживает как Postgres, так и SQLite (для тестов/локального использования).

import logging
import time
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Database:
    """Обёртка над SQLAlchemy engine с жизненным циклом процесса."""

    def __init__(self, url: str):
        self.url = url
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    @property
    def started(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not started")
        return self._engine

    def start(self) -> None:
        if self.started:
            return
        kwargs = {}
        if self.url.startswith("sqlite"):
            # Для sqlite требуется check_same_thread=False; in-memory база
            # должна жить в одном соединении, иначе каждая сессия увидит пустую БД
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            # pool_pre_ping полезен для долгоживущих соединений с Postgres
            kwargs["pool_pre_ping"] = True
        self._engine = create_engine(self.url, **kwargs)
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info("Database engine created for %s", self._engine.url.render_as_string(hide_password=True))

    def shutdown(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("✅ Database connection closed")

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not started")
        return self._sessionmaker()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def wait_until_ready(self, retries: int = 5, delay: float = 2) -> bool:
        """
        Ждём, пока БД начнёт отвечать. Схему не трогаем — её ведёт Alembic.

        Returns:
            True если БД доступна, False если все попытки исчерпаны
        """
        for attempt in range(1, retries + 1):
            logger.info(f"Checking database connection ({attempt}/{retries})...")
            if self.ping():
                logger.info("✅ Database is reachable.")
                return True
            if attempt < retries:
                logger.info(f"⏳ Waiting {delay}s before retry...")
                time.sleep(delay)
        logger.error(f"❌ Database is unreachable after {retries} attempts.")
        return False


def get_db(request: Request) -> Iterator[Session]:
    """Зависимость для получения сессии БД в эндпоинтах."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()

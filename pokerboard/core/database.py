from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase


# SQLAlchemy 2.0 declarative base
class Base(DeclarativeBase):
    pass


def build_database_url(url: str, database_name: Optional[str] = None) -> str:
    """Swap the database part of ``url`` for ``database_name`` when given."""
    if not database_name:
        return url
    return make_url(url).set(database=database_name).render_as_string(
        hide_password=False
    )


def _engine_kwargs(
    url: str,
    pool_size: int,
    connect_timeout: int,
    pool_timeout: int,
    statement_timeout_ms: int,
) -> dict:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # TestClient and local scripts may access SQLite connections across threads.
        return {"connect_args": {"check_same_thread": False, "timeout": connect_timeout}}

    connect_args = {"connect_timeout": connect_timeout}
    if backend == "postgresql":
        connect_args["options"] = f"-c statement_timeout={statement_timeout_ms}"
    return {
        "connect_args": connect_args,
        "pool_size": pool_size,
        "pool_timeout": pool_timeout,
        "pool_pre_ping": True,
    }


class Database:
    """
    Process-wide persistence handle: one engine (and its pool) plus the
    session factory bound to it.

    Built once in the application lifespan and stored on
    ``app.state.database``; request handlers receive sessions through
    ``get_db``.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        connect_timeout: int = 5,
        pool_timeout: int = 10,
        statement_timeout_ms: int = 45000,
        **engine_kwargs,
    ):
        kwargs = _engine_kwargs(
            url, pool_size, connect_timeout, pool_timeout, statement_timeout_ms
        )
        kwargs.update(engine_kwargs)
        self.url = url
        self.engine = create_engine(url, **kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            build_database_url(settings.DATABASE_URL, settings.DATABASE_NAME),
            pool_size=settings.DB_POOL_SIZE,
            connect_timeout=settings.DB_CONNECT_TIMEOUT,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            statement_timeout_ms=settings.DB_STATEMENT_TIMEOUT_MS,
        )

    def create_all(self):
        # Import all models so they are registered on Base.metadata
        from pokerboard.models import leaderboard, player, session  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self):
        Base.metadata.drop_all(bind=self.engine)

    def ping(self):
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()

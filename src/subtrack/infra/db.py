from functools import lru_cache

from sqlalchemy import create_engine, MetaData
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from src.subtrack.core.settings import get_settings

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

class Base(DeclarativeBase):
    # Задаем naming convention для стабильных diff'ов и корректного drop/alter
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

def make_engine(dsn: str, statement_timeout: float | None = None, connect_timeout: float | None = None, **kw):
    connect_args = dict(kw.pop("connect_args", {}))
    if make_url(dsn).get_backend_name() == "postgresql":
        # Запрос, переживший дедлайн запроса, обрывается самим Postgres
        if statement_timeout:
            connect_args["options"] = f"-c statement_timeout={int(statement_timeout * 1000)}"
        if connect_timeout:
            connect_args["connect_timeout"] = max(1, int(connect_timeout))
    return create_engine(dsn, pool_pre_ping=True, connect_args=connect_args, **kw)

def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

@lru_cache
def get_engine() -> Engine:
    s = get_settings()
    return make_engine(
        s.DB_URL,
        statement_timeout=s.HTTP_WRITE_TIMEOUT,
        connect_timeout=s.HTTP_READ_TIMEOUT,
    )

@lru_cache
def get_session_factory() -> sessionmaker:
    return make_session_factory(get_engine())

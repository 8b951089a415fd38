import json
from functools import partial
from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..core.config import settings
from ..core.context import current_tenant


# Translatable JSON columns are searched as text, so non-ASCII letters are stored unescaped
_json_serializer = partial(json.dumps, ensure_ascii=False)


def _build_engine(url: str) -> Engine:
    return create_engine(
        url,
        json_serializer=_json_serializer,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=10,
        max_overflow=20,
        echo=False,
    )


# Create database engine
if settings.TESTING:
    # Use in-memory SQLite for testing; every tenant shares it
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={
            "check_same_thread": False,
        },
        poolclass=StaticPool,
        json_serializer=_json_serializer,
    )
else:
    engine = _build_engine(settings.DATABASE_URL)

# Create session factory for the central database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_tenant_engines: Dict[str, Engine] = {}


def tenant_database_url(database: str) -> str:
    return settings.TENANT_DATABASE_URL_TEMPLATE.format(database=database)


def get_tenant_engine(database: str) -> Engine:
    """Engine for a tenant database, created on first use"""
    if settings.TESTING:
        return engine
    if database not in _tenant_engines:
        _tenant_engines[database] = _build_engine(tenant_database_url(database))
    return _tenant_engines[database]


def dispose_tenant_engine(database: str) -> None:
    tenant_engine = _tenant_engines.pop(database, None)
    if tenant_engine is not None:
        tenant_engine.dispose()


def create_session() -> Session:
    """Session bound to the current tenant database, or central when none"""
    tenant = current_tenant()
    if tenant is None:
        return SessionLocal()
    return Session(bind=get_tenant_engine(tenant.database), autoflush=False)


def get_db():
    """Dependency to get database session."""
    db = create_session()
    try:
        yield db
    finally:
        db.close()

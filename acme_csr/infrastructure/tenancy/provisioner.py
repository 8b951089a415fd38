"""Creates and drops tenant databases"""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ...core.config import settings
from ...db.database import engine as central_engine, get_tenant_engine, dispose_tenant_engine
from ...db.models import Base
from .. import orm  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


class TenantDatabaseProvisioner:

    def __init__(self, central: Engine = None):
        self.central = central if central is not None else central_engine

    def _supports_create_database(self) -> bool:
        return not settings.TESTING and self.central.dialect.name == "postgresql"

    def create_database(self, database: str) -> None:
        if self._supports_create_database():
            with self.central.connect().execution_options(isolation_level="AUTOCOMMIT") as connection:
                exists = connection.execute(
                    text("SELECT 1 FROM pg_database WHERE datname = :name"), {"name": database}
                ).scalar()
                if not exists:
                    connection.execute(text(f'CREATE DATABASE "{database}"'))
                    logger.info(f"Created tenant database {database}")
        self.migrate(database)

    def migrate(self, database: str) -> None:
        Base.metadata.create_all(bind=get_tenant_engine(database))

    def drop_database(self, database: str) -> None:
        dispose_tenant_engine(database)
        if self._supports_create_database():
            with self.central.connect().execution_options(isolation_level="AUTOCOMMIT") as connection:
                connection.execute(text(f'DROP DATABASE IF EXISTS "{database}"'))
            logger.info(f"Dropped tenant database {database}")

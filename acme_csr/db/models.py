"""Declarative base and column mixins shared by the ORM models"""

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Model classes live in infrastructure/orm/; nothing is imported here to
# avoid circular dependencies.


class TimestampMixin:
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class SoftDeleteMixin:
    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

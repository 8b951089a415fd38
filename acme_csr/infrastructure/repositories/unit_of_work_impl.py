"""Unit of Work implementation with proper async support"""

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ...domain.repositories.unit_of_work import IUnitOfWork
from .audit_repository_impl import AuditLogRepositoryImpl
from .campaign_repository_impl import CampaignRepositoryImpl
from .category_repository_impl import CategoryRepositoryImpl
from .currency_repository_impl import CurrencyRepositoryImpl
from .donation_repository_impl import DonationRepositoryImpl
from .job_repositories_impl import ExportJobRepositoryImpl, ImportJobRepositoryImpl
from .notification_repository_impl import NotificationRepositoryImpl
from .organization_repository_impl import OrganizationRepositoryImpl
from .stats_repository_impl import StatsRepositoryImpl
from .team_repository_impl import TeamRepositoryImpl
from .tenant_repository_impl import TenantRepositoryImpl
from .user_repository_impl import UserRepositoryImpl
from .. import observers  # noqa: F401  registers the ORM listeners

logger = logging.getLogger(__name__)


class UnitOfWorkImpl(IUnitOfWork):

    def __init__(self, session: Session, event_publisher: Optional[Callable[[List], None]] = None, close_session: bool = False):
        self.session = session
        self._close_session = close_session
        self.users = UserRepositoryImpl(session)
        self.organizations = OrganizationRepositoryImpl(session)
        self.campaigns = CampaignRepositoryImpl(session)
        self.donations = DonationRepositoryImpl(session)
        self.categories = CategoryRepositoryImpl(session)
        self.currencies = CurrencyRepositoryImpl(session)
        self.teams = TeamRepositoryImpl(session)
        self.tenants = TenantRepositoryImpl(session)
        self.notifications = NotificationRepositoryImpl(session)
        self.exports = ExportJobRepositoryImpl(session)
        self.imports = ImportJobRepositoryImpl(session)
        self.audit_logs = AuditLogRepositoryImpl(session)
        self.stats = StatsRepositoryImpl(session)
        self._event_publisher = event_publisher
        self._pending_events: List = []
        self._committed = False

    async def __aenter__(self):
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                await self.rollback()
            elif not self._committed:
                await self.commit()
        finally:
            if self._close_session:
                self.session.close()

    def collect(self, *entities) -> None:
        """Queue the domain events of entities for publication after commit"""
        for entity in entities:
            self._pending_events.extend(entity.get_events())

    async def commit(self) -> None:
        """Commit transaction"""
        try:
            self.session.commit()
            self._committed = True
        except Exception:
            self.rollback_sync()
            raise
        events, self._pending_events = self._pending_events, []
        if events and self._event_publisher is not None:
            self._event_publisher(events)

    async def rollback(self) -> None:
        """Rollback transaction"""
        self.rollback_sync()

    def rollback_sync(self) -> None:
        """Synchronous rollback helper"""
        self._pending_events = []
        self.session.rollback()


def unit_of_work_factory(event_publisher: Optional[Callable[[List], None]] = None) -> Callable[[], UnitOfWorkImpl]:
    """Factory of units of work that each own a session bound to the current tenant"""
    from ...db.database import create_session

    def build() -> UnitOfWorkImpl:
        return UnitOfWorkImpl(create_session(), event_publisher, close_session=True)

    return build

"""Unit of Work interface for transaction management"""

from abc import ABC, abstractmethod

from .audit_repository import IAuditLogRepository
from .campaign_repository import ICampaignRepository
from .category_repository import ICategoryRepository
from .currency_repository import ICurrencyRepository
from .donation_repository import IDonationRepository
from .job_repositories import IExportJobRepository, IImportJobRepository
from .notification_repository import INotificationRepository
from .organization_repository import IOrganizationRepository
from .stats_repository import IStatsRepository
from .team_repository import ITeamRepository
from .tenant_repository import ITenantRepository
from .user_repository import IUserRepository


class IUnitOfWork(ABC):
    """Unit of Work interface for managing transactions across repositories"""

    users: IUserRepository
    organizations: IOrganizationRepository
    campaigns: ICampaignRepository
    donations: IDonationRepository
    categories: ICategoryRepository
    currencies: ICurrencyRepository
    teams: ITeamRepository
    tenants: ITenantRepository
    notifications: INotificationRepository
    exports: IExportJobRepository
    imports: IImportJobRepository
    audit_logs: IAuditLogRepository
    stats: IStatsRepository

    @abstractmethod
    async def __aenter__(self):
        """Enter async context"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context"""
        pass

    @abstractmethod
    def collect(self, *entities) -> None:
        """Queue domain events raised by entities until commit"""
        pass

    @abstractmethod
    async def commit(self):
        """Commit transaction"""
        pass

    @abstractmethod
    async def rollback(self):
        """Rollback transaction"""
        pass

"""Infrastructure ORM Models"""

from .organization_model import OrganizationModel
from .user_model import UserModel
from .category_model import CategoryModel
from .campaign_model import CampaignModel
from .donation_model import DonationModel
from .currency_model import CurrencyModel
from .team_model import TeamModel, TeamMemberModel
from .tenant_model import TenantModel
from .notification_model import NotificationModel
from .job_models import ExportJobModel, ImportJobModel
from .audit_log_model import AuditLogModel

__all__ = [
    'OrganizationModel',
    'UserModel',
    'CategoryModel',
    'CampaignModel',
    'DonationModel',
    'CurrencyModel',
    'TeamModel',
    'TeamMemberModel',
    'TenantModel',
    'NotificationModel',
    'ExportJobModel',
    'ImportJobModel',
    'AuditLogModel',
]

"""Domain enums"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @classmethod
    def from_string(cls, value: str) -> "CampaignStatus":
        normalized = value.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Invalid campaign status: {value}")

    @classmethod
    def try_from_string(cls, value: Optional[str]) -> Optional["CampaignStatus"]:
        if value is None:
            return None
        try:
            return cls.from_string(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return _CAMPAIGN_STATUS_LABELS[self]

    @property
    def color(self) -> str:
        return _CAMPAIGN_STATUS_COLORS[self]

    @property
    def description(self) -> str:
        return _CAMPAIGN_STATUS_DESCRIPTIONS[self]

    def allowed_transitions(self) -> List["CampaignStatus"]:
        return list(_CAMPAIGN_TRANSITIONS.get(self, []))

    def can_transition_to(self, new_status: "CampaignStatus") -> bool:
        return new_status in _CAMPAIGN_TRANSITIONS.get(self, [])

    def is_final(self) -> bool:
        return not _CAMPAIGN_TRANSITIONS.get(self)

    def is_one_of(self, *statuses: "CampaignStatus") -> bool:
        return self in statuses

    def accepts_donations(self) -> bool:
        return self == CampaignStatus.ACTIVE

    @classmethod
    def public_statuses(cls) -> Tuple["CampaignStatus", ...]:
        """Statuses anyone may see; the rest are limited to the owner and campaign managers"""
        return (cls.ACTIVE, cls.COMPLETED)

    def is_public(self) -> bool:
        return self in CampaignStatus.public_statuses()


_CAMPAIGN_TRANSITIONS: Dict[CampaignStatus, List[CampaignStatus]] = {
    CampaignStatus.DRAFT: [CampaignStatus.PENDING_APPROVAL, CampaignStatus.CANCELLED],
    CampaignStatus.PENDING_APPROVAL: [CampaignStatus.ACTIVE, CampaignStatus.REJECTED],
    CampaignStatus.REJECTED: [CampaignStatus.DRAFT, CampaignStatus.PENDING_APPROVAL, CampaignStatus.CANCELLED],
    CampaignStatus.ACTIVE: [
        CampaignStatus.PAUSED,
        CampaignStatus.COMPLETED,
        CampaignStatus.CANCELLED,
        CampaignStatus.EXPIRED,
    ],
    CampaignStatus.PAUSED: [CampaignStatus.ACTIVE, CampaignStatus.CANCELLED, CampaignStatus.EXPIRED],
    CampaignStatus.COMPLETED: [],
    CampaignStatus.CANCELLED: [],
    CampaignStatus.EXPIRED: [],
}

_CAMPAIGN_STATUS_LABELS = {
    CampaignStatus.DRAFT: "Draft",
    CampaignStatus.PENDING_APPROVAL: "Pending Approval",
    CampaignStatus.REJECTED: "Rejected",
    CampaignStatus.ACTIVE: "Active",
    CampaignStatus.PAUSED: "Paused",
    CampaignStatus.COMPLETED: "Completed",
    CampaignStatus.CANCELLED: "Cancelled",
    CampaignStatus.EXPIRED: "Expired",
}

_CAMPAIGN_STATUS_COLORS = {
    CampaignStatus.DRAFT: "secondary",
    CampaignStatus.PENDING_APPROVAL: "info",
    CampaignStatus.REJECTED: "danger",
    CampaignStatus.ACTIVE: "success",
    CampaignStatus.PAUSED: "warning",
    CampaignStatus.COMPLETED: "primary",
    CampaignStatus.CANCELLED: "danger",
    CampaignStatus.EXPIRED: "warning",
}

_CAMPAIGN_STATUS_DESCRIPTIONS = {
    CampaignStatus.DRAFT: "Campaign is not yet published and is not visible to donors",
    CampaignStatus.PENDING_APPROVAL: "Campaign is awaiting approval from administrators",
    CampaignStatus.REJECTED: "Campaign was rejected and needs revisions before resubmission",
    CampaignStatus.ACTIVE: "Campaign is live and accepting donations from supporters",
    CampaignStatus.PAUSED: "Campaign is temporarily paused and not accepting donations",
    CampaignStatus.COMPLETED: "Campaign has successfully reached its goal",
    CampaignStatus.CANCELLED: "Campaign has been cancelled by the organizer",
    CampaignStatus.EXPIRED: "Campaign has expired and is no longer accepting donations",
}


class DonationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def can_be_processed(self) -> bool:
        return self == DonationStatus.PENDING

    def can_be_cancelled(self) -> bool:
        return self in (DonationStatus.PENDING, DonationStatus.PROCESSING)

    def can_be_refunded(self) -> bool:
        return self == DonationStatus.COMPLETED

    def is_final(self) -> bool:
        return self in (
            DonationStatus.COMPLETED,
            DonationStatus.FAILED,
            DonationStatus.CANCELLED,
            DonationStatus.REFUNDED,
        )

    def is_successful(self) -> bool:
        return self == DonationStatus.COMPLETED

    def affects_campaign_total(self) -> bool:
        return self == DonationStatus.COMPLETED

    def can_transition_to(self, new_status: "DonationStatus") -> bool:
        return new_status in _DONATION_TRANSITIONS.get(self, [])

    @property
    def progress_percentage(self) -> int:
        return _DONATION_PROGRESS[self]

    @classmethod
    def active_statuses(cls) -> List["DonationStatus"]:
        return [cls.PENDING, cls.PROCESSING]

    @classmethod
    def failed_statuses(cls) -> List["DonationStatus"]:
        return [cls.FAILED, cls.CANCELLED]


_DONATION_TRANSITIONS: Dict[DonationStatus, List[DonationStatus]] = {
    DonationStatus.PENDING: [DonationStatus.PROCESSING, DonationStatus.CANCELLED, DonationStatus.FAILED],
    DonationStatus.PROCESSING: [DonationStatus.COMPLETED, DonationStatus.FAILED, DonationStatus.CANCELLED],
    DonationStatus.COMPLETED: [DonationStatus.REFUNDED],
    DonationStatus.FAILED: [],
    DonationStatus.CANCELLED: [],
    DonationStatus.REFUNDED: [],
}

_DONATION_PROGRESS = {
    DonationStatus.PENDING: 10,
    DonationStatus.PROCESSING: 50,
    DonationStatus.COMPLETED: 100,
    DonationStatus.FAILED: 0,
    DonationStatus.CANCELLED: 0,
    DonationStatus.REFUNDED: 0,
}


class PaymentMethod(str, Enum):
    CARD = "card"
    IDEAL = "ideal"
    BANCONTACT = "bancontact"
    SOFORT = "sofort"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    STRIPE = "stripe"


class RecurringFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class CategoryStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

    @property
    def label(self) -> str:
        return "Active" if self == CategoryStatus.ACTIVE else "Inactive"

    @property
    def color(self) -> str:
        return "success" if self == CategoryStatus.ACTIVE else "gray"


class Permission(str, Enum):
    MANAGE_USERS = "manage_users"
    MANAGE_CAMPAIGNS = "manage_campaigns"
    MANAGE_DONATIONS = "manage_donations"
    MANAGE_TEAM_DONATIONS = "manage_team_donations"
    MANAGE_ORGANIZATIONS = "manage_organizations"
    MANAGE_SYSTEM = "manage_system"
    MANAGE_SETTINGS = "manage_settings"
    VIEW_ANALYTICS = "view_analytics"
    VIEW_AUDIT_LOGS = "view_audit_logs"
    CREATE_CAMPAIGNS = "create_campaigns"
    MAKE_DONATIONS = "make_donations"
    VIEW_OWN_DATA = "view_own_data"
    VIEW_PUBLIC_CAMPAIGNS = "view_public_campaigns"


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    GUEST = "guest"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]

    @property
    def priority(self) -> int:
        return _ROLE_PRIORITY[self]

    @property
    def permissions(self) -> FrozenSet[str]:
        return _ROLE_PERMISSIONS[self]

    def has_permission(self, permission) -> bool:
        name = permission.value if isinstance(permission, Permission) else permission
        return name in _ROLE_PERMISSIONS[self]

    def is_higher_than(self, other: "UserRole") -> bool:
        return self.priority > other.priority

    def is_admin(self) -> bool:
        return self in (UserRole.SUPER_ADMIN, UserRole.ADMIN)

    def is_manager(self) -> bool:
        return self == UserRole.MANAGER

    def can_manage_users(self) -> bool:
        return self.has_permission(Permission.MANAGE_USERS)

    def can_manage_campaigns(self) -> bool:
        return self.has_permission(Permission.MANAGE_CAMPAIGNS)

    def can_create_campaigns(self) -> bool:
        return self.can_manage_campaigns() or self.has_permission(Permission.CREATE_CAMPAIGNS)

    def can_make_donations(self) -> bool:
        return self.has_permission(Permission.MAKE_DONATIONS) or self.has_permission(Permission.MANAGE_DONATIONS)

    def can_view_analytics(self) -> bool:
        return self.has_permission(Permission.VIEW_ANALYTICS)


_ROLE_LABELS = {
    UserRole.SUPER_ADMIN: "Super Administrator",
    UserRole.ADMIN: "Administrator",
    UserRole.MANAGER: "Manager",
    UserRole.EMPLOYEE: "Employee",
    UserRole.GUEST: "Guest",
}

_ROLE_PRIORITY = {
    UserRole.SUPER_ADMIN: 100,
    UserRole.ADMIN: 80,
    UserRole.MANAGER: 60,
    UserRole.EMPLOYEE: 40,
    UserRole.GUEST: 10,
}

_ADMIN_PERMISSIONS = frozenset({
    Permission.MANAGE_USERS.value,
    Permission.MANAGE_CAMPAIGNS.value,
    Permission.MANAGE_DONATIONS.value,
    Permission.VIEW_ANALYTICS.value,
    Permission.MANAGE_ORGANIZATIONS.value,
})

_ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.SUPER_ADMIN: _ADMIN_PERMISSIONS | {
        Permission.MANAGE_SYSTEM.value,
        Permission.MANAGE_SETTINGS.value,
        Permission.VIEW_AUDIT_LOGS.value,
    },
    UserRole.ADMIN: _ADMIN_PERMISSIONS,
    UserRole.MANAGER: frozenset({
        Permission.MANAGE_CAMPAIGNS.value,
        Permission.VIEW_ANALYTICS.value,
        Permission.MANAGE_TEAM_DONATIONS.value,
    }),
    UserRole.EMPLOYEE: frozenset({
        Permission.CREATE_CAMPAIGNS.value,
        Permission.MAKE_DONATIONS.value,
        Permission.VIEW_OWN_DATA.value,
    }),
    UserRole.GUEST: frozenset({Permission.VIEW_PUBLIC_CAMPAIGNS.value}),
}


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING_VERIFICATION = "pending_verification"


class OrganizationStatus(str, Enum):
    ACTIVE = "active"
    UNVERIFIED = "unverified"
    INACTIVE = "inactive"


class TenantStatus(str, Enum):
    PENDING = "pending"
    PROVISIONING = "provisioning"
    ACTIVE = "active"
    FAILED = "failed"
    SUSPENDED = "suspended"


class TeamMemberRole(str, Enum):
    LEADER = "leader"
    MEMBER = "member"


class NotificationType(str, Enum):
    CAMPAIGN_CREATED = "campaign.created"
    CAMPAIGN_PENDING_REVIEW = "campaign.pending_review"
    CAMPAIGN_APPROVED = "campaign.approved"
    CAMPAIGN_REJECTED = "campaign.rejected"
    CAMPAIGN_MILESTONE = "campaign.milestone"
    CAMPAIGN_GOAL_REACHED = "campaign.goal_reached"
    CAMPAIGN_ENDING_SOON = "campaign.ending_soon"
    DONATION_RECEIVED = "donation.received"
    DONATION_CONFIRMED = "donation.confirmed"
    DONATION_FAILED = "donation.failed"
    LARGE_DONATION = "donation.large"
    SYSTEM_MAINTENANCE = "system.maintenance"
    SECURITY_ALERT = "system.security_alert"
    ACCOUNT_UPDATED = "system.account_updated"
    EXPORT_COMPLETED = "export.completed"
    EXPORT_FAILED = "export.failed"
    IMPORT_COMPLETED = "import.completed"
    TENANT_PROVISIONED = "tenant.provisioned"

    @property
    def category(self) -> str:
        return self.value.split(".", 1)[0]


class NotificationChannel(str, Enum):
    DATABASE = "database"
    MAIL = "mail"
    BROADCAST = "broadcast"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
    CRITICAL = "critical"

    def is_high(self) -> bool:
        return self in (NotificationPriority.HIGH, NotificationPriority.URGENT, NotificationPriority.CRITICAL)


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return {"csv": "csv", "excel": "xlsx", "pdf": "pdf"}[self.value]

    @property
    def mime_type(self) -> str:
        return {
            "csv": "text/csv",
            "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "pdf": "application/pdf",
        }[self.value]

    @property
    def label(self) -> str:
        return {"csv": "CSV", "excel": "Excel", "pdf": "PDF"}[self.value]

    @property
    def max_file_size_mb(self) -> int:
        return {"csv": 50, "excel": 100, "pdf": 25}[self.value]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class ExportStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def color(self) -> str:
        return {
            "pending": "yellow",
            "processing": "blue",
            "completed": "green",
            "failed": "red",
            "cancelled": "gray",
        }[self.value]

    def is_final(self) -> bool:
        return self in (ExportStatus.COMPLETED, ExportStatus.FAILED, ExportStatus.CANCELLED)

    def is_active(self) -> bool:
        return not self.is_final()

    def can_transition_to(self, new_status: "ExportStatus") -> bool:
        if self.is_final():
            return False
        return new_status in (
            ExportStatus.PROCESSING,
            ExportStatus.COMPLETED,
            ExportStatus.FAILED,
            ExportStatus.CANCELLED,
        )


class ExportResourceType(str, Enum):
    DONATIONS = "donations"
    CAMPAIGNS = "campaigns"
    USERS = "users"
    ORGANIZATIONS = "organizations"


class ImportType(str, Enum):
    CAMPAIGNS = "campaigns"
    DONATIONS = "donations"
    ORGANIZATIONS = "organizations"
    USERS = "users"
    EMPLOYEES = "employees"


class ImportStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def is_final(self) -> bool:
        return self in (ImportStatus.COMPLETED, ImportStatus.FAILED, ImportStatus.CANCELLED)


class ImportRecordStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def description(self) -> str:
        return {
            "pending": "Record is waiting to be processed",
            "success": "Record was processed successfully",
            "failed": "Record processing failed",
            "skipped": "Record was skipped",
        }[self.value]


class CacheWarmingStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    def can_transition_to(self, new_status: "CacheWarmingStatus") -> bool:
        return new_status in _CACHE_WARMING_TRANSITIONS[self]

    def is_final(self) -> bool:
        return not _CACHE_WARMING_TRANSITIONS[self]


_CACHE_WARMING_TRANSITIONS: Dict[CacheWarmingStatus, List[CacheWarmingStatus]] = {
    CacheWarmingStatus.PENDING: [CacheWarmingStatus.IN_PROGRESS, CacheWarmingStatus.FAILED],
    CacheWarmingStatus.IN_PROGRESS: [CacheWarmingStatus.COMPLETED, CacheWarmingStatus.FAILED],
    CacheWarmingStatus.COMPLETED: [],
    CacheWarmingStatus.FAILED: [],
}


class CacheWarmingStrategy(str, Enum):
    ALL = "all"
    SYSTEM = "system"
    WIDGET = "widget"
    PRIORITY = "priority"

    @classmethod
    def from_option(cls, value: str) -> "CacheWarmingStrategy":
        normalized = value.strip().lower()
        if normalized == "widgets":
            normalized = "widget"
        return cls(normalized)


class WarmingJobStatus(str, Enum):
    STARTING = "starting"
    WARMING = "warming"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


class SymbolPosition(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class SearchableEntity(str, Enum):
    CAMPAIGNS = "campaigns"
    ORGANIZATIONS = "organizations"
    USERS = "users"
    DONATIONS = "donations"

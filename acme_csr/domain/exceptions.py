"""Domain exceptions with named constructors"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base class; status_code is the HTTP status the API layer answers with"""

    default_code = "domain_error"
    default_status = 400

    def __init__(self, message: str, code: str = None, status_code: int = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status
        self.context = context or {}

    @classmethod
    def _not_found(cls, entity: str, identifier) -> "DomainException":
        return cls(f"{entity} with ID {identifier} not found", code=f"{entity.lower()}_not_found", status_code=404)


class CampaignException(DomainException):
    default_code = "campaign_error"

    @classmethod
    def not_found(cls, campaign_id) -> "CampaignException":
        return cls._not_found("Campaign", campaign_id)

    @classmethod
    def invalid_status_transition(cls, current, target) -> "CampaignException":
        return cls(
            f"Cannot transition from {current.label} to {target.label} status",
            code="invalid_status_transition",
            status_code=409,
        )

    @classmethod
    def cannot_accept_donation(cls, campaign_id) -> "CampaignException":
        return cls(f"Campaign {campaign_id} is not accepting donations", code="campaign_not_accepting_donations", status_code=409)

    @classmethod
    def invalid_date_range(cls) -> "CampaignException":
        return cls("Campaign start date must be before the end date", code="invalid_date_range", status_code=422)

    @classmethod
    def invalid_goal_amount(cls) -> "CampaignException":
        return cls("Campaign goal amount must be greater than zero", code="invalid_goal_amount", status_code=422)

    @classmethod
    def unauthorized_access(cls, campaign_id) -> "CampaignException":
        return cls(f"Not authorized to modify campaign {campaign_id}", code="campaign_forbidden", status_code=403)

    @classmethod
    def organization_cannot_create(cls, organization_id) -> "CampaignException":
        return cls(
            f"Organization {organization_id} must be active and verified to create campaigns",
            code="organization_cannot_create_campaigns",
            status_code=409,
        )

    @classmethod
    def not_trashed(cls, campaign_id) -> "CampaignException":
        return cls(f"Campaign {campaign_id} is not deleted", code="campaign_not_trashed", status_code=409)


class DonationException(DomainException):
    default_code = "donation_error"

    @classmethod
    def not_found(cls, donation_id) -> "DonationException":
        return cls._not_found("Donation", donation_id)

    @classmethod
    def invalid_status_transition(cls, current, target) -> "DonationException":
        return cls(
            f"Cannot change donation status from {current.value} to {target.value}",
            code="invalid_status_transition",
            status_code=409,
        )

    @classmethod
    def invalid_amount(cls) -> "DonationException":
        return cls("Donation amount must be greater than zero", code="invalid_amount", status_code=422)

    @classmethod
    def refund_window_expired(cls, donation_id) -> "DonationException":
        return cls(f"Donation {donation_id} can no longer be refunded", code="refund_window_expired", status_code=409)

    @classmethod
    def not_allowed_to_donate(cls) -> "DonationException":
        return cls("Your role does not allow making donations", code="donation_forbidden", status_code=403)

    @classmethod
    def currency_mismatch(cls, expected: str, given: str) -> "DonationException":
        return cls(f"Donation currency {given} does not match campaign currency {expected}", code="currency_mismatch", status_code=422)


class OrganizationException(DomainException):
    default_code = "organization_error"

    @classmethod
    def not_found(cls, organization_id) -> "OrganizationException":
        return cls._not_found("Organization", organization_id)

    @classmethod
    def already_active(cls, organization_id) -> "OrganizationException":
        return cls(f"Organization {organization_id} is already active", code="already_active", status_code=409)

    @classmethod
    def already_inactive(cls, organization_id) -> "OrganizationException":
        return cls(f"Organization {organization_id} is already inactive", code="already_inactive", status_code=409)

    @classmethod
    def already_verified(cls, organization_id) -> "OrganizationException":
        return cls(f"Organization {organization_id} is already verified", code="already_verified", status_code=409)

    @classmethod
    def not_verified(cls, organization_id) -> "OrganizationException":
        return cls(f"Organization {organization_id} is not verified", code="not_verified", status_code=409)

    @classmethod
    def not_eligible_for_verification(cls, organization_id) -> "OrganizationException":
        return cls(
            f"Organization {organization_id} is missing information required for verification",
            code="not_eligible_for_verification",
            status_code=422,
        )

    @classmethod
    def forbidden(cls) -> "OrganizationException":
        return cls("Not allowed to manage this organization", code="organization_forbidden", status_code=403)

    @classmethod
    def duplicate_subdomain(cls, subdomain: str) -> "OrganizationException":
        return cls(f"Subdomain '{subdomain}' is already taken", code="duplicate_subdomain", status_code=409)

    @classmethod
    def duplicate_registration_number(cls, registration_number: str) -> "OrganizationException":
        return cls(
            f"Registration number '{registration_number}' is already registered",
            code="duplicate_registration_number",
            status_code=409,
        )


class CategoryException(DomainException):
    default_code = "category_error"

    @classmethod
    def not_found(cls, category_id) -> "CategoryException":
        return cls._not_found("Category", category_id)

    @classmethod
    def duplicate_slug(cls, slug: str) -> "CategoryException":
        return cls(f"Category slug '{slug}' already exists", code="duplicate_slug", status_code=409)

    @classmethod
    def invalid_name(cls) -> "CategoryException":
        return cls("Category name cannot be empty", code="invalid_name", status_code=422)

    @classmethod
    def has_campaigns(cls, category_id, count: int) -> "CategoryException":
        return cls(f"Category {category_id} still has {count} campaign(s)", code="category_has_campaigns", status_code=409)


class UserException(DomainException):
    default_code = "user_error"

    @classmethod
    def not_found(cls, user_id) -> "UserException":
        return cls._not_found("User", user_id)

    @classmethod
    def email_taken(cls, email: str) -> "UserException":
        return cls(f"User with email {email} already exists", code="email_taken", status_code=409)

    @classmethod
    def invalid_credentials(cls) -> "UserException":
        return cls("Invalid email or password", code="invalid_credentials", status_code=401)

    @classmethod
    def inactive(cls) -> "UserException":
        return cls("User account is not active", code="user_inactive", status_code=403)

    @classmethod
    def cannot_assign_role(cls, role) -> "UserException":
        return cls(f"Not allowed to assign role {role.value}", code="role_forbidden", status_code=403)

    @classmethod
    def already_in_status(cls, status) -> "UserException":
        return cls(f"User is already {status.value}", code="invalid_status", status_code=409)


class CurrencyException(DomainException):
    default_code = "currency_error"

    @classmethod
    def not_found(cls, code: str) -> "CurrencyException":
        return cls(f"Currency {code} not found", code="currency_not_found", status_code=404)

    @classmethod
    def inactive(cls, code: str) -> "CurrencyException":
        return cls(f"Currency {code} is not active", code="currency_inactive", status_code=409)

    @classmethod
    def rate_provider_failed(cls, reason: str) -> "CurrencyException":
        return cls(f"Exchange rate provider failed: {reason}", code="rate_provider_failed", status_code=502)


class TenantException(DomainException):
    default_code = "tenant_error"

    @classmethod
    def not_found(cls, identifier) -> "TenantException":
        return cls(f"Tenant {identifier} not found", code="tenant_not_found", status_code=404)

    @classmethod
    def invalid_transition(cls, current, action: str) -> "TenantException":
        return cls(f"Cannot {action} tenant in status {current.value}", code="invalid_tenant_transition", status_code=409)

    @classmethod
    def unavailable(cls, subdomain: str) -> "TenantException":
        return cls(f"Tenant '{subdomain}' is not available", code="tenant_unavailable", status_code=503)

    @classmethod
    def provisioning_failed(cls, tenant_id, reason: str) -> "TenantException":
        return cls(f"Provisioning tenant {tenant_id} failed: {reason}", code="provisioning_failed", status_code=500)

    @classmethod
    def index_creation_failed(cls, tenant_id, reason: str) -> "TenantException":
        return cls(f"Creating search indexes for tenant {tenant_id} failed: {reason}", code="index_creation_failed", status_code=500)


class TeamException(DomainException):
    default_code = "team_error"

    @classmethod
    def not_found(cls, team_id) -> "TeamException":
        return cls._not_found("Team", team_id)

    @classmethod
    def already_member(cls, user_id) -> "TeamException":
        return cls(f"User {user_id} is already a team member", code="already_member", status_code=409)

    @classmethod
    def not_member(cls, user_id) -> "TeamException":
        return cls(f"User {user_id} is not a team member", code="not_member", status_code=404)

    @classmethod
    def cannot_remove_leader(cls) -> "TeamException":
        return cls("The team leader cannot be removed", code="cannot_remove_leader", status_code=409)


class NotificationException(DomainException):
    default_code = "notification_error"

    @classmethod
    def not_found(cls, notification_id) -> "NotificationException":
        return cls._not_found("Notification", notification_id)

    @classmethod
    def access_denied(cls, notification_id) -> "NotificationException":
        return cls(f"Not allowed to access notification {notification_id}", code="notification_forbidden", status_code=403)


class ExportException(DomainException):
    default_code = "export_error"

    @classmethod
    def not_found(cls, export_id) -> "ExportException":
        return cls._not_found("Export", export_id)

    @classmethod
    def unsupported_format(cls, export_format) -> "ExportException":
        return cls(f"Export format {export_format.value} is not supported", code="unsupported_format", status_code=422)

    @classmethod
    def invalid_transition(cls, current, target) -> "ExportException":
        return cls(f"Cannot move export from {current.value} to {target.value}", code="invalid_status_transition", status_code=409)

    @classmethod
    def file_too_large(cls, size: int, limit: int) -> "ExportException":
        return cls(f"Export file of {size} bytes exceeds the {limit} byte limit", code="file_too_large", status_code=413)

    @classmethod
    def too_many_concurrent(cls, limit: int) -> "ExportException":
        return cls(f"You already have {limit} exports in progress", code="too_many_exports", status_code=429)

    @classmethod
    def not_downloadable(cls, export_id) -> "ExportException":
        return cls(f"Export {export_id} is not available for download", code="not_downloadable", status_code=409)

    @classmethod
    def forbidden(cls) -> "ExportException":
        return cls("Your role does not allow exporting data", code="export_forbidden", status_code=403)


class ImportException(DomainException):
    default_code = "import_error"

    @classmethod
    def not_found(cls, import_id) -> "ImportException":
        return cls._not_found("Import", import_id)

    @classmethod
    def unsupported_type(cls, import_type) -> "ImportException":
        return cls(f"Import type {import_type.value} is not supported", code="unsupported_type", status_code=422)

    @classmethod
    def invalid_file(cls, reason: str) -> "ImportException":
        return cls(f"Invalid import file: {reason}", code="invalid_file", status_code=422)

    @classmethod
    def already_finished(cls, import_id) -> "ImportException":
        return cls(f"Import {import_id} has already finished", code="import_finished", status_code=409)

    @classmethod
    def forbidden(cls) -> "ImportException":
        return cls("Your role does not allow importing data", code="import_forbidden", status_code=403)


class SearchException(DomainException):
    default_code = "search_error"

    @classmethod
    def search_failed(cls, query: str, reason: str) -> "SearchException":
        return cls(f"Search for '{query}' failed: {reason}", code="search_failed", status_code=502)

    @classmethod
    def indexing_failed(cls, index: str, reason: str) -> "SearchException":
        return cls(f"Indexing into '{index}' failed: {reason}", code="indexing_failed", status_code=502)

    @classmethod
    def index_not_found(cls, index: str) -> "SearchException":
        return cls(f"Search index '{index}' not found", code="index_not_found", status_code=404)

    @classmethod
    def invalid_query(cls, reason: str) -> "SearchException":
        return cls(f"Invalid search query: {reason}", code="invalid_query", status_code=422)


class CacheWarmingException(DomainException):
    default_code = "cache_warming_error"

    @classmethod
    def invalid_transition(cls, current, target) -> "CacheWarmingException":
        return cls(f"Cannot move cache warming from {current.value} to {target.value}", code="invalid_status_transition", status_code=409)

    @classmethod
    def empty_key_list(cls) -> "CacheWarmingException":
        return cls("At least one cache key is required", code="empty_key_list", status_code=422)

    @classmethod
    def unknown_strategy(cls, strategy: str) -> "CacheWarmingException":
        return cls(f"Unknown cache warming strategy: {strategy}", code="unknown_strategy", status_code=422)

    @classmethod
    def empty_data(cls, key: str) -> "CacheWarmingException":
        return cls(f"No data generated for cache key {key}", code="empty_data", status_code=500)

    @classmethod
    def job_not_found(cls, job_id: str) -> "CacheWarmingException":
        return cls(f"Cache warming job {job_id} not found or expired", code="job_not_found", status_code=404)

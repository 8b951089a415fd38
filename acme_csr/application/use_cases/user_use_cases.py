"""User profile and administration use cases"""

from decimal import Decimal
from uuid import UUID

from ...domain.entities.user import User
from ...domain.enums import UserRole
from ...domain.exceptions import UserException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId, UserId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ...core.config import settings
from ..dtos.user_dtos import ChangeRoleDTO, EmployeeStatsDTO, SuspendUserDTO, UpdateProfileDTO, UserDTO
from ..services.audit_service import AuditService


async def _get_user(unit_of_work: IUnitOfWork, user_id) -> User:
    user = await unit_of_work.users.get_by_id(UserId.coerce(user_id))
    if not user:
        raise UserException.not_found(user_id)
    return user


class GetUserProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID) -> UserDTO:
        async with self.unit_of_work:
            return UserDTO.from_entity(await _get_user(self.unit_of_work, user_id))


class UpdateUserProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID, request: UpdateProfileDTO) -> UserDTO:
        async with self.unit_of_work:
            user = await _get_user(self.unit_of_work, user_id)
            changes = request.model_dump(exclude_unset=True)
            if changes.get("locale") and changes["locale"] not in settings.SUPPORTED_LOCALES:
                raise ValueError(f"Unsupported locale: {changes['locale']}")
            old_values = {key: getattr(user, key) for key in changes}
            user.update_profile(**changes)
            await self.unit_of_work.users.update(user)
            await AuditService(self.unit_of_work).log_user_action("profile_updated", user.id, old_values, changes)
            await self.unit_of_work.commit()
            return UserDTO.from_entity(user)


class ChangeUserRoleUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID, request: ChangeRoleDTO, changed_by: User) -> UserDTO:
        async with self.unit_of_work:
            user = await _get_user(self.unit_of_work, user_id)
            previous = user.role
            user.change_role(request.role, changed_by)
            await self.unit_of_work.users.update(user)
            await AuditService(self.unit_of_work).log_user_action(
                "role_changed", user.id, {"role": previous.value}, {"role": user.role.value}
            )
            self.unit_of_work.collect(user)
            await self.unit_of_work.commit()
            return UserDTO.from_entity(user)


class PromoteUserUseCase:
    """Role change from the command line, bypassing the acting-user check"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, email: str, role: UserRole) -> UserDTO:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(email))
            if not user:
                raise UserException.not_found(email)
            system = User(
                id=UserId.generate(),
                email=Email("system@acme-corp.com"),
                name="System",
                hashed_password="",
                role=UserRole.SUPER_ADMIN,
            )
            previous = user.role
            user.change_role(role, system)
            await self.unit_of_work.users.update(user)
            await AuditService(self.unit_of_work).log_system_action(
                "user_promoted", "user", user.id, {"from": previous.value, "to": role.value}
            )
            self.unit_of_work.collect(user)
            await self.unit_of_work.commit()
            return UserDTO.from_entity(user)


class ActivateUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID) -> UserDTO:
        async with self.unit_of_work:
            user = await _get_user(self.unit_of_work, user_id)
            previous = user.status
            user.activate()
            await self.unit_of_work.users.update(user)
            await AuditService(self.unit_of_work).log_user_action(
                "activated", user.id, {"status": previous.value}, {"status": user.status.value}
            )
            await self.unit_of_work.commit()
            return UserDTO.from_entity(user)


class SuspendUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID, request: SuspendUserDTO, suspended_by: User) -> UserDTO:
        async with self.unit_of_work:
            user = await _get_user(self.unit_of_work, user_id)
            if user.id == suspended_by.id or user.role.is_higher_than(suspended_by.role):
                raise UserException.cannot_assign_role(user.role)
            previous = user.status
            user.suspend(request.reason)
            await self.unit_of_work.users.update(user)
            await AuditService(self.unit_of_work).log_user_action(
                "suspended", user.id, {"status": previous.value}, {"status": user.status.value, "reason": request.reason}
            )
            self.unit_of_work.collect(user)
            await self.unit_of_work.commit()
            return UserDTO.from_entity(user)


class ListUsersUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, page: PageRequest, organization_id: UUID = None, role: UserRole = None, search: str = None) -> Page[UserDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.users.list(
                page,
                organization_id=OrganizationId(organization_id) if organization_id else None,
                role=role,
                search=search,
            )
            return Page(
                items=[UserDTO.from_entity(user) for user in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class GetEmployeeStatsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UUID) -> EmployeeStatsDTO:
        async with self.unit_of_work:
            user = await _get_user(self.unit_of_work, user_id)
            donations = await self.unit_of_work.donations.list_completed_by_users([user.id])
            total = Money.zero(settings.BASE_CURRENCY)
            for donation in donations:
                if donation.amount.currency == total.currency:
                    total = total.add(donation.amount)
            return EmployeeStatsDTO(
                user_id=user.id.value,
                total_donated=Decimal(total.amount),
                currency=total.currency,
                donations_count=len(donations),
                campaigns_supported=len({donation.campaign_id for donation in donations}),
            )

"""Registration, login and token refresh"""

import logging

from ...core.config import settings
from ...core.context import current_tenant_id
from ...core.security import create_access_token, create_refresh_token, decode_token, get_password_hash, verify_password
from ...domain.entities.user import User
from ...domain.exceptions import OrganizationException, UserException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId, UserId
from ..dtos.user_dtos import AuthResponseDTO, LoginUserDTO, RefreshTokenDTO, RegisterUserDTO, TokenDTO, UserDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> TokenDTO:
    tenant_id = current_tenant_id()
    return TokenDTO(
        access_token=create_access_token(str(user.id.value), tenant_id),
        refresh_token=create_refresh_token(str(user.id.value), tenant_id),
    )


class RegisterUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: RegisterUserDTO) -> AuthResponseDTO:
        async with self.unit_of_work:
            email = Email(request.email)

            if await self.unit_of_work.users.exists_by_email(email):
                raise UserException.email_taken(email.value)

            organization_id = None
            if request.organization_id:
                organization_id = OrganizationId(request.organization_id)
                if not await self.unit_of_work.organizations.get_by_id(organization_id):
                    raise OrganizationException.not_found(request.organization_id)

            user = User.create(
                email=email,
                name=request.name,
                hashed_password=get_password_hash(request.password),
                organization_id=organization_id,
                department=request.department,
                job_title=request.job_title,
                locale=request.locale if request.locale in settings.SUPPORTED_LOCALES else settings.FALLBACK_LOCALE,
            )
            user = await self.unit_of_work.users.add(user)
            await AuditService(self.unit_of_work).log_user_action("registered", user.id, new_values={"email": email.value})
            self.unit_of_work.collect(user)
            await self.unit_of_work.commit()

            logger.info(f"User registered: {user.id}", extra={"tenant_id": current_tenant_id()})
            return AuthResponseDTO(user=UserDTO.from_entity(user), tokens=issue_tokens(user))


class LoginUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginUserDTO) -> AuthResponseDTO:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))
            if not user or not verify_password(request.password, user.hashed_password):
                raise UserException.invalid_credentials()
            if not user.is_active:
                raise UserException.inactive()

            user.record_login()
            await self.unit_of_work.users.update(user)
            await self.unit_of_work.commit()

            return AuthResponseDTO(user=UserDTO.from_entity(user), tokens=issue_tokens(user))


class RefreshTokenUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: RefreshTokenDTO) -> TokenDTO:
        payload = decode_token(request.refresh_token)
        # Tokens are only valid on the tenant that issued them
        if not payload or payload.get("type") != "refresh" or payload.get("tenant") != current_tenant_id():
            raise UserException.invalid_credentials()

        async with self.unit_of_work:
            try:
                user_id = UserId.from_str(payload.get("sub"))
            except ValueError:
                raise UserException.invalid_credentials()
            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user or not user.is_active:
                raise UserException.invalid_credentials()
            return issue_tokens(user)

"""User repository implementation using SQLAlchemy ORM"""

from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import or_

from ...domain.repositories.user_repository import IUserRepository
from ...domain.entities.user import User
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ...domain.enums import UserStatus, UserRole
from ..orm.user_model import UserModel
from ._paging import paginate, like_pattern, ids


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    def _query(self):
        return self.session.query(UserModel)

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        model = self._query().filter(UserModel.id == user_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[User]:
        model = self._query().filter(UserModel.email == str(email)).first()
        return self._map_to_entity(model) if model else None

    async def add(self, user: User) -> User:
        self.session.add(self._create_model_from_entity(user))
        self.session.flush()
        return user

    async def update(self, user: User) -> User:
        model = self._query().filter(UserModel.id == user.id.value).first()
        if model:
            self._update_model_from_entity(model, user)
            self.session.flush()
        return user

    async def exists_by_email(self, email: Email) -> bool:
        return self._query().filter(UserModel.email == str(email)).count() > 0

    async def list(
        self,
        page: PageRequest,
        organization_id: Optional[OrganizationId] = None,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
    ) -> Page[User]:
        query = self._query()
        if organization_id is not None:
            query = query.filter(UserModel.organization_id == organization_id.value)
        if role is not None:
            query = query.filter(UserModel.role == role.value)
        if search:
            pattern = like_pattern(search)
            query = query.filter(or_(
                UserModel.name.ilike(pattern, escape="\\"),
                UserModel.email.ilike(pattern, escape="\\"),
            ))
        query = query.order_by(UserModel.name.asc())
        return paginate(query, page, self._map_to_entity)

    async def get_by_ids(self, user_ids: List[UserId]) -> List[User]:
        if not user_ids:
            return []
        models = self._query().filter(UserModel.id.in_(ids(user_ids))).all()
        return [self._map_to_entity(model) for model in models]

    def _create_model_from_entity(self, user: User) -> UserModel:
        model = UserModel(id=user.id.value, created_at=user.created_at)
        self._update_model_from_entity(model, user)
        return model

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        model.email = str(user.email)
        model.name = user.name
        model.hashed_password = user.hashed_password
        model.role = user.role.value
        model.status = user.status.value
        model.organization_id = user.organization_id.value if user.organization_id else None
        model.department = user.department
        model.job_title = user.job_title
        model.locale = user.locale
        model.email_verified_at = user.email_verified_at
        model.suspension_reason = user.suspension_reason
        model.last_login = user.last_login
        model.updated_at = user.updated_at

    def _map_to_entity(self, model: UserModel) -> User:
        return User(
            id=UserId(model.id),
            email=Email(model.email),
            name=model.name,
            hashed_password=model.hashed_password,
            role=UserRole(model.role),
            status=UserStatus(model.status),
            organization_id=OrganizationId(model.organization_id) if model.organization_id else None,
            department=model.department,
            job_title=model.job_title,
            locale=model.locale or "en",
            email_verified_at=model.email_verified_at,
            suspension_reason=model.suspension_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login=model.last_login,
        )

"""역할 서비스 — 역할 CRUD 및 회원 역할 배정 비즈니스 로직.

Role Service — Business logic for role CRUD and member role assignment.
Handles creation and deletion of roles with name validation, and adds or
removes roles on members.
"""

from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role, User
from app.repositories.role_repository import role_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import RoleResponse
from app.services.base import BaseService
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError

ROLE_NAME_MIN_LENGTH: int = 2
ROLE_NAME_MAX_LENGTH: int = 100


class RoleService(BaseService[Role]):
    """역할 관련 비즈니스 로직을 처리하는 서비스.

    Service handling role business logic.
    Provides CRUD operations with name length and uniqueness enforcement.
    """

    def __init__(self) -> None:
        super().__init__(role_repository)

    def to_response(self, role: Role) -> RoleResponse:
        """역할 모델을 응답 스키마로 변환합니다.

        Convert a Role model instance to a RoleResponse schema.
        """
        return RoleResponse(
            id=str(role.id),
            name=role.name,
            created_at=role.created_at,
        )

    async def validate_for_create(self, db: AsyncSession, data: dict[str, Any]) -> None:
        """역할 이름 길이와 중복을 검증합니다.

        Raises:
            BadRequestError: 이름이 2~100자가 아닐 때 (Name not 2-100 chars)
            DuplicateError: 같은 이름의 역할이 이미 존재할 때 (Name taken)
        """
        name: str = (data.get("name") or "").strip()
        if not ROLE_NAME_MIN_LENGTH <= len(name) <= ROLE_NAME_MAX_LENGTH:
            raise BadRequestError(
                f"Role name must be between {ROLE_NAME_MIN_LENGTH} and "
                f"{ROLE_NAME_MAX_LENGTH} characters"
            )
        if await role_repository.check_duplicate(db, name):
            raise DuplicateError("A role with this name already exists")

    async def apply_business_rules_for_create(
        self, db: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        return {**data, "name": data["name"].strip()}

    async def list_roles(self, db: AsyncSession) -> list[RoleResponse]:
        """활성 역할 목록을 이름순으로 조회합니다."""
        roles: list[Role] = await role_repository.find_all_ordered(db)
        return [self.to_response(r) for r in roles]

    async def create_role(self, db: AsyncSession, name: str) -> RoleResponse:
        """새 역할을 생성합니다.

        Create a new role.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            name: 역할 이름 (Role name)

        Returns:
            RoleResponse: 생성된 역할 응답 (Created role response)
        """
        role: Role = await self.create(db, {"name": name})
        return self.to_response(role)

    async def delete_role(self, db: AsyncSession, role_id: UUID) -> None:
        """역할을 삭제합니다. 회원과의 연결도 함께 제거됩니다.

        Raises:
            NotFoundError: 역할을 찾을 수 없을 때 (Role not found)
        """
        deleted: bool = await self.delete_by_id(db, role_id)
        if not deleted:
            raise NotFoundError(f"Role with ID {role_id} not found")

    async def ensure_role(self, db: AsyncSession, name: str) -> Role:
        """역할이 없으면 생성하고, 있으면 그대로 반환합니다.

        Return the role with this name, creating it on first use.
        """
        existing: Role | None = await role_repository.find_by_name(db, name)
        if existing is not None:
            return existing
        return await self.create(db, {"name": name})

    async def assign_role(self, db: AsyncSession, user_id: UUID, role_id: UUID) -> User:
        """회원에게 역할을 부여합니다. 이미 보유 중이면 변경 없음.

        Grant a role to a member. Granting a role twice is a no-op.

        Raises:
            NotFoundError: 회원 또는 역할을 찾을 수 없을 때 (Member or role not found)
        """
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        role: Role = await role_repository.find_by_id_or_fail(db, role_id)

        if role not in user.roles:
            user.roles.append(role)
            await db.flush()
            logger.info(f"Role '{role.name}' assigned to user {user.id}")
        return user

    async def remove_role(self, db: AsyncSession, user_id: UUID, role_id: UUID) -> User:
        """회원에게서 역할을 회수합니다. 보유하지 않았으면 변경 없음."""
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        role: Role = await role_repository.find_by_id_or_fail(db, role_id)

        if role in user.roles:
            user.roles.remove(role)
            await db.flush()
            logger.info(f"Role '{role.name}' removed from user {user.id}")
        return user


# 싱글턴 인스턴스 — Singleton instance
role_service: RoleService = RoleService()

"""관리자 역할 라우터 — 역할 CRUD 및 회원 역할 부여 엔드포인트.

Admin Role Router — Role management and role grants.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.user import RoleCreate, RoleResponse, UserResponse
from app.services.role_service import role_service
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[RoleResponse]:
    """역할 목록을 이름순으로 조회합니다."""
    return await role_service.list_roles(db)


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    data: RoleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> RoleResponse:
    """새 역할을 생성합니다.

    Create a role. Names are unique regardless of case.
    """
    result: RoleResponse = await role_service.create_role(db, data.name)
    await db.commit()
    return result


@router.delete("/{role_id}", status_code=204)
async def delete_role(
    role_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """역할을 삭제합니다. 회원과의 연결도 함께 제거됩니다."""
    await role_service.delete_role(db, role_id)
    await db.commit()


@router.post("/{role_id}/users/{user_id}", response_model=UserResponse)
async def assign_role(
    role_id: UUID,
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """회원에게 역할을 부여합니다.

    Grant a role to a member.
    """
    user: User = await role_service.assign_role(db, user_id, role_id)
    await db.commit()
    return user_service.to_response(user)


@router.delete("/{role_id}/users/{user_id}", response_model=UserResponse)
async def remove_role(
    role_id: UUID,
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """회원에게서 역할을 회수합니다."""
    user: User = await role_service.remove_role(db, user_id, role_id)
    await db.commit()
    return user_service.to_response(user)

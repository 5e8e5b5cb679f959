"""관리자 회원 라우터 — 회원 CRUD 및 복구 엔드포인트.

Admin User Router — Member listing, creation, update, soft delete and
restore. Listing is paged (0-based) with ranked search and a status filter.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import PageResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=PageResponse[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    page: Annotated[int, Query(description="페이지 번호, 0부터 시작")] = 0,
    size: Annotated[int, Query(description="페이지 크기")] = 20,
    search: Annotated[str | None, Query(description="이름/이메일 검색어")] = None,
    status: Annotated[str, Query(description="active | deleted | all")] = "active",
) -> PageResponse[UserResponse]:
    """회원 목록을 페이지 단위로 조회합니다.

    Page through members. With a search term, exact matches rank before
    prefix matches, which rank before substring matches.
    """
    return await user_service.get_users_page(db, page, size, search, status)


@router.get("/all", response_model=list[UserResponse])
async def list_all_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[UserResponse]:
    """활성 회원 전체 목록을 조회합니다."""
    return await user_service.get_all_users(db)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """새 회원을 생성합니다.

    Create a member. Without a password a setup link is mailed.
    """
    result: UserResponse = await user_service.create_user(db, data)
    await db.commit()
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """회원 정보를 수정합니다. 변경 내역은 관리자에게 메일로 통지됩니다.

    Update a member; tracked changes are mailed to all administrators.
    """
    result: UserResponse = await user_service.update_user(db, user_id, data)
    await db.commit()
    return result


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """회원을 소프트 삭제합니다 (탈퇴 처리).

    Soft-delete a member and revoke their refresh tokens.

    Args:
        user_id: 삭제할 회원 UUID (Member UUID to delete)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated administrator)

    Returns:
        UserResponse: deleted_at이 설정된 회원 (Member with deleted_at set)
    """
    result: UserResponse = await user_service.soft_delete_user(db, user_id)
    await db.commit()
    return result


@router.post("/{user_id}/restore", response_model=UserResponse)
async def restore_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """탈퇴한 회원을 복구합니다."""
    result: UserResponse = await user_service.restore_user(db, user_id)
    await db.commit()
    return result

"""앱 업로드 라우터 — 프로필 사진 업로드 및 조회.

App Upload Router — Profile picture upload (multipart) and delivery.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.services.avatar_service import AVATAR_CACHE_CONTROL, MAX_AVATAR_SIZE, avatar_service
from app.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.post("/profile-picture")
async def upload_profile_picture(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    file: Annotated[UploadFile, File(description="JPEG, PNG 또는 WebP, 최대 5MB")],
) -> dict[str, str]:
    """프로필 사진을 업로드합니다. 기존 사진은 교체됩니다.

    Upload a profile picture, replacing the previous one.

    Returns:
        dict[str, str]: message, objectName, url (presigned)
    """
    # One byte past the limit is enough to reject an oversized upload
    data: bytes = await file.read(MAX_AVATAR_SIZE + 1)
    result: dict[str, str] = await avatar_service.upload_profile_picture(
        db, current_user, data, file.filename, file.content_type
    )
    await db.commit()
    return result


@router.get("/profile-picture/{user_id}")
async def get_profile_picture(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> Response:
    """회원의 프로필 사진을 반환합니다.

    Return a member's profile picture. A picture missing from storage has
    its stale path cleared before the 404 is returned.
    """
    picture: tuple[bytes, str] | None = await avatar_service.get_profile_picture(db, user_id)
    if picture is None:
        await db.commit()
        raise NotFoundError("Profile picture not found")

    data, content_type = picture
    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": AVATAR_CACHE_CONTROL},
    )

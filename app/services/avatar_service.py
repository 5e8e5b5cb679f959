"""프로필 사진 서비스 — 업로드 검증 및 스토리지 연동.

Avatar Service — Profile picture upload and delivery.
Uploads are checked for size, declared type and magic bytes before they
reach the object store; a member keeps at most one picture.
"""

from uuid import UUID

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.services.storage_service import storage_service
from app.services.user_service import user_service
from app.utils.exceptions import BadRequestError, NotFoundError, ServiceUnavailableError
from app.utils.file_validator import FileValidationResult, validate_image_content

MAX_AVATAR_SIZE: int = 5 * 1024 * 1024
AVATAR_FOLDER: str = "profile-pictures"
ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {"image/jpeg", "image/png", "image/jpg", "image/webp"}
)
DEFAULT_CONTENT_TYPE: str = "image/jpeg"
AVATAR_CACHE_CONTROL: str = "max-age=3600"


def content_type_for(object_name: str) -> str:
    """객체 이름의 확장자로 Content-Type을 정합니다. (png, webp, else jpeg)"""
    lowered: str = object_name.lower()
    if lowered.endswith(".png"):
        return "image/png"
    if lowered.endswith(".webp"):
        return "image/webp"
    return DEFAULT_CONTENT_TYPE


class AvatarService:
    """프로필 사진 업로드/조회 서비스."""

    async def upload_profile_picture(
        self,
        db: AsyncSession,
        user: User,
        data: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> dict[str, str]:
        """프로필 사진을 업로드하고 기존 사진을 교체합니다.

        Validate and store a new profile picture, replacing the old one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 현재 회원 (Current member)
            data: 파일 내용 (File content)
            filename: 원본 파일명 (Original file name)
            content_type: 선언된 MIME 타입 (Declared MIME type)

        Returns:
            dict[str, str]: message, objectName, url

        Raises:
            BadRequestError: 빈 파일, 크기 초과, 지원하지 않는 형식, 내용 불일치
                             (Empty, too large, unsupported or mismatching file)
            ServiceUnavailableError: 스토리지 업로드 실패 (Storage upload failed)
        """
        if not data:
            raise BadRequestError("File is empty or null")
        if len(data) > MAX_AVATAR_SIZE:
            raise BadRequestError("File size exceeds maximum allowed size of 5MB")
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise BadRequestError("Invalid file type. Only JPEG, PNG, and WebP images are allowed")

        validation: FileValidationResult = validate_image_content(data, content_type)
        if not validation.is_valid:
            logger.warning(f"Rejected profile picture from user {user.id}: {validation.message}")
            raise BadRequestError(validation.message)

        if user.avatar_path:
            try:
                storage_service.delete_file(user.avatar_path)
            except (BotoCoreError, ClientError) as e:
                logger.warning(f"Could not delete old profile picture {user.avatar_path}: {e}")

        try:
            object_name: str = storage_service.upload_file(data, filename, content_type, AVATAR_FOLDER)
            url: str = storage_service.get_presigned_url(object_name)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Profile picture upload failed for user {user.id}: {e}")
            raise ServiceUnavailableError("Failed to upload profile picture")

        await user_service.update_avatar_path(db, user.id, object_name)
        logger.info(f"Profile picture uploaded for user {user.id}: {object_name}")
        return {
            "message": "Profile picture uploaded successfully",
            "objectName": object_name,
            "url": url,
        }

    async def get_profile_picture(self, db: AsyncSession, user_id: UUID) -> tuple[bytes, str] | None:
        """회원의 프로필 사진 내용과 Content-Type을 반환합니다.

        Return the picture bytes and content type. When the stored object has
        disappeared the stale path is cleared and None is returned.

        Raises:
            NotFoundError: 회원 또는 사진이 없을 때 (Member or picture missing)
        """
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        if not user.avatar_path:
            raise NotFoundError("Profile picture not found")

        try:
            data: bytes = storage_service.download_file(user.avatar_path)
        except FileNotFoundError:
            logger.warning(f"Profile picture {user.avatar_path} missing in storage, clearing path")
            await user_service.update_avatar_path(db, user.id, None)
            return None

        return data, content_type_for(user.avatar_path)


# 싱글턴 인스턴스 — Singleton instance
avatar_service: AvatarService = AvatarService()

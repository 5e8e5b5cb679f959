"""공통 모델 믹스인 — UUID 기본키, 타임스탬프, 소프트 삭제.

Common model mixin — UUID primary key, timestamps and soft delete.
Every domain table (users, roles, bookings, emails, password setup tokens)
shares these columns and the soft-delete helpers.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """현재 UTC 시각. (Current timezone-aware UTC time)"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """naive datetime을 UTC로 간주합니다.

    Treat naive datetimes as UTC. SQLite returns naive values even for
    timezone-aware columns.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SoftDeleteMixin:
    """UUID 기본키, 생성/수정 일시, 소프트 삭제 컬럼.

    Primary key, creation/update timestamps and soft-delete column.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp, auto-updated)
        deleted_at: 삭제 일시, 활성 레코드는 NULL (Soft-delete timestamp, NULL when active)
    """

    # 고유 식별자 — UUID v4, auto-generated
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    # 삭제 일시 — Soft delete marker (NULL = active)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def soft_delete(self) -> None:
        """레코드를 삭제 상태로 표시합니다.

        Raises:
            ValueError: 이미 삭제된 레코드 (Record is already deleted)
        """
        if self.is_deleted:
            raise ValueError(f"{type(self).__name__} is already deleted")
        self.deleted_at = utcnow()

    def soft_delete_at(self, when: datetime | None) -> None:
        """지정한 시각으로 삭제 표시합니다. (Mark deleted at a given time)"""
        if when is None:
            raise ValueError("Deletion time must not be None")
        if self.is_deleted:
            raise ValueError(f"{type(self).__name__} is already deleted")
        self.deleted_at = when

    def restore(self) -> None:
        """삭제 표시를 해제합니다.

        Raises:
            ValueError: 삭제되지 않은 레코드 (Record is not deleted)
        """
        if not self.is_deleted:
            raise ValueError(f"{type(self).__name__} is not deleted")
        self.deleted_at = None

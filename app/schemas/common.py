"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions.
Includes the generic page wrapper and the plain message response used by
delete, restore and other confirmation endpoints.
"""

from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel

from app.utils.pagination import total_pages

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """페이지네이션 응답 스키마.

    Paginated response wrapper schema.
    Wraps one page of items with pagination metadata.

    Attributes:
        items: 항목 목록 (Items of the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 0-based)
        size: 페이지 크기 (Requested page size)
        total_pages: 전체 페이지 수 (Number of pages)
    """

    items: list[T]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 0부터 시작 (Current page, 0-indexed)
    size: int  # 페이지당 항목 수 (Items per page)
    total_pages: int  # 전체 페이지 수 (Total page count)

    @classmethod
    def build(cls, items: Sequence[T], total: int, page: int, size: int) -> "PageResponse[T]":
        """항목과 개수로 페이지 응답을 만듭니다. (Build from items and total)"""
        return cls(
            items=list(items),
            total=total,
            page=page,
            size=size,
            total_pages=total_pages(total, size),
        )


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)

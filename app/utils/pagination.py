"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Pages are 0-based: page 0 is the first page, matching the member list UI.
"""

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def total_pages(total: int, size: int) -> int:
    """전체 페이지 수를 계산합니다. (Total page count, 0 when empty)"""
    if size <= 0 or total <= 0:
        return 0
    return math.ceil(total / size)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 0,
    size: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the requested page with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 0부터 시작 (Page number, 0-indexed)
        size: 페이지당 항목 수 (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수)
            (Tuple of paginated items and total count)
    """
    # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(query.offset(page * size).limit(size))
    items: Sequence[Any] = result.scalars().all()

    return items, total

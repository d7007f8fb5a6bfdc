from typing import List, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from jobboard.schemas.common import Pagination


def page_bounds(page: int, limit: int) -> Tuple[int, int]:
    """Inclusive row range for a 1-based page: page 3 of 10 → (20, 29)."""
    start = (page - 1) * limit
    return start, start + limit - 1


async def paginate(
    session: AsyncSession,
    query: Select,
    page: int,
    limit: int,
    options: Sequence = (),
) -> Tuple[List, Pagination]:
    """
    Run ``query`` for one page and count the full result set.

    Args:
        session: Request session
        query: Filtered and ordered ORM select
        page: 1-based page number
        limit: Page size
        options: Loader options applied to the page query only

    Returns:
        (rows, Pagination)
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await session.execute(count_query)).scalar_one()

    start, _ = page_bounds(page, limit)
    result = await session.execute(query.options(*options).offset(start).limit(limit))
    rows = list(result.scalars().all())

    return rows, Pagination.build(page, limit, total)

"""
Pagination metadata and navigation links for list responses.
"""

import math
from typing import Optional, Tuple

from starlette.datastructures import URL

from app.schemas.location import PaginationLinks, PaginationMeta


def total_pages(total: int, per_page: int) -> int:
    """Number of pages; an empty result still has one (empty) page."""
    return max(1, math.ceil(total / per_page))


def build_pagination(
    total: int,
    page: int,
    per_page: int,
    count: int,
    url: Optional[URL] = None,
) -> Tuple[PaginationMeta, PaginationLinks]:
    """
    Build page metadata and, when ``url`` is given, first/last/prev/next links.

    Links reuse the request URL with only the ``page`` query parameter replaced.
    """
    last_page = total_pages(total, per_page)
    meta = PaginationMeta(
        current_page=page,
        per_page=per_page,
        total=total,
        total_pages=last_page,
        count=count,
    )
    if url is None:
        return meta, PaginationLinks()

    def page_url(number: int) -> str:
        return str(url.include_query_params(page=number))

    links = PaginationLinks(
        first=page_url(1),
        last=page_url(last_page),
        prev=page_url(page - 1) if page > 1 else None,
        next=page_url(page + 1) if page < last_page else None,
    )
    return meta, links

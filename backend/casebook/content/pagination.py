# backend/casebook/content/pagination.py
import math
from typing import Generic, List, TypeVar

from ..models import CustomModel

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class PageMeta(CustomModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class Paginated(CustomModel, Generic[T]):
    items: List[T]
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def page_meta(total_items: int, page: int, limit: int) -> PageMeta:
    """totalPages = ceil(totalItems/limit), hasNextPage = currentPage < totalPages"""
    total_pages = math.ceil(total_items / limit) if limit > 0 else 0
    return PageMeta(
        current_page=page,
        total_pages=total_pages,
        total_items=total_items,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def paginated(items: list, total_items: int, page: int, limit: int) -> dict:
    return {"items": items, **page_meta(total_items, page, limit).model_dump()}

from typing import Any, Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Query as OrmQuery

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


class Pagination(BaseModel):
    page_number: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


class PagedResult:
    """One page of ORM rows plus the size of the whole result set."""

    def __init__(self, results: List[Any], page_number: int, page_size: int, total: int):
        self.results = results
        self.page_number = page_number
        self.page_size = page_size
        self.total = total


class Page(BaseModel, Generic[T]):
    """Response shape of a `PagedResult`."""
    results: List[T]
    page_number: int
    page_size: int
    total: int

    class Config:
        from_attributes = True


def get_paged(query: OrmQuery, pagination: Pagination) -> PagedResult:
    total = query.order_by(None).count()
    results = query.offset(pagination.offset).limit(pagination.page_size).all()
    return PagedResult(
        results=results,
        page_number=pagination.page_number,
        page_size=pagination.page_size,
        total=total,
    )


def get_pagination(
    page_number: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
) -> Pagination:
    return Pagination(page_number=page_number, page_size=page_size)

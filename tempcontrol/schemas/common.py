# =====================================================
# tempcontrol/schemas/common.py - Response envelope & paging
# =====================================================
from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar

from tempcontrol.repositories.base import total_pages

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope comune a tutte le risposte JSON"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, errors: Optional[List[str]] = None) -> "ApiResponse[T]":
        return cls(success=False, message=message, errors=errors or [message])


class PagedResponse(BaseModel, Generic[T]):
    """Pagina di risultati"""
    items: List[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total_count: int, page: int, page_size: int) -> "PagedResponse[T]":
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total_count, page_size),
        )

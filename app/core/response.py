"""Standardized JSON response envelope helpers."""


import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.core.pagination import PageMeta, PaginationParams

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Single-item response envelope: `{ data: {...} }`"""

    data: T

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class ListResponse(BaseModel, Generic[T]):
    """Paginated list response envelope: `{ data: [...], meta: {...} }`"""

    data: list[T]
    meta: PageMeta

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error envelope: `{ error: { code, message, details? } }`

    Documentation only; the exception handlers build the actual body.
    """

    error: ErrorBody


def error_responses(*status_codes: int) -> dict[int, dict]:
    """OpenAPI ``responses=`` entries for the given error status codes."""
    return {code: {"model": ErrorResponse} for code in status_codes}


def single(item: Any) -> dict:
    """Build a single-item response dict for use with DataResponse."""
    return {"data": item}


def paginated(items: list, total: int, pagination: PaginationParams) -> dict:
    """Build a paginated response dict for use with ListResponse."""
    limit = pagination.limit
    return {
        "data": items,
        "meta": {
            "total": total,
            "page": pagination.page,
            "limit": limit,
            "pages": math.ceil(total / limit) if limit else 1,
        },
    }

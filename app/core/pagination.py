"""Pagination helpers for list endpoints."""


from fastapi import Query
from pydantic import BaseModel

SORTABLE_FIELDS: tuple[str, ...] = (
    "created_at",
    "updated_at",
    "closed_at",
    "customer_name",
    "sale_price",
    "total_price",
    "status",
)


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=25&sort=created_at&order=desc`.

    Defaults to 25 items per page; a page never holds more than 100.
    """

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=25, ge=1, le=100, description="Items per page"),
        sort: str = Query(
            default="created_at",
            pattern=f"^({'|'.join(SORTABLE_FIELDS)})$",
            description="Sort field",
        ),
        order: str = Query(default="desc", pattern="^(asc|desc)$", description="Sort order"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    model_config = {"populate_by_name": True}

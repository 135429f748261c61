"""
Pagination Utilities.

Page-based pagination parameters for list endpoints. The default and
maximum page sizes come from the pagination section of application.yaml.
"""

from dataclasses import dataclass

from fastapi import Depends, Query
from fastapi.exceptions import RequestValidationError

from keepnotes.backend.core.config import AppConfig, get_app_config


@dataclass
class PaginationParams:
    """
    Pagination parameters extracted from query string.

    Pages are 1-based.
    """

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """Number of rows to skip before this page."""
        return (self.page - 1) * self.limit


def get_pagination_params(
    page: int = Query(
        default=1,
        ge=1,
        description="Page number, starting at 1",
    ),
    limit: int | None = Query(
        default=None,
        ge=1,
        description="Maximum number of items per page",
    ),
    app_config: AppConfig = Depends(get_app_config),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    A missing limit falls back to the configured default; a limit above the
    configured maximum is rejected like any other invalid query parameter.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    settings = app_config.application.pagination

    if limit is None:
        limit = settings.default_limit
    elif limit > settings.max_limit:
        raise RequestValidationError([
            {
                "loc": ("query", "limit"),
                "msg": f"Input should be less than or equal to {settings.max_limit}",
                "type": "less_than_equal",
                "input": limit,
            }
        ])

    return PaginationParams(page=page, limit=limit)

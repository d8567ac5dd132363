"""Shared Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Generic error body returned by every failing endpoint."""

    code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Short human-readable error message")


class Pagination(BaseModel):
    """Offset/limit pagination, already clamped to the configured bounds."""

    limit: int = Field(..., ge=1, description="Maximum number of items returned")
    offset: int = Field(0, ge=0, description="Number of items skipped")

    @classmethod
    def clamped(
        cls,
        limit: int | None,
        offset: int | None,
        default_limit: int,
        max_limit: int,
    ) -> "Pagination":
        """Build a pagination from raw values.

        A missing or non-positive limit falls back to ``default_limit``, a
        limit above ``max_limit`` is cut down to it, and a missing or
        negative offset becomes 0.
        """
        if limit is None or limit < 1:
            limit = default_limit
        elif limit > max_limit:
            limit = max_limit

        if offset is None or offset < 0:
            offset = 0

        return cls(limit=limit, offset=offset)

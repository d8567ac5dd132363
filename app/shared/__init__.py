"""Schemas shared across features."""

from app.shared.schemas import ErrorResponse, Pagination

__all__ = [
    "ErrorResponse",
    "Pagination",
]

"""
Mapping of PostgREST errors raised by the Supabase client onto HTTP errors.

The schema enforces its lifecycle rules declaratively (unique constraints,
the group size trigger); services translate those violations here.
"""

from fastapi import HTTPException
from postgrest.exceptions import APIError
from typing import Optional
import logging

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
RAISE_EXCEPTION = "P0001"


def is_unique_violation(exc: Exception) -> bool:
    return isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION


def is_group_full_error(exc: Exception) -> bool:
    return (
        isinstance(exc, APIError)
        and exc.code == RAISE_EXCEPTION
        and "full" in (exc.message or "").lower()
    )


def to_http_exception(exc: Exception, conflict_detail: Optional[str] = None) -> HTTPException:
    """Translate an exception from a Supabase call into an HTTPException."""
    if isinstance(exc, HTTPException):
        return exc
    if is_group_full_error(exc):
        return HTTPException(status_code=409, detail="Group is full")
    if is_unique_violation(exc):
        return HTTPException(status_code=409, detail=conflict_detail or "Already exists")
    logger.error(f"Database error: {exc}")
    return HTTPException(status_code=500, detail=str(exc))

"""Structured error helpers for API responses and lookup results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

T = TypeVar("T")


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code = 400
    code = "bad_request"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        self.payload = build_error_payload(self.code, message, details)


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"


class InvariantViolation(AppError):
    """A write would break a data-model invariant."""

    status_code = 422
    code = "invariant_violation"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


@dataclass(frozen=True)
class MissingReference:
    """A foreign key that did not resolve (status id, parent team id, ...)."""

    kind: str
    reference_id: Any

    def describe(self) -> str:
        return f"{self.kind} {self.reference_id} not found"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """
    Outcome of resolving a reference.

    `value` is always usable: on a miss it holds the caller-supplied fallback
    (possibly None) and `error` names the reference that failed, so callers
    decide whether to degrade quietly or surface a warning.
    """

    value: Optional[T]
    error: Optional[MissingReference] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def found(cls, value: T) -> "LookupResult[T]":
        return cls(value=value)

    @classmethod
    def missing(cls, kind: str, reference_id: Any, fallback: Optional[T] = None) -> "LookupResult[T]":
        return cls(value=fallback, error=MissingReference(kind, reference_id))

    def unwrap(self) -> T:
        """Return the value or raise NotFoundError for a miss."""
        if self.error is not None:
            raise NotFoundError(self.error.describe(), details={"kind": self.error.kind, "id": str(self.error.reference_id)})
        return self.value  # type: ignore[return-value]

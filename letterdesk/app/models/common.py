"""Common types shared across all models."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorCode(str, Enum):
    """Machine-readable error codes carried in the error envelope."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    ALREADY_PAID = "ALREADY_PAID"
    GENERATION_ERROR = "GENERATION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    PDF_GENERATION_ERROR = "PDF_GENERATION_ERROR"
    EMAIL_SEND_ERROR = "EMAIL_SEND_ERROR"
    EMAIL_NOT_CONFIGURED = "EMAIL_NOT_CONFIGURED"
    PAYMENT_NOT_CONFIGURED = "PAYMENT_NOT_CONFIGURED"
    PAYMENT_ERROR = "PAYMENT_ERROR"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


NOT_FOUND_MESSAGE = "Document not found or expired"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Explicit success/failure value returned by core operations.

    Core operations never raise to their callers; the HTTP boundary turns a
    failed Result into an error envelope.
    """

    ok: bool
    value: T | None = None
    error: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorCode, message: str) -> "Result[T]":
        return cls(ok=False, error=error, message=message)

    @classmethod
    def not_found(cls) -> "Result[T]":
        return cls(ok=False, error=ErrorCode.DOCUMENT_NOT_FOUND, message=NOT_FOUND_MESSAGE)

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class ErrorType(str, Enum):
    DATABASE_ERROR = "DatabaseError"
    RECORD_NOT_FOUND = "RecordNotFound"
    ALREADY_EXISTS = "AlreadyExists"
    INVALID_INPUT = "InvalidInput"
    FORBIDDEN = "Forbidden"
    FILE_SYSTEM_ERROR = "FileSystemError"
    UNKNOWN_ERROR = "UnknownError"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a repository or service call.

    A success carries ``value`` (which may legitimately be ``None``, e.g. a lookup
    that found nothing). A failure carries a human readable ``message`` and exactly
    one ``error_type``. Callers check ``is_success`` before reading ``value``.
    """

    is_success: bool
    value: Optional[T] = None
    message: Optional[str] = None
    error_type: Optional[ErrorType] = None

    def __post_init__(self):
        if self.is_success and (self.message is not None or self.error_type is not None):
            raise ValueError("A successful result cannot carry an error")
        if not self.is_success:
            if self.error_type is None or not self.message:
                raise ValueError("A failed result needs both a message and an error type")
            if self.value is not None:
                raise ValueError("A failed result cannot carry a value")

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def failure(cls, message: str, error_type: ErrorType) -> "Result[T]":
        return cls(is_success=False, message=message, error_type=error_type)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def forward(self) -> "Result[U]":
        """Re-type a failure for a caller with a different payload type."""
        if self.is_success:
            raise ValueError("Only failed results can be forwarded")
        return Result(is_success=False, message=self.message, error_type=self.error_type)

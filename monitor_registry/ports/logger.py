"""Logger port for registry logging."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LogContext(BaseModel):
    """Strongly-typed context for structured logging.

    Provides a consistent way to pass context information to loggers so
    every registry log line can be correlated with its operation.
    """

    model_config = ConfigDict(
        extra="allow",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    operation: str | None = Field(default=None, description="Registry operation being performed")
    caller: str | None = Field(default=None, description="Principal that invoked the operation")
    subscription_id: int | None = Field(default=None, description="Subscription the operation targets")
    block_height: int | None = Field(default=None, ge=0, description="Block height read for the operation")
    error_code: str | None = Field(default=None, description="Structured error code")
    duration_ms: float | None = Field(default=None, ge=0, description="Operation duration in milliseconds")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging frameworks."""
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def with_error(self, error_code: str) -> LogContext:
        """Create a new context with error information."""
        return self.model_copy(update={"error_code": error_code})


class LoggerPort(ABC):
    """Abstract interface for logging operations.

    This port defines the contract for logging implementations,
    following the dependency inversion principle.
    """

    @abstractmethod
    def debug(self, message: str, context: LogContext | None = None) -> None:
        """Log a debug message."""
        ...

    @abstractmethod
    def info(self, message: str, context: LogContext | None = None) -> None:
        """Log an info message."""
        ...

    @abstractmethod
    def warning(self, message: str, context: LogContext | None = None) -> None:
        """Log a warning message."""
        ...

    @abstractmethod
    def error(self, message: str, context: LogContext | None = None) -> None:
        """Log an error message."""
        ...

    @abstractmethod
    def exception(self, message: str, context: LogContext | None = None) -> None:
        """Log an exception with traceback."""
        ...

"""Simple logger implementation on top of the standard logging module."""

import logging

from ..ports.logger import LogContext, LoggerPort


class SimpleLogger(LoggerPort):
    """Logger implementation using Python's standard logging.

    Context fields are passed as ``extra`` and appended to the message so
    they are visible with the default formatter.
    """

    def __init__(self, name: str = "monitor_registry", level: int = logging.INFO):
        """Initialize the logger.

        Args:
            name: Logger name (default: "monitor_registry")
            level: Logging level (default: INFO)
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Add console handler if not already present
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    @staticmethod
    def _render(message: str, context: LogContext | None) -> tuple[str, dict]:
        if context is None:
            return message, {}
        fields = context.to_dict()
        if not fields:
            return message, {}
        suffix = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} [{suffix}]", {"registry": fields}

    def debug(self, message: str, context: LogContext | None = None) -> None:
        """Log a debug message."""
        text, extra = self._render(message, context)
        self._logger.debug(text, extra=extra)

    def info(self, message: str, context: LogContext | None = None) -> None:
        """Log an info message."""
        text, extra = self._render(message, context)
        self._logger.info(text, extra=extra)

    def warning(self, message: str, context: LogContext | None = None) -> None:
        """Log a warning message."""
        text, extra = self._render(message, context)
        self._logger.warning(text, extra=extra)

    def error(self, message: str, context: LogContext | None = None) -> None:
        """Log an error message."""
        text, extra = self._render(message, context)
        self._logger.error(text, extra=extra)

    def exception(self, message: str, context: LogContext | None = None) -> None:
        """Log an exception with traceback."""
        text, extra = self._render(message, context)
        self._logger.exception(text, extra=extra)

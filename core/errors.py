"""
Error Handling Module
---------------------
Typed error records for the script engine.

The engine is the only error boundary: every failure becomes a report
entry, and a MeghError record is kept here for diagnostics.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, List, Optional
import logging
import traceback


class ErrorCategory(Enum):
    """Categories of run failures."""
    NO_INPUT = auto()            # Empty or whitespace-only input
    UNRESOLVED_VERB = auto()     # No skill claims the verb
    HANDLER_FAILURE = auto()     # Skill raised while handling a command
    MALFORMED_INPUT = auto()     # Structured plan had no usable entries


@dataclass
class MeghError:
    """
    Structured error with metadata.

    Used for consistent error handling and reporting.
    """
    category: ErrorCategory
    message: str
    verb: str = ""
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        category: ErrorCategory = ErrorCategory.HANDLER_FAILURE,
        verb: str = "",
        details: Optional[Dict] = None
    ) -> "MeghError":
        """Create error from an exception."""
        return cls(
            category=category,
            message=describe_exception(exception),
            verb=verb,
            details=details,
            stack_trace="".join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            )),
        )

    def __repr__(self) -> str:
        return f"MeghError({self.category.name}: {self.message})"


def describe_exception(exception: BaseException) -> str:
    """Human readable description; falls back to the type name for empty messages."""
    text = str(exception)
    return text if text else type(exception).__name__


class ErrorHandler:
    """
    Central error recorder with logging.

    Keeps a bounded history so callers can ask which kinds of failures
    a session has seen.
    """

    LEVELS: Dict[ErrorCategory, int] = {
        ErrorCategory.NO_INPUT: logging.INFO,
        ErrorCategory.MALFORMED_INPUT: logging.DEBUG,
        ErrorCategory.UNRESOLVED_VERB: logging.WARNING,
        ErrorCategory.HANDLER_FAILURE: logging.ERROR,
    }

    def __init__(self, max_history: int = 100):
        self._logger = logging.getLogger("megh.errors")
        self._error_history: List[MeghError] = []
        self._max_history = max_history

    def record(self, error: MeghError) -> MeghError:
        """Log an error and keep it in history."""
        level = self.LEVELS.get(error.category, logging.ERROR)
        self._logger.log(
            level,
            f"{error.category.name}: {error.message}",
            extra={"verb": error.verb},
        )
        if error.stack_trace and level >= logging.ERROR:
            self._logger.debug(f"Stack trace:\n{error.stack_trace}")

        self._error_history.append(error)
        if len(self._error_history) > self._max_history:
            self._error_history.pop(0)
        return error

    @property
    def history(self) -> List[MeghError]:
        return list(self._error_history)

    def get_error_stats(self) -> Dict[str, int]:
        """Get error counts per category."""
        stats: Dict[str, int] = {}
        for error in self._error_history:
            key = error.category.name
            stats[key] = stats.get(key, 0) + 1
        return stats

    def clear_history(self) -> None:
        """Clear error history."""
        self._error_history.clear()

# Core module - Script engine, error model and application context
# The engine is the only error boundary: nothing escapes run()

from .errors import ErrorCategory, ErrorHandler, MeghError
from .engine import (
    ScriptEngine, EngineConfig, ExecutionReport, ReportEntry, EntryStatus
)
from .context import AppContext, build_context

__all__ = [
    "ErrorCategory", "ErrorHandler", "MeghError",
    "ScriptEngine", "EngineConfig", "ExecutionReport", "ReportEntry", "EntryStatus",
    "AppContext", "build_context",
]

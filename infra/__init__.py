# Infrastructure module - Logging, configuration, local service bus
# The service bus is imported explicitly (infra.service_bus) to keep
# this package free of engine imports

from .logging import (
    get_logger, configure_logging, RunContext,
    log_run_end, get_run_id, generate_run_id
)
from .config import AppConfig, ConfigError, load_config

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "RunContext",
    "log_run_end",
    "get_run_id",
    "generate_run_id",
    # Config
    "AppConfig",
    "ConfigError",
    "load_config",
]

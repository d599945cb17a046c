"""
Configuration
-------------
YAML configuration with environment variable overrides.

Every section has working defaults, so a missing config.yaml is a warning,
not an error. Environment variables of the form MEGH_<SECTION>_<KEY>
override file values (e.g. MEGH_USAGE_THRESHOLD=5).
"""

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import os

import yaml

from .logging import get_logger

ENV_PREFIX = "MEGH_"


class ConfigError(Exception):
    """Configuration could not be loaded or is invalid."""
    pass


@dataclass
class EngineSettings:
    """Report markers used by the script engine."""
    no_input_marker: str = "(no input)"
    ok_marker: str = "OK"


@dataclass
class RegistrySettings:
    """Capability registry policy."""
    collision_policy: str = "last_wins"  # last_wins | first_wins


@dataclass
class ParserSettings:
    """Natural-language fallback policy."""
    fallback_verb: str = "save_note"
    invalid_plan_verb: str = "invalid_plan"
    rules_path: Optional[str] = None


@dataclass
class UsageSettings:
    """Usage recommender settings."""
    store_path: str = "megh_store.yaml"
    threshold: int = 3


@dataclass
class NotesSettings:
    """Notes skill storage."""
    key: str = "megh_notes"


@dataclass
class HttpSettings:
    """Settings for the HTTP-backed skills."""
    timeout_seconds: float = 15.0
    user_agent: str = "MeghAIna/0.3"


@dataclass
class ServerSettings:
    """Internal service bus settings."""
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class LoggingSettings:
    level: str = "INFO"
    dir: str = "logs"
    file: bool = True


@dataclass
class AppConfig:
    """Top-level application configuration."""
    engine: EngineSettings = field(default_factory=EngineSettings)
    registry: RegistrySettings = field(default_factory=RegistrySettings)
    parser: ParserSettings = field(default_factory=ParserSettings)
    usage: UsageSettings = field(default_factory=UsageSettings)
    notes: NotesSettings = field(default_factory=NotesSettings)
    http: HttpSettings = field(default_factory=HttpSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    debug: bool = False

    def validate(self) -> None:
        """Check cross-field constraints. Raises ConfigError."""
        if self.registry.collision_policy not in ("last_wins", "first_wins"):
            raise ConfigError(
                f"Unknown collision policy: {self.registry.collision_policy}"
            )
        if self.usage.threshold < 1:
            raise ConfigError("usage.threshold must be >= 1")
        if not self.parser.fallback_verb.strip():
            raise ConfigError("parser.fallback_verb must not be empty")
        if not self.notes.key.strip():
            raise ConfigError("notes.key must not be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Build a config from a parsed YAML mapping."""
        config = cls()
        for section, values in data.items():
            if not hasattr(config, section):
                get_logger("infra.config").warning(f"Unknown config section: {section}")
                continue

            current = getattr(config, section)
            if is_dataclass(current):
                if not isinstance(values, Mapping):
                    raise ConfigError(f"Config section '{section}' must be a mapping")
                _apply_section(current, section, values)
            else:
                setattr(config, section, _coerce(values, type(current), section))
        return config


def _apply_section(section_obj: Any, section: str, values: Mapping[str, Any]) -> None:
    known = {f.name: f for f in fields(section_obj)}
    for key, value in values.items():
        if key not in known:
            get_logger("infra.config").warning(f"Unknown config key: {section}.{key}")
            continue
        current = getattr(section_obj, key)
        target = type(current) if current is not None else str
        setattr(section_obj, key, _coerce(value, target, f"{section}.{key}"))


def _coerce(value: Any, target: type, key: str) -> Any:
    """Coerce a raw YAML/env value to the type of the default."""
    if value is None:
        return None
    try:
        if target is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            return bool(value)
        if target in (int, float, str):
            return target(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e
    return value


def _env_overrides(config: AppConfig, environ: Mapping[str, str]) -> None:
    """Apply MEGH_<SECTION>_<KEY> overrides."""
    for f in fields(config):
        section_obj = getattr(config, f.name)
        if not is_dataclass(section_obj):
            env_value = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if env_value is not None:
                setattr(config, f.name, _coerce(env_value, type(section_obj), f.name))
            continue
        overrides = {}
        for sub in fields(section_obj):
            env_value = environ.get(f"{ENV_PREFIX}{f.name.upper()}_{sub.name.upper()}")
            if env_value is not None:
                overrides[sub.name] = env_value
        if overrides:
            _apply_section(section_obj, f.name, overrides)


def load_config(
    config_path: str = "config.yaml",
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load configuration from YAML, then apply environment overrides.

    Raises ConfigError if the file exists but is not valid.
    """
    logger = get_logger("infra.config")
    path = Path(config_path)
    data: Dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")
        logger.info(f"Loaded config from {path}")
    else:
        logger.warning(f"Config file not found: {path}, using defaults")

    config = AppConfig.from_dict(data)
    _env_overrides(config, os.environ if environ is None else environ)
    config.validate()
    return config

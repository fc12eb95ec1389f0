"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    NodeUpdate,
    check_forest,
    validate_json_size,
    validate_json_depth,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import loads_json, dumps_json, JSONParseError
from .id import Generator, SequentialGenerator, IdGenerator, new_component_id


def create_container(backend_url: str | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(backend_url)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "NodeUpdate",
    "check_forest",
    "validate_json_size",
    "validate_json_depth",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "loads_json",
    "dumps_json",
    "JSONParseError",
    # IDs
    "Generator",
    "SequentialGenerator",
    "IdGenerator",
    "new_component_id",
    # DI
    "create_container",
]

"""Runtime configuration, logging and fault policy."""

from tilepass.runtime.config import (
    PassDiagnosticsConfig,
    PassRenderConfig,
    RuntimeConfig,
    get_runtime_config,
    initialize_runtime_config,
    load_runtime_config,
    resolve_log_level_name,
    set_runtime_config,
)
from tilepass.runtime.errors import ClipStackConsistencyError, ensure_invariant
from tilepass.runtime.logging import configure_logging, setup_logging, shutdown_logging

__all__ = [
    "ClipStackConsistencyError",
    "PassDiagnosticsConfig",
    "PassRenderConfig",
    "RuntimeConfig",
    "configure_logging",
    "ensure_invariant",
    "get_runtime_config",
    "initialize_runtime_config",
    "load_runtime_config",
    "resolve_log_level_name",
    "set_runtime_config",
    "setup_logging",
    "shutdown_logging",
]

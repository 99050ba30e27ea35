"""Centralized runtime configuration for pass rendering."""

from __future__ import annotations

import os
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Mapping

from tilepass.api.color import RGBA, parse_hex_color


@dataclass(frozen=True, slots=True)
class PassRenderConfig:
    clear_color: RGBA
    replay_on_flush: bool
    cull_entities: bool


@dataclass(frozen=True, slots=True)
class PassDiagnosticsConfig:
    enabled: bool
    buffer_capacity: int
    sampling_n: int
    category_allowlist: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    log_level: str
    render: PassRenderConfig
    diagnostics: PassDiagnosticsConfig


_RUNTIME_CONFIG: ContextVar[RuntimeConfig | None] = ContextVar("tilepass_runtime_config", default=None)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is None:
        return value
    return max(int(minimum), value)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _csv(name: str, *, env: Mapping[str, str] | None = None) -> tuple[str, ...]:
    raw = _text(name, "", env=env)
    if not raw:
        return ()
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


def _color(name: str, default: str, *, env: Mapping[str, str] | None = None) -> RGBA:
    try:
        return parse_hex_color(_text(name, default, env=env))
    except ValueError:
        return parse_hex_color(default)


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with the package-prefixed variable taking precedence."""
    value = _raw("TILEPASS_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper()


def load_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    return RuntimeConfig(
        log_level=resolve_log_level_name(env=env),
        render=PassRenderConfig(
            clear_color=_color("TILEPASS_CLEAR_COLOR", "#00000000", env=env),
            replay_on_flush=_flag("TILEPASS_REPLAY_ON_FLUSH", True, env=env),
            cull_entities=_flag("TILEPASS_CULL_ENTITIES", True, env=env),
        ),
        diagnostics=PassDiagnosticsConfig(
            enabled=_flag("TILEPASS_DIAGNOSTICS_ENABLED", False, env=env),
            buffer_capacity=_int("TILEPASS_DIAGNOSTICS_BUFFER_CAP", 10_000, minimum=100, env=env),
            sampling_n=_int("TILEPASS_DIAGNOSTICS_SAMPLING_N", 1, minimum=1, env=env),
            category_allowlist=_csv("TILEPASS_DIAGNOSTICS_CATEGORY_ALLOWLIST", env=env),
        ),
    )


def initialize_runtime_config(*, env: Mapping[str, str] | None = None) -> RuntimeConfig:
    config = load_runtime_config(env=env)
    _RUNTIME_CONFIG.set(config)
    return config


def set_runtime_config(config: RuntimeConfig) -> RuntimeConfig:
    _RUNTIME_CONFIG.set(config)
    return config


def get_runtime_config() -> RuntimeConfig:
    config = _RUNTIME_CONFIG.get()
    if config is not None:
        return config
    return initialize_runtime_config()


__all__ = [
    "PassDiagnosticsConfig",
    "PassRenderConfig",
    "RuntimeConfig",
    "get_runtime_config",
    "initialize_runtime_config",
    "load_runtime_config",
    "resolve_log_level_name",
    "set_runtime_config",
]

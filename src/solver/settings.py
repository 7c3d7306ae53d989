"""Runtime settings for the solver CLI.

Precedence, lowest first: built-in defaults, the ``[solver]`` section of
``config.toml``, ``SUDOKU_*`` environment variables, explicit overrides
(command line flags).  Values that do not parse are ignored at every layer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from project_config import get_config

from .trace import TRACE_LEVELS

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DIGIT_CHARS = frozenset("123456789")

_ENV_KEYS = {
    "trace_level": "SUDOKU_TRACE_LEVEL",
    "log_level": "SUDOKU_LOG_LEVEL",
    "trace_log_dir": "SUDOKU_TRACE_LOG_DIR",
    "blank": "SUDOKU_BLANK",
}


@dataclass(frozen=True)
class SolverSettings:
    """Finalised settings after precedence resolution."""

    trace_level: str = "none"
    log_level: str = "WARNING"
    trace_log_dir: str = ""
    blank: str = "."

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _parse_trace_level(value: Any) -> Optional[str]:
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in TRACE_LEVELS:
            return normalised
    return None


def _parse_log_level(value: Any) -> Optional[str]:
    if isinstance(value, str):
        normalised = value.strip().upper()
        if normalised in _LOG_LEVELS:
            return normalised
    return None


def _parse_blank(value: Any) -> Optional[str]:
    if isinstance(value, str) and len(value) == 1 and not value.isspace() and value not in _DIGIT_CHARS:
        return value
    return None


def _apply_overrides(settings: SolverSettings, overrides: Mapping[str, Any]) -> SolverSettings:
    trace_level = settings.trace_level
    log_level = settings.log_level
    trace_log_dir = settings.trace_log_dir
    blank = settings.blank

    if "trace_level" in overrides:
        maybe = _parse_trace_level(overrides["trace_level"])
        if maybe is not None:
            trace_level = maybe
    if "log_level" in overrides:
        maybe = _parse_log_level(overrides["log_level"])
        if maybe is not None:
            log_level = maybe
    if "trace_log_dir" in overrides:
        value = overrides["trace_log_dir"]
        if isinstance(value, str):
            trace_log_dir = value.strip()
    if "blank" in overrides:
        maybe = _parse_blank(overrides["blank"])
        if maybe is not None:
            blank = maybe

    return SolverSettings(
        trace_level=trace_level,
        log_level=log_level,
        trace_log_dir=trace_log_dir,
        blank=blank,
    )


def _config_overrides() -> Dict[str, Any]:
    section = get_config().get("solver")
    return dict(section) if isinstance(section, dict) else {}


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    return {field: env[key] for field, key in _ENV_KEYS.items() if key in env}


def resolve_settings(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SolverSettings:
    """Merge every configuration layer into a :class:`SolverSettings`.

    ``env`` defaults to :data:`os.environ`.  ``None`` values in ``overrides``
    mean "not given" and are skipped.
    """

    env_map = os.environ if env is None else env
    settings = SolverSettings()
    settings = _apply_overrides(settings, _config_overrides())
    settings = _apply_overrides(settings, _env_overrides(env_map))
    if overrides:
        explicit = {key: value for key, value in overrides.items() if value is not None}
        settings = _apply_overrides(settings, explicit)
    return settings


__all__ = ["SolverSettings", "resolve_settings"]

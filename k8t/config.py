"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from k8t.models.config import (
    AnalysisConfig,
    ClusterConfig,
    K8tConfig,
    LogConfig,
    OutputConfig,
    OutputFormat,
)

_RE_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"K8T_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def parse_duration(value: str) -> float:
    """Parse a Go-style duration (``30s``, ``1m30s``, ``500ms``) into seconds.

    A bare number is taken as seconds.
    """
    text = value.strip()
    if not text:
        raise ValueError("Invalid duration: empty string")
    if re.fullmatch(r"\d+(\.\d+)?", text):
        seconds = float(text)
    else:
        parts = _RE_DURATION_PART.findall(text)
        if not parts or "".join(num + unit for num, unit in parts) != text:
            raise ValueError(f"Invalid duration format: {value}")
        seconds = sum(float(num) * _DURATION_UNITS[unit] for num, unit in parts)
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value}")
    return seconds


def parse_format(value: str) -> OutputFormat:
    """Map a user-supplied format name to OutputFormat (``yml`` is accepted)."""
    normalized = value.strip().lower()
    if normalized in ("", "text"):
        return OutputFormat.TEXT
    if normalized == "json":
        return OutputFormat.JSON
    if normalized in ("yaml", "yml"):
        return OutputFormat.YAML
    raise ValueError(f"unsupported format '{value}': must be one of: text, json, yaml")


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> K8tConfig:
    """Load configuration from K8T_* environment variables.

    ``K8T_KUBECONFIG`` falls back to the standard ``KUBECONFIG`` variable.
    """
    return K8tConfig(
        cluster=ClusterConfig(
            kubeconfig=_env("KUBECONFIG", os.environ.get("KUBECONFIG", "")),
        ),
        analysis=AnalysisConfig(
            namespace=_env("NAMESPACE", "default"),
            timeout_seconds=parse_duration(_env("TIMEOUT", "30s")),
            include_audit=_env_bool("AUDIT", False),
        ),
        output=OutputConfig(
            format=parse_format(_env("OUTPUT", "text")),
            no_color=_env_bool("NO_COLOR", False) or "NO_COLOR" in os.environ,
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )

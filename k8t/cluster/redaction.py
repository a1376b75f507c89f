"""Secret redaction for event messages and resource fragments.

Event messages coming from the kubelet can echo registry credentials
(basic-auth URLs, dockerconfigjson fragments, bearer tokens).  Everything
that leaves the cluster layer goes through ``redact_event_message`` first.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "[REDACTED]"

_FIELD_PATTERNS = [
    re.compile(r'("password"\s*:\s*)"[^"]*"'),
    re.compile(r'("token"\s*:\s*)"[^"]*"'),
    re.compile(r'("auth"\s*:\s*)"[^"]*"'),
    re.compile(r'("secret"\s*:\s*)"[^"]*"'),
]
_RE_BASIC_AUTH_URL = re.compile(r"://([^:/\s]+):([^@\s]+)@")
_RE_BEARER = re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*")
_RE_API_KEY = re.compile(r"([Aa]pi[-_]?[Kk]ey|[Tt]oken)\s*[:=]\s*['\"]?[A-Za-z0-9\-._~+/]{16,}['\"]?")
_RE_DOCKER_CONFIG = re.compile(r'\{[^}]*"auth"\s*:\s*"[^"]*"[^}]*\}')
_RE_CREDENTIAL_LIKE = re.compile(r"[A-Za-z0-9+/]{40,}={0,2}")

_SENSITIVE_KEYS = (
    "password",
    "token",
    "auth",
    "secret",
    "apikey",
    "api_key",
    "credential",
)


def redact_secrets(text: str) -> str:
    """Remove credential-looking substrings from free text."""
    if not text:
        return text
    result = text
    for pattern in _FIELD_PATTERNS:
        result = pattern.sub(rf'\1"{REDACTED}"', result)
    result = _RE_BASIC_AUTH_URL.sub(f"://{REDACTED}@", result)
    result = _RE_BEARER.sub(f"Bearer {REDACTED}", result)
    result = _RE_API_KEY.sub(rf"\1: {REDACTED}", result)
    return result


def redact_event_message(message: str) -> str:
    """Redact a Kubernetes event message.

    Applies ``redact_secrets`` plus two kubelet-specific rules: inline
    docker config objects are collapsed, and long base64-like runs are
    dropped from messages that mention pull secrets.
    """
    if not message:
        return message
    result = redact_secrets(message)
    if "dockerconfigjson" in result or ".dockercfg" in result:
        result = _RE_DOCKER_CONFIG.sub("{...dockerconfig redacted...}", result)
    if "imagePullSecrets" in result or "pull secret" in result:
        result = _RE_CREDENTIAL_LIKE.sub(REDACTED, result)
    return result


def redact_mapping(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *data* with sensitive keys replaced, recursively."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in _SENSITIVE_KEYS):
            result[key] = REDACTED
        elif isinstance(value, Mapping):
            result[key] = redact_mapping(value)
        elif isinstance(value, str):
            result[key] = redact_secrets(value)
        else:
            result[key] = value
    return result

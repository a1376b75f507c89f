"""Validation of user-supplied Kubernetes names.

Names are checked before any cluster call: RFC 1123 label format plus an
explicit denylist of shell/path metacharacters.
"""

from __future__ import annotations

import re

from k8t.errors import InvalidInputError

MAX_NAME_LENGTH = 253

_RE_DNS1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")

_INJECTION_PATTERNS = (
    "..",
    "/",
    "\\",
    "$",
    "`",
    ";",
    "|",
    "&",
    "<",
    ">",
    "*",
    "?",
    "[",
    "]",
    "{",
    "}",
    "(",
    ")",
    "'",
    '"',
    "\n",
    "\r",
    "\t",
    "\x00",
)


def _contains_injection_pattern(value: str) -> bool:
    return any(pattern in value for pattern in _INJECTION_PATTERNS)


def _check_common(field: str, value: str) -> None:
    if not value:
        raise InvalidInputError(field, f"{field} cannot be empty")
    if len(value) > MAX_NAME_LENGTH:
        raise InvalidInputError(field, f"{field} exceeds maximum length of {MAX_NAME_LENGTH} characters")
    if _contains_injection_pattern(value):
        raise InvalidInputError(field, f"{field} contains invalid characters or injection patterns")


def validate_namespace(namespace: str) -> None:
    """Raise InvalidInputError unless *namespace* is a valid DNS-1123 label."""
    _check_common("namespace", namespace)
    if not _RE_DNS1123_LABEL.match(namespace):
        raise InvalidInputError(
            "namespace",
            "namespace must consist of lowercase alphanumeric characters or '-', "
            "and must start and end with an alphanumeric character",
        )


def _validate_subdomain(field: str, value: str) -> None:
    _check_common(field, value)
    for label in value.split("."):
        if not _RE_DNS1123_LABEL.match(label):
            raise InvalidInputError(
                field,
                f"{field} label '{label}' is invalid: must consist of lowercase alphanumeric "
                "characters or '-', and must start and end with an alphanumeric character",
            )


def validate_pod_name(pod_name: str) -> None:
    """Pod names are DNS-1123 subdomains: dot-separated labels."""
    _validate_subdomain("pod name", pod_name)


def validate_workload_name(workload_name: str) -> None:
    _validate_subdomain("workload name", workload_name)

"""Error taxonomy for k8t.

Every error raised across the library boundary derives from ``K8tError``
and carries an ``ErrorKind`` plus the structured fields a caller needs to
build a message or an exit code without parsing strings.  Callers inspect
``exc.kind``; the concrete class only exists to hold the fields.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Kind of failure surfaced by the analysis pipeline."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    INVALID_INPUT = "invalid_input"
    INTERNAL = "internal"


class K8tError(Exception):
    """Base class for all k8t errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL


class PodNotFoundError(K8tError):
    """The named pod does not exist in the namespace."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, namespace: str, pod_name: str) -> None:
        super().__init__(f"pod '{pod_name}' not found in namespace '{namespace}'")
        self.namespace = namespace
        self.pod_name = pod_name


class PermissionDeniedError(K8tError):
    """Insufficient RBAC access to a resource/verb in a namespace."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, resource: str, verb: str, namespace: str) -> None:
        super().__init__(f"insufficient permissions: {resource}/{verb} in namespace '{namespace}'")
        self.resource = resource
        self.verb = verb
        self.namespace = namespace


class AnalysisTimeoutError(K8tError):
    """The overall analysis deadline elapsed during ``operation``."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(f"operation '{operation}' timed out after {timeout_seconds:g}s")
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class InvalidInputError(K8tError):
    """Caller-supplied input was rejected before any cluster call."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"validation failed for '{field}': {message}")
        self.field = field
        self.message = message


class EmptyReferenceError(InvalidInputError):
    """An image reference string was empty."""

    def __init__(self, container_name: str = "") -> None:
        super().__init__("image", "image reference cannot be empty")
        self.container_name = container_name


class FindingInvariantError(K8tError):
    """An assembled DiagnosticFinding violated its own invariants.

    This is a defect in the assembler, never a runtime condition of the
    cluster, and must abort report construction.
    """

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(f"invalid diagnostic finding: {message}")
        self.message = message

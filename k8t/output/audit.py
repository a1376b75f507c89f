"""Audit trail of cluster access.

Every API call the coordinator makes is recorded as an AuditEntry and
logged as a ``cluster_access`` line on stderr.  The recorded entries can be
attached to the report's ``audit_log``.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from k8t.models.analysis import AuditEntry, TargetType

_log = structlog.get_logger(component="audit")


class AuditLogger:
    """Collects AuditEntry values for one CLI invocation."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    def log_resource_access(self, resource_type: str, resource_name: str, namespace: str, operation: str) -> None:
        self._entries.append(
            AuditEntry(
                timestamp=datetime.now(tz=UTC),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
                operation=operation,
            )
        )
        _log.info(
            "cluster_access",
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
            operation=operation,
        )

    def log_pod_get(self, pod_name: str, namespace: str) -> None:
        self.log_resource_access("pods", pod_name, namespace, "get")

    def log_pod_list(self, namespace: str) -> None:
        self.log_resource_access("pods", "", namespace, "list")

    def log_event_list(self, namespace: str) -> None:
        self.log_resource_access("events", "", namespace, "list")

    def log_namespace_list(self) -> None:
        self.log_resource_access("namespaces", "", "", "list")

    def log_analysis_start(self, target_type: TargetType, target_name: str, namespace: str) -> None:
        _log.info(
            "analysis_start",
            target_type=str(target_type),
            target_name=target_name,
            namespace=namespace,
        )

    def log_analysis_complete(
        self,
        target_type: TargetType,
        target_name: str,
        namespace: str,
        findings_count: int,
        duration_ms: float = 0.0,
    ) -> None:
        _log.info(
            "analysis_complete",
            target_type=str(target_type),
            target_name=target_name,
            namespace=namespace,
            findings_count=findings_count,
            duration_ms=round(duration_ms, 1),
        )

"""Diagnostic finding and analysis report data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from k8t.errors import FindingInvariantError
from k8t.models.events import EventSummary, RootCause, Severity
from k8t.models.images import ImageReference


class TargetType(StrEnum):
    """Scope of one analysis invocation."""

    POD = "pod"
    WORKLOAD = "workload"  # Deployment/StatefulSet/...
    NAMESPACE = "namespace"


# ---------------------------------------------------------------------------
# Network diagnostics (reserved: populated only by an external prober)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DNSResult:
    success: bool
    resolved_ips: tuple[str, ...] = field(default_factory=tuple)
    error_message: str = ""
    duration_ms: int = 0


@dataclass(frozen=True)
class TCPResult:
    success: bool
    port: int = 443
    error_message: str = ""
    duration_ms: int = 0


@dataclass(frozen=True)
class HTTPResult:
    success: bool
    status_code: int = 0
    error_message: str = ""
    duration_ms: int = 0


@dataclass(frozen=True)
class NetworkDiagnostics:
    registry_host: str
    dns_resolution: DNSResult | None = None
    tcp_connection: TCPResult | None = None
    http_check: HTTPResult | None = None


# ---------------------------------------------------------------------------
# Finding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiagnosticFinding:
    """One pod's complete diagnostic result: cause, severity, evidence, remediation."""

    root_cause: RootCause
    severity: Severity
    pod_name: str
    pod_namespace: str
    affected_containers: tuple[str, ...]
    summary: str
    details: str
    remediation_steps: tuple[str, ...]
    image_references: tuple[ImageReference, ...] = field(default_factory=tuple)
    events: tuple[EventSummary, ...] = field(default_factory=tuple)
    is_transient: bool = False
    failure_count: int = 0
    first_failure_time: datetime | None = None
    last_failure_time: datetime | None = None
    failure_duration: str = ""  # human-readable span
    network_diagnostics: NetworkDiagnostics | None = None

    def validate(self) -> None:
        """Raise FindingInvariantError if this finding is not well-formed."""
        if not self.pod_name:
            raise FindingInvariantError("pod_name is required")
        if not self.pod_namespace:
            raise FindingInvariantError("pod_namespace is required")
        if not self.affected_containers:
            raise FindingInvariantError("at least one affected container required")
        if not self.remediation_steps:
            raise FindingInvariantError("remediation_steps required")
        if self.severity != self.root_cause.severity:
            raise FindingInvariantError(
                f"severity {self.severity} does not match root cause {self.root_cause}"
            )
        if not self.is_transient and self.failure_count < 3:
            raise FindingInvariantError(f"persistent failure requires 3+ failures, got {self.failure_count}")


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditEntry:
    """One recorded cluster access."""

    timestamp: datetime
    resource_type: str  # "pods", "events", "namespaces"
    resource_name: str
    namespace: str
    operation: str  # "get", "list"


@dataclass(frozen=True)
class ReportSummary:
    """High-level counts over the findings of one report."""

    total_pods_analyzed: int = 0
    pods_with_issues: int = 0
    total_containers: int = 0
    containers_with_issues: int = 0
    root_cause_breakdown: dict[RootCause, int] = field(default_factory=dict)
    high_severity_count: int = 0
    medium_severity_count: int = 0
    low_severity_count: int = 0


@dataclass(frozen=True)
class AnalysisReport:
    """Top-level, serializable outcome of one analysis invocation."""

    generated_at: datetime
    tool_version: str
    target_type: TargetType
    target_name: str
    namespace: str
    summary: ReportSummary = field(default_factory=ReportSummary)
    findings: tuple[DiagnosticFinding, ...] = field(default_factory=tuple)
    audit_log: tuple[AuditEntry, ...] = field(default_factory=tuple)

    @property
    def has_issues(self) -> bool:
        return bool(self.findings)


@dataclass(frozen=True)
class PodIssue:
    """A pod flagged by the cluster scan (``k8t check``)."""

    namespace: str
    pod_name: str
    phase: str
    issue_type: str

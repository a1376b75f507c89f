"""Core data structures for k8t."""

from k8t.models.analysis import (
    AnalysisReport,
    AuditEntry,
    DiagnosticFinding,
    DNSResult,
    HTTPResult,
    NetworkDiagnostics,
    PodIssue,
    ReportSummary,
    TargetType,
    TCPResult,
)
from k8t.models.config import K8tConfig, OutputFormat
from k8t.models.events import EventAnalysis, EventSummary, RootCause, Severity
from k8t.models.images import ImageReference
from k8t.models.pods import ContainerSpec, ContainerStatus, PodView

__all__ = [
    "AnalysisReport",
    "AuditEntry",
    "ContainerSpec",
    "ContainerStatus",
    "DNSResult",
    "DiagnosticFinding",
    "EventAnalysis",
    "EventSummary",
    "HTTPResult",
    "ImageReference",
    "K8tConfig",
    "NetworkDiagnostics",
    "OutputFormat",
    "PodIssue",
    "PodView",
    "ReportSummary",
    "RootCause",
    "Severity",
    "TCPResult",
    "TargetType",
]

"""Report serialization.

``report_to_dict`` defines the one field set shared by every structured
format; JSON and YAML are plain dumps of it so the two always carry the
same names.  Empty optional fields (tag/digest, failure times, events,
network diagnostics, audit log) are omitted.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import yaml

from k8t.models.analysis import (
    AnalysisReport,
    AuditEntry,
    DiagnosticFinding,
    NetworkDiagnostics,
    ReportSummary,
)
from k8t.models.config import OutputFormat
from k8t.models.events import EventSummary
from k8t.models.images import ImageReference
from k8t.output.text import render_text


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _drop_empty(data: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    for key in keys:
        if data.get(key) in (None, "", [], {}):
            data.pop(key, None)
    return data


def _image_to_dict(img: ImageReference) -> dict[str, Any]:
    return _drop_empty(
        {
            "container_name": img.container_name,
            "full_reference": img.full_reference,
            "registry": img.registry,
            "repository": img.repository,
            "tag": img.tag,
            "digest": img.digest,
            "is_digest": img.is_digest,
        },
        ("tag", "digest"),
    )


def _event_to_dict(event: EventSummary) -> dict[str, Any]:
    return {
        "timestamp": _ts(event.timestamp),
        "reason": event.reason,
        "message": event.message,
        "count": event.count,
        "first_seen": _ts(event.first_seen),
        "last_seen": _ts(event.last_seen),
    }


def _probe_to_dict(probe: Any) -> dict[str, Any] | None:
    if probe is None:
        return None
    data = {key: getattr(probe, key) for key in probe.__dataclass_fields__}
    if "resolved_ips" in data:
        data["resolved_ips"] = list(data["resolved_ips"])
    return _drop_empty(data, ("resolved_ips", "error_message", "status_code"))


def _network_to_dict(diag: NetworkDiagnostics | None) -> dict[str, Any] | None:
    if diag is None:
        return None
    return {
        "registry_host": diag.registry_host,
        "dns_resolution": _probe_to_dict(diag.dns_resolution),
        "tcp_connection": _probe_to_dict(diag.tcp_connection),
        "http_check": _probe_to_dict(diag.http_check),
    }


def _finding_to_dict(finding: DiagnosticFinding) -> dict[str, Any]:
    return _drop_empty(
        {
            "root_cause": str(finding.root_cause),
            "severity": str(finding.severity),
            "pod_name": finding.pod_name,
            "pod_namespace": finding.pod_namespace,
            "affected_containers": list(finding.affected_containers),
            "summary": finding.summary,
            "details": finding.details,
            "remediation_steps": list(finding.remediation_steps),
            "image_references": [_image_to_dict(i) for i in finding.image_references],
            "events": [_event_to_dict(e) for e in finding.events],
            "is_transient": finding.is_transient,
            "failure_count": finding.failure_count,
            "first_failure_time": _ts(finding.first_failure_time),
            "last_failure_time": _ts(finding.last_failure_time),
            "failure_duration": finding.failure_duration,
            "network_diagnostics": _network_to_dict(finding.network_diagnostics),
        },
        ("events", "first_failure_time", "last_failure_time", "failure_duration", "network_diagnostics"),
    )


def _summary_to_dict(summary: ReportSummary) -> dict[str, Any]:
    return {
        "total_pods_analyzed": summary.total_pods_analyzed,
        "pods_with_issues": summary.pods_with_issues,
        "total_containers": summary.total_containers,
        "containers_with_issues": summary.containers_with_issues,
        "root_cause_breakdown": {str(cause): count for cause, count in summary.root_cause_breakdown.items()},
        "high_severity_count": summary.high_severity_count,
        "medium_severity_count": summary.medium_severity_count,
        "low_severity_count": summary.low_severity_count,
    }


def _audit_to_dict(entry: AuditEntry) -> dict[str, Any]:
    return {
        "timestamp": _ts(entry.timestamp),
        "resource_type": entry.resource_type,
        "resource_name": entry.resource_name,
        "namespace": entry.namespace,
        "operation": entry.operation,
    }


def report_to_dict(report: AnalysisReport) -> dict[str, Any]:
    """Convert *report* into plain JSON/YAML-safe data."""
    return _drop_empty(
        {
            "generated_at": _ts(report.generated_at),
            "tool_version": report.tool_version,
            "target_type": str(report.target_type),
            "target_name": report.target_name,
            "namespace": report.namespace,
            "summary": _summary_to_dict(report.summary),
            "findings": [_finding_to_dict(f) for f in report.findings],
            "audit_log": [_audit_to_dict(a) for a in report.audit_log],
        },
        ("audit_log",),
    )


def render(report: AnalysisReport, fmt: OutputFormat = OutputFormat.TEXT, no_color: bool = False) -> str:
    """Render *report* in the requested format."""
    if fmt == OutputFormat.JSON:
        return json.dumps(report_to_dict(report), indent=2) + "\n"
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(report_to_dict(report), sort_keys=False, indent=2)
    if fmt == OutputFormat.TEXT:
        return render_text(report, no_color=no_color)
    raise ValueError(f"unsupported output format: {fmt}")

"""Finding and report assembly.

``analyze_pod_data`` runs the synchronous pipeline for one pod:

    pod + events -> affected containers -> image references -> EventAnalysis
                 -> RootCause -> remediation -> DiagnosticFinding (validated)

``build_report`` folds zero or more findings into an AnalysisReport with
consistent summary counts.  Nothing here performs I/O.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from k8t import __version__
from k8t.analyzer.classifier import classify
from k8t.analyzer.events import analyze_events
from k8t.analyzer.images import container_image_references
from k8t.analyzer.remediation import generate_remediation
from k8t.models.analysis import (
    AnalysisReport,
    AuditEntry,
    DiagnosticFinding,
    ReportSummary,
    TargetType,
)
from k8t.models.events import EventAnalysis, EventSummary, RootCause, Severity
from k8t.models.images import ImageReference
from k8t.models.pods import PodView
from k8t.observability.logging import get_logger

_logger = get_logger("analyzer.assembler")


def affected_containers(pod: PodView) -> list[str]:
    """Containers whose current or last waiting reason is an image pull failure.

    Regular container statuses come before init container statuses.
    """
    return [status.name for status in pod.statuses if status.is_image_pull_failure]


def select_primary_image(
    image_refs: Sequence[ImageReference],
    affected: Sequence[str],
) -> ImageReference | None:
    """Pick the image reference used to parameterize remediation text.

    The first reference (declaration order) whose container is affected.
    If none matches, fall back to the pod's first reference.  The fallback
    can mis-attribute remediation detail when several affected containers
    use different images; it is kept as a known approximation.
    """
    if not image_refs:
        return None
    affected_set = set(affected)
    for ref in image_refs:
        if ref.container_name in affected_set:
            return ref
    _logger.warning(
        "primary_image_fallback",
        container=image_refs[0].container_name,
        affected=list(affected),
    )
    return image_refs[0]


def format_duration(span: timedelta) -> str:
    """Render a span with one unit of sub-precision, floor-truncated."""
    total = max(int(span.total_seconds()), 0)
    if total < 60:
        return f"{total} seconds"
    if total < 3600:
        return f"{total // 60} minutes {total % 60} seconds"
    return f"{total // 3600} hours {(total % 3600) // 60} minutes"


def _details(analysis: EventAnalysis) -> str:
    if not analysis.error_messages:
        return "Image pull failures detected."
    details = analysis.error_messages[0]
    extra = len(analysis.error_messages) - 1
    if extra > 0:
        details += f" (and {extra} more events)"
    return details


def build_finding(
    pod: PodView,
    events: Sequence[EventSummary],
    affected: Sequence[str],
    image_refs: Sequence[ImageReference],
) -> DiagnosticFinding:
    """Classify one affected pod and assemble its validated finding.

    Raises:
        FindingInvariantError: if the assembled finding is inconsistent.
    """
    analysis = analyze_events(events)
    root_cause = classify(events, pod, analysis)
    primary = select_primary_image(image_refs, affected)
    remediation = generate_remediation(root_cause, primary)

    failure_duration = ""
    if analysis.first_failure_time is not None and analysis.last_failure_time is not None:
        failure_duration = format_duration(analysis.last_failure_time - analysis.first_failure_time)

    finding = DiagnosticFinding(
        root_cause=root_cause,
        severity=root_cause.severity,
        pod_name=pod.name,
        pod_namespace=pod.namespace,
        affected_containers=tuple(affected),
        summary=f"{root_cause}: {root_cause.description}",
        details=_details(analysis),
        remediation_steps=tuple(remediation),
        image_references=tuple(image_refs),
        events=tuple(events),
        is_transient=analysis.is_transient,
        failure_count=analysis.failure_count,
        first_failure_time=analysis.first_failure_time,
        last_failure_time=analysis.last_failure_time,
        failure_duration=failure_duration,
    )
    finding.validate()
    return finding


def build_report(
    target_type: TargetType,
    target_name: str,
    namespace: str,
    findings: Sequence[DiagnosticFinding] = (),
    total_pods_analyzed: int = 1,
    total_containers: int = 0,
    audit_log: Sequence[AuditEntry] = (),
    generated_at: datetime | None = None,
) -> AnalysisReport:
    """Fold *findings* into an AnalysisReport.

    Every count in the summary is derived from *findings*, so the
    breakdown and the per-severity counts always sum to ``len(findings)``.
    """
    severities = Counter(f.severity for f in findings)
    breakdown: dict[RootCause, int] = dict(Counter(f.root_cause for f in findings))
    summary = ReportSummary(
        total_pods_analyzed=total_pods_analyzed,
        pods_with_issues=len(findings),
        total_containers=total_containers,
        containers_with_issues=sum(len(f.affected_containers) for f in findings),
        root_cause_breakdown=breakdown,
        high_severity_count=severities[Severity.HIGH],
        medium_severity_count=severities[Severity.MEDIUM],
        low_severity_count=severities[Severity.LOW],
    )
    return AnalysisReport(
        generated_at=generated_at or datetime.now(tz=UTC),
        tool_version=__version__,
        target_type=target_type,
        target_name=target_name,
        namespace=namespace,
        summary=summary,
        findings=tuple(findings),
        audit_log=tuple(audit_log),
    )


def analyze_pod_data(
    pod: PodView,
    events: Sequence[EventSummary],
    audit_log: Sequence[AuditEntry] = (),
) -> AnalysisReport:
    """Run the full synchronous pipeline for one pod and its filtered events."""
    image_refs = container_image_references(pod.containers)
    affected = affected_containers(pod)
    findings: list[DiagnosticFinding] = []
    if affected:
        findings.append(build_finding(pod, events, affected, image_refs))
    else:
        _logger.info("no_issue_detected", pod=pod.name, namespace=pod.namespace)

    return build_report(
        target_type=TargetType.POD,
        target_name=pod.name,
        namespace=pod.namespace,
        findings=findings,
        total_pods_analyzed=1,
        total_containers=len(image_refs),
        audit_log=audit_log,
    )

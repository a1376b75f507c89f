"""Human-readable text rendering of an AnalysisReport."""

from __future__ import annotations

import click

from k8t.models.analysis import AnalysisReport, DiagnosticFinding
from k8t.models.events import Severity

_MAX_EVENTS = 5
_MAX_MESSAGE_LEN = 100
_FOOTER_URL = "https://kubernetes.io/docs/concepts/containers/images/"

_SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}


class _Writer:
    """Accumulates lines, applying click styles unless color is disabled."""

    def __init__(self, no_color: bool) -> None:
        self._no_color = no_color
        self._lines: list[str] = []

    def style(self, text: str, **styles: object) -> str:
        if self._no_color:
            return text
        return click.style(text, **styles)  # type: ignore[arg-type]

    def line(self, text: str = "") -> None:
        self._lines.append(text)

    def field(self, label: str, value: str = "") -> None:
        label_text = self.style(label, fg="blue")
        self.line(f"{label_text}: {value}" if value else f"{label_text}:")

    def header(self, title: str) -> None:
        divider = "=" * len(title)
        self.line(self.style(divider, bold=True))
        self.line(self.style(title, bold=True))
        self.line(self.style(divider, bold=True))

    def section(self, title: str) -> None:
        self.line(self.style(title, bold=True))
        self.line(self.style("-" * len(title), fg="bright_black"))

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _render_finding(w: _Writer, index: int, finding: DiagnosticFinding) -> None:
    w.section(f"FINDING #{index}")
    w.field("Root Cause", str(finding.root_cause))
    w.field("Severity", w.style(str(finding.severity), fg=_SEVERITY_COLORS.get(finding.severity, "reset")))
    w.field("Pod", f"{finding.pod_namespace}/{finding.pod_name}")
    if finding.affected_containers:
        w.field("Affected Containers", ", ".join(finding.affected_containers))
    w.field("Summary", finding.summary)
    if finding.details:
        w.field("Details", finding.details)
    if finding.failure_count > 0:
        w.field("Failure Count", str(finding.failure_count))
    if finding.failure_duration:
        w.field("Failure Duration", finding.failure_duration)
    if finding.is_transient:
        w.field("Status", w.style("TRANSIENT (may self-resolve)", fg="yellow"))
    else:
        w.field("Status", w.style("PERSISTENT (requires action)", fg="red"))

    if finding.image_references:
        w.line()
        w.line(w.style("IMAGE REFERENCES:", bold=True))
        for img in finding.image_references:
            w.line(f"  Container: {img.container_name}")
            w.line(f"    Image: {img.full_reference}")
            w.line(f"    Registry: {img.registry}")
            w.line(f"    Repository: {img.repository}")
            if img.tag:
                w.line(f"    Tag: {img.tag}")
            if img.digest:
                w.line(f"    Digest: {img.digest}")

    if finding.remediation_steps:
        w.line()
        w.line(w.style("REMEDIATION STEPS:", bold=True))
        for i, step in enumerate(finding.remediation_steps, start=1):
            w.line(f"  {i}. {step}")

    if finding.events:
        recent = finding.events[-_MAX_EVENTS:]
        w.line()
        w.line(w.style("RECENT EVENTS:", bold=True) + f" (showing last {len(recent)})")
        for event in recent:
            w.line(
                f"  [{event.timestamp.strftime('%H:%M:%S')}] {event.reason}: "
                f"{_truncate(event.message, _MAX_MESSAGE_LEN)}"
            )
    w.line()


def render_text(report: AnalysisReport, no_color: bool = False) -> str:
    """Render *report* as a terminal-friendly text block."""
    w = _Writer(no_color)

    w.header("IMAGEPULLBACKOFF ANALYSIS REPORT")
    w.line()
    w.field("Target", f"{report.namespace}/{report.target_name}")
    w.field("Type", str(report.target_type))
    w.field("Generated At", report.generated_at.strftime("%Y-%m-%d %H:%M:%S %Z"))
    w.line()

    summary = report.summary
    w.section("SUMMARY")
    w.field("Pods Analyzed", str(summary.total_pods_analyzed))
    w.field("Pods with Issues", str(summary.pods_with_issues))

    if summary.pods_with_issues == 0:
        w.line()
        w.line(w.style("No ImagePullBackOff issues found.", fg="green"))
        return w.text()

    if summary.root_cause_breakdown:
        w.field("By Root Cause")
        for cause, count in summary.root_cause_breakdown.items():
            w.line(f"  - {cause}: {count}")

    severity_counts = (
        (Severity.HIGH, summary.high_severity_count),
        (Severity.MEDIUM, summary.medium_severity_count),
        (Severity.LOW, summary.low_severity_count),
    )
    if any(count for _, count in severity_counts):
        w.field("By Severity")
        for severity, count in severity_counts:
            if count > 0:
                w.line(f"  - {w.style(str(severity), fg=_SEVERITY_COLORS[severity])}: {count}")
    w.line()

    for index, finding in enumerate(report.findings, start=1):
        _render_finding(w, index, finding)

    w.line(w.style("=" * 80, fg="bright_black"))
    w.line(w.style(f"For more information, visit: {_FOOTER_URL}", fg="bright_black"))
    return w.text()

"""Quick per-pod health classification used by ``k8t check``."""

from __future__ import annotations

from k8t.models.pods import IMAGE_PULL_WAITING_REASONS, PodView

HIGH_RESTART_THRESHOLD = 5

_WAITING_ISSUES = {
    "CrashLoopBackOff": "CrashLoopBackOff",
    "CreateContainerConfigError": "ConfigError",
    "InvalidImageName": "InvalidImage",
}


def detect_pod_issue(pod: PodView) -> str | None:
    """Return the first issue type found on *pod*, or None when healthy."""
    for status in pod.statuses:
        if status.waiting_reason in IMAGE_PULL_WAITING_REASONS:
            return "ImagePullBackOff"
        issue = _WAITING_ISSUES.get(status.waiting_reason)
        if issue is not None:
            return issue
        if status.restart_count > HIGH_RESTART_THRESHOLD:
            return "HighRestarts"
    if pod.phase in ("Failed", "Unknown"):
        return "PodFailed"
    return None

"""Analysis coordinator.

Drives one analysis invocation end to end:

    validate input -> fetch pod -> (affected?) -> fetch events
                   -> filter + redact -> synchronous pipeline -> report

All cluster calls share one overall deadline.  When it elapses the
coordinator raises AnalysisTimeoutError naming the call that was in flight;
no partial report is ever returned.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import Any, Protocol

from k8t.analyzer.assembler import affected_containers, analyze_pod_data
from k8t.analyzer.events import summarize_events
from k8t.analyzer.scanner import detect_pod_issue
from k8t.cluster.validation import validate_namespace, validate_pod_name
from k8t.errors import AnalysisTimeoutError
from k8t.models.analysis import AnalysisReport, PodIssue, TargetType
from k8t.models.config import AnalysisConfig
from k8t.models.pods import PodView
from k8t.observability.logging import get_logger
from k8t.output.audit import AuditLogger

_log = get_logger("analyzer.coordinator")


class PodSource(Protocol):
    """The subset of ClusterClient the coordinator depends on."""

    async def get_pod(self, namespace: str, pod_name: str) -> PodView: ...

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[dict[str, Any]]: ...

    async def list_pods(self, namespace: str) -> list[PodView]: ...

    async def list_namespaces(self) -> list[str]: ...


class AnalysisCoordinator:
    """Runs pod analyses and cluster scans against a PodSource."""

    def __init__(
        self,
        cluster: PodSource,
        config: AnalysisConfig,
        audit: AuditLogger | None = None,
    ) -> None:
        self._cluster = cluster
        self._config = config
        self._audit = audit or AuditLogger()

    @property
    def audit(self) -> AuditLogger:
        return self._audit

    async def analyze_pod(self, pod_name: str, namespace: str | None = None) -> AnalysisReport:
        """Analyze one pod for image pull failures.

        Raises:
            InvalidInputError:     namespace or pod name is malformed.
            PodNotFoundError:      the pod does not exist.
            PermissionDeniedError: RBAC forbids reading pods or events.
            AnalysisTimeoutError:  the deadline elapsed during a cluster call.
            FindingInvariantError: the assembled finding is inconsistent.
        """
        namespace = namespace or self._config.namespace
        validate_namespace(namespace)
        validate_pod_name(pod_name)

        timeout = self._config.timeout_seconds
        self._audit.log_analysis_start(TargetType.POD, pod_name, namespace)
        t_start = time.monotonic()

        operation = "GetPod"
        try:
            async with asyncio.timeout(timeout):
                self._audit.log_pod_get(pod_name, namespace)
                pod = await self._cluster.get_pod(namespace, pod_name)

                raw_events: list[dict[str, Any]] = []
                if affected_containers(pod):
                    operation = "GetPodEvents"
                    self._audit.log_event_list(namespace)
                    raw_events = await self._cluster.list_pod_events(namespace, pod_name)
        except TimeoutError as exc:
            _log.warning("analysis_timeout", operation=operation, timeout_seconds=timeout)
            raise AnalysisTimeoutError(operation, timeout) from exc

        events = summarize_events(raw_events, redact=True)
        _log.debug("events_filtered", pod=pod_name, total=len(raw_events), failures=len(events))

        audit_log = self._audit.entries if self._config.include_audit else ()
        report = analyze_pod_data(pod, events, audit_log=audit_log)

        self._audit.log_analysis_complete(
            TargetType.POD,
            pod_name,
            namespace,
            len(report.findings),
            duration_ms=(time.monotonic() - t_start) * 1000.0,
        )
        return report

    async def scan(self, namespaces: Sequence[str] | None = None) -> list[PodIssue]:
        """List pods with common problems across *namespaces*.

        ``None`` scans every namespace in the cluster.  A namespace whose
        pods cannot be listed is logged and skipped; one bad namespace never
        aborts the scan.
        """
        if namespaces is None:
            self._audit.log_namespace_list()
            namespaces = await self._cluster.list_namespaces()
        else:
            for ns in namespaces:
                validate_namespace(ns)

        issues: list[PodIssue] = []
        for ns in namespaces:
            self._audit.log_pod_list(ns)
            try:
                pods = await self._cluster.list_pods(ns)
            except Exception as exc:
                _log.warning("namespace_scan_failed", namespace=ns, error=str(exc))
                continue
            _log.debug("namespace_scanned", namespace=ns, pods=len(pods))
            for pod in pods:
                issue = detect_pod_issue(pod)
                if issue is not None:
                    issues.append(PodIssue(namespace=ns, pod_name=pod.name, phase=pod.phase, issue_type=issue))
        return issues

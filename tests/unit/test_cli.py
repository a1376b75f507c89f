"""Tests for the k8t command-line interface.

The cluster client is replaced by an in-memory fake so commands run the
real coordinator, assembler and renderers without a cluster.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from k8t import __version__
from k8t.cli import main as cli_main
from k8t.cli.main import cli
from k8t.errors import K8tError, PermissionDeniedError, PodNotFoundError
from k8t.models.pods import PodView

_POD = {
    "metadata": {"name": "web-0", "namespace": "default"},
    "spec": {"containers": [{"name": "web", "image": "nginx:1.25"}]},
    "status": {
        "phase": "Pending",
        "containerStatuses": [{"name": "web", "state": {"waiting": {"reason": "ImagePullBackOff"}}}],
    },
}

_HEALTHY_POD = {
    "metadata": {"name": "api-0", "namespace": "default"},
    "spec": {"containers": [{"name": "api", "image": "api:v1"}]},
    "status": {"phase": "Running", "containerStatuses": [{"name": "api", "state": {"running": {}}}]},
}

_EVENTS = [
    {
        "reason": "Failed",
        "message": 'Failed to pull image "nginx:1.25": manifest unknown',
        "count": 6,
        "firstTimestamp": "2026-02-18T12:00:00Z",
        "lastTimestamp": "2026-02-18T12:03:00Z",
    }
]


class _FakeClusterClient:
    pods: dict[str, dict[str, Any]] = {}
    events: list[dict[str, Any]] = []
    error: K8tError | None = None
    unreachable = False
    closed = False
    calls: list[str] = []

    @classmethod
    async def connect(cls, kubeconfig: str = "") -> _FakeClusterClient:
        cls.calls.append("connect")
        return cls()

    async def validate(self) -> None:
        self.calls.append("validate")
        if self.unreachable:
            raise ConnectionError("cluster unreachable")

    async def close(self) -> None:
        type(self).closed = True

    async def get_pod(self, namespace: str, pod_name: str) -> PodView:
        if self.error is not None:
            raise self.error
        if pod_name not in self.pods:
            raise PodNotFoundError(namespace, pod_name)
        return PodView.from_api(self.pods[pod_name])

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[dict[str, Any]]:
        return list(self.events)

    async def list_pods(self, namespace: str) -> list[PodView]:
        return [PodView.from_api(raw) for raw in self.pods.values()]

    async def list_namespaces(self) -> list[str]:
        return ["default"]


@pytest.fixture(autouse=True)
def fake_cluster(monkeypatch: pytest.MonkeyPatch) -> Iterator[type[_FakeClusterClient]]:
    for key in ("K8T_NAMESPACE", "K8T_OUTPUT", "K8T_TIMEOUT", "K8T_LOG_LEVEL", "K8T_AUDIT"):
        monkeypatch.delenv(key, raising=False)
    _FakeClusterClient.pods = {"web-0": _POD, "api-0": _HEALTHY_POD}
    _FakeClusterClient.events = list(_EVENTS)
    _FakeClusterClient.error = None
    _FakeClusterClient.unreachable = False
    _FakeClusterClient.closed = False
    _FakeClusterClient.calls = []
    monkeypatch.setattr(cli_main, "ClusterClient", _FakeClusterClient)
    yield _FakeClusterClient
    structlog.reset_defaults()


def _invoke(*args: str) -> Any:
    return CliRunner().invoke(cli, list(args))


class TestVersion:
    def test_prints_version(self) -> None:
        result = _invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestAnalyzeImagePullBackOff:
    def test_text_report(self, fake_cluster: type[_FakeClusterClient]) -> None:
        result = _invoke("--no-color", "analyze", "imagepullbackoff", "web-0")
        assert result.exit_code == 0
        assert "Root Cause: IMAGE_NOT_FOUND" in result.stdout
        assert fake_cluster.closed is True

    def test_json_report(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "web-0", "-o", "json")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["findings"][0]["root_cause"] == "IMAGE_NOT_FOUND"
        assert data["findings"][0]["failure_count"] == 6

    def test_audit_flag_attaches_audit_log(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "web-0", "-o", "json", "--audit")
        data = json.loads(result.stdout)
        assert [e["resource_type"] for e in data["audit_log"]] == ["pods", "events"]

    def test_healthy_pod_is_success_with_info(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "api-0")
        assert result.exit_code == 0
        assert "does not have ImagePullBackOff status" in result.stderr
        assert "No ImagePullBackOff issues found." in result.stdout

    def test_quiet_suppresses_report(self) -> None:
        result = _invoke("--quiet", "analyze", "imagepullbackoff", "web-0")
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_not_found_exit_code(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "ghost", "-n", "shop")
        assert result.exit_code == 3
        assert "Pod 'ghost' does not exist in namespace 'shop'" in result.stderr

    def test_permission_denied_exit_code(self, fake_cluster: type[_FakeClusterClient]) -> None:
        fake_cluster.error = PermissionDeniedError("pods", "get", "default")
        result = _invoke("analyze", "imagepullbackoff", "web-0")
        assert result.exit_code == 2
        assert "kubectl create role" in result.stderr

    def test_invalid_pod_name_exit_code(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "Bad_Name")
        assert result.exit_code == 2
        assert "ERROR: Invalid pod name" in result.stderr

    def test_invalid_names_are_rejected_before_connecting(self, fake_cluster: type[_FakeClusterClient]) -> None:
        fake_cluster.unreachable = True
        result = _invoke("analyze", "imagepullbackoff", "Bad;Name")
        assert result.exit_code == 2
        assert "ERROR: Invalid pod name" in result.stderr
        assert "cluster unreachable" not in result.stderr
        assert fake_cluster.calls == []

    def test_invalid_namespace_is_rejected_before_connecting(self, fake_cluster: type[_FakeClusterClient]) -> None:
        result = _invoke("analyze", "imagepullbackoff", "web-0", "-n", "Bad/NS")
        assert result.exit_code == 2
        assert "ERROR: Invalid namespace" in result.stderr
        assert fake_cluster.calls == []

    def test_valid_names_connect_then_validate(self, fake_cluster: type[_FakeClusterClient]) -> None:
        _invoke("analyze", "imagepullbackoff", "web-0")
        assert fake_cluster.calls == ["connect", "validate"]

    def test_no_recent_events_explains_missing_evidence(self, fake_cluster: type[_FakeClusterClient]) -> None:
        fake_cluster.events = []
        result = _invoke("analyze", "imagepullbackoff", "web-0")
        assert result.exit_code == 1
        assert "ERROR: Could not build a consistent diagnostic finding" in result.stderr
        assert "too few recent failure" in result.stderr
        assert "kubectl describe pod" in result.stderr

    def test_invalid_output_format_is_usage_error(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "web-0", "-o", "xml")
        assert result.exit_code == 2
        assert "unsupported format" in result.stderr

    def test_invalid_timeout_is_usage_error(self) -> None:
        result = _invoke("analyze", "imagepullbackoff", "web-0", "--timeout", "later")
        assert result.exit_code == 2


class TestCheck:
    def test_reports_issues_and_exits_nonzero(self) -> None:
        result = _invoke("check", "-n", "default")
        assert result.exit_code == 1
        assert "[ImagePullBackOff] Pod: default/web-0 - Status: Pending" in result.stdout
        assert "api-0" not in result.stdout
        assert "Total issues found: 1" in result.stdout

    def test_invalid_namespace_is_rejected_before_connecting(self, fake_cluster: type[_FakeClusterClient]) -> None:
        fake_cluster.unreachable = True
        result = _invoke("check", "-n", "Bad/NS")
        assert result.exit_code == 2
        assert "ERROR: Invalid namespace" in result.stderr
        assert fake_cluster.calls == []

    def test_no_issues(self, fake_cluster: type[_FakeClusterClient]) -> None:
        fake_cluster.pods = {"api-0": _HEALTHY_POD}
        result = _invoke("check", "--all-namespaces")
        assert result.exit_code == 0
        assert "No issues found!" in result.stdout

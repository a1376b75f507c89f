"""Shared fixtures for k8t integration tests.

Provides an in-memory PodSource with serialized pod/event fixtures so the
coordinator pipeline can be exercised end to end without a cluster.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from k8t.errors import PodNotFoundError
from k8t.models.pods import PodView

# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

_NOW = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)


def _rfc3339(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# Raw object factories
# ---------------------------------------------------------------------------


def make_pod(
    name: str = "web-0",
    namespace: str = "default",
    image: str = "nginx:1.25",
    waiting_reason: str = "ImagePullBackOff",
    phase: str = "Pending",
    restart_count: int = 0,
) -> dict[str, Any]:
    """Create a serialized v1.Pod with a single container."""
    state: dict[str, Any] = {"waiting": {"reason": waiting_reason}} if waiting_reason else {"running": {}}
    return {
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"containers": [{"name": "main", "image": image}]},
        "status": {
            "phase": phase,
            "containerStatuses": [{"name": "main", "state": state, "restartCount": restart_count}],
        },
    }


def make_event(
    reason: str = "Failed",
    message: str = "Failed to pull image",
    count: int = 1,
    first_seen: datetime | None = None,
    span: timedelta = timedelta(0),
) -> dict[str, Any]:
    """Create a serialized v1.Event for a pod."""
    first = first_seen or _NOW
    return {
        "metadata": {"name": f"ev-{reason.lower()}"},
        "reason": reason,
        "message": message,
        "count": count,
        "firstTimestamp": _rfc3339(first),
        "lastTimestamp": _rfc3339(first + span),
    }


# ---------------------------------------------------------------------------
# Fake cluster
# ---------------------------------------------------------------------------


class FakePodSource:
    """PodSource backed by dicts keyed on (namespace, name)."""

    def __init__(self) -> None:
        self.pods: dict[tuple[str, str], dict[str, Any]] = {}
        self.events: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.failing_namespaces: set[str] = set()
        self.namespaces: list[str] = ["default"]
        self.delay: dict[str, float] = {}
        self.calls: list[str] = []

    def add_pod(self, raw: dict[str, Any], events: list[dict[str, Any]] | None = None) -> None:
        key = (raw["metadata"]["namespace"], raw["metadata"]["name"])
        self.pods[key] = raw
        self.events[key] = events or []

    async def _maybe_sleep(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.delay:
            await asyncio.sleep(self.delay[operation])

    async def get_pod(self, namespace: str, pod_name: str) -> PodView:
        await self._maybe_sleep("get_pod")
        raw = self.pods.get((namespace, pod_name))
        if raw is None:
            raise PodNotFoundError(namespace, pod_name)
        return PodView.from_api(raw)

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[dict[str, Any]]:
        await self._maybe_sleep("list_pod_events")
        return list(self.events.get((namespace, pod_name), []))

    async def list_pods(self, namespace: str) -> list[PodView]:
        await self._maybe_sleep("list_pods")
        if namespace in self.failing_namespaces:
            raise RuntimeError(f"cannot list pods in {namespace}")
        return [PodView.from_api(raw) for (ns, _), raw in self.pods.items() if ns == namespace]

    async def list_namespaces(self) -> list[str]:
        await self._maybe_sleep("list_namespaces")
        return list(self.namespaces)


@pytest.fixture()
def pod_source() -> FakePodSource:
    return FakePodSource()

"""Pod view consumed by the analysis pipeline.

A ``PodView`` is the minimal projection of a ``v1.Pod`` the analyzer needs:
identity, container specs (regular then init, in declaration order) and
per-container waiting-state reasons.  It is built from the serialized
Kubernetes JSON so that tests and the cluster client share one code path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

IMAGE_PULL_WAITING_REASONS = frozenset({"ImagePullBackOff", "ErrImagePull"})


@dataclass(frozen=True)
class ContainerSpec:
    name: str
    image: str
    init: bool = False


@dataclass(frozen=True)
class ContainerStatus:
    name: str
    waiting_reason: str = ""
    last_waiting_reason: str = ""  # waiting reason of lastState, if any
    restart_count: int = 0
    init: bool = False

    @property
    def is_image_pull_failure(self) -> bool:
        return (
            self.waiting_reason in IMAGE_PULL_WAITING_REASONS
            or self.last_waiting_reason in IMAGE_PULL_WAITING_REASONS
        )


@dataclass(frozen=True)
class PodView:
    """Read-only pod projection."""

    name: str
    namespace: str
    phase: str = ""
    containers: tuple[ContainerSpec, ...] = field(default_factory=tuple)
    statuses: tuple[ContainerStatus, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> PodView:
        """Build a PodView from a serialized ``v1.Pod`` (camelCase keys)."""
        metadata = raw.get("metadata") or {}
        spec = raw.get("spec") or {}
        status = raw.get("status") or {}

        containers = [
            ContainerSpec(name=str(c.get("name", "")), image=str(c.get("image") or ""))
            for c in spec.get("containers") or []
        ]
        containers += [
            ContainerSpec(name=str(c.get("name", "")), image=str(c.get("image") or ""), init=True)
            for c in spec.get("initContainers") or []
        ]

        statuses = [_status_from_api(s, init=False) for s in status.get("containerStatuses") or []]
        statuses += [_status_from_api(s, init=True) for s in status.get("initContainerStatuses") or []]

        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace", "")),
            phase=str(status.get("phase") or ""),
            containers=tuple(containers),
            statuses=tuple(statuses),
        )


def _waiting_reason(state: Mapping[str, Any] | None) -> str:
    waiting = (state or {}).get("waiting") or {}
    return str(waiting.get("reason") or "")


def _status_from_api(raw: Mapping[str, Any], init: bool) -> ContainerStatus:
    return ContainerStatus(
        name=str(raw.get("name", "")),
        waiting_reason=_waiting_reason(raw.get("state")),
        last_waiting_reason=_waiting_reason(raw.get("lastState")),
        restart_count=int(raw.get("restartCount") or 0),
        init=init,
    )

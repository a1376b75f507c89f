"""Async Kubernetes client wrapper.

Thin layer over kubernetes-asyncio that validates names before any call,
returns plain structures (PodView, serialized event dicts) and maps API
status codes onto the k8t error taxonomy.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from k8t.cluster.validation import validate_namespace, validate_pod_name
from k8t.errors import PermissionDeniedError, PodNotFoundError
from k8t.models.events import parse_timestamp
from k8t.models.pods import PodView
from k8t.observability.logging import get_logger

_log = get_logger("cluster.client")

_EPOCH = datetime.fromtimestamp(0, tz=UTC)


def _is_forbidden(exc: ApiException) -> bool:
    return exc.status in (401, 403)


class ClusterClient:
    """Read-only access to pods, events and namespaces."""

    def __init__(self, api_client: Any) -> None:
        self._api_client = api_client
        self._core = k8s_client.CoreV1Api(api_client)

    @classmethod
    async def connect(cls, kubeconfig: str = "") -> ClusterClient:
        """Load cluster credentials and build a client.

        With no explicit *kubeconfig* the in-cluster service account is
        tried first, then the default kubeconfig ($KUBECONFIG or
        ~/.kube/config).
        """
        if not kubeconfig:
            try:
                # load_incluster_config() is synchronous in kubernetes-asyncio
                k8s_config.load_incluster_config()
                _log.debug("k8s client configured from in-cluster service account")
                return cls(k8s_client.ApiClient())
            except k8s_config.ConfigException:
                pass
        await k8s_config.load_kube_config(config_file=kubeconfig or None)
        _log.debug("k8s client configured from kubeconfig", kubeconfig=kubeconfig or "<default>")
        return cls(k8s_client.ApiClient())

    async def close(self) -> None:
        await self._api_client.close()

    async def validate(self) -> None:
        """Round-trip to the API server to prove connectivity."""
        await k8s_client.VersionApi(self._api_client).get_code()

    def _serialize(self, obj: Any) -> dict[str, Any]:
        return self._api_client.sanitize_for_serialization(obj)  # type: ignore[no-any-return]

    async def get_pod(self, namespace: str, pod_name: str) -> PodView:
        validate_namespace(namespace)
        validate_pod_name(pod_name)
        try:
            pod = await self._core.read_namespaced_pod(name=pod_name, namespace=namespace)
        except ApiException as exc:
            if exc.status == 404:
                raise PodNotFoundError(namespace, pod_name) from exc
            if _is_forbidden(exc):
                raise PermissionDeniedError("pods", "get", namespace) from exc
            raise
        return PodView.from_api(self._serialize(pod))

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[dict[str, Any]]:
        """Events whose involved object is the named pod, oldest first."""
        validate_namespace(namespace)
        validate_pod_name(pod_name)
        try:
            events = await self._core.list_namespaced_event(
                namespace=namespace,
                field_selector=f"involvedObject.name={pod_name},involvedObject.kind=Pod",
            )
        except ApiException as exc:
            if _is_forbidden(exc):
                raise PermissionDeniedError("events", "list", namespace) from exc
            raise
        items = [self._serialize(item) for item in events.items]
        items.sort(key=lambda e: parse_timestamp(e.get("firstTimestamp")) or _EPOCH)
        return items

    async def list_pods(self, namespace: str) -> list[PodView]:
        validate_namespace(namespace)
        try:
            pods = await self._core.list_namespaced_pod(namespace=namespace)
        except ApiException as exc:
            if _is_forbidden(exc):
                raise PermissionDeniedError("pods", "list", namespace) from exc
            raise
        return [PodView.from_api(self._serialize(item)) for item in pods.items]

    async def list_namespaces(self) -> list[str]:
        try:
            namespaces = await self._core.list_namespace()
        except ApiException as exc:
            if _is_forbidden(exc):
                raise PermissionDeniedError("namespaces", "list", "") from exc
            raise
        return [ns.metadata.name for ns in namespaces.items]

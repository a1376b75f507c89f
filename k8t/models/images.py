"""Container image reference data structure."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageReference:
    """One container's resolved image identity.

    Exactly one of ``tag`` / ``digest`` is non-empty.  Built once per
    container per analysis run by ``k8t.analyzer.images.parse_image_reference``.
    """

    container_name: str
    full_reference: str  # verbatim string from the pod spec
    registry: str  # e.g. "docker.io", "gcr.io", "registry.example.com:5000"
    repository: str  # e.g. "library/nginx"
    tag: str = ""
    digest: str = ""  # e.g. "sha256:abc123..."
    is_digest: bool = False

"""Image reference parsing.

Decomposes the image string from a pod spec into registry, repository and
tag-or-digest.  Handles:

    nginx                                 -> docker.io / library/nginx : latest
    myuser/myapp:v1.0                     -> docker.io / myuser/myapp  : v1.0
    registry.example.com:5000/app:latest  -> registry.example.com:5000 / app : latest
    gcr.io/proj/app@sha256:abc            -> gcr.io / proj/app @ sha256:abc

Ambiguity is resolved by precedence, never by error: any non-empty string
yields a reference.
"""

from __future__ import annotations

from collections.abc import Iterable

from k8t.errors import EmptyReferenceError
from k8t.models.images import ImageReference
from k8t.models.pods import ContainerSpec

DOCKER_HUB_REGISTRY = "docker.io"
DEFAULT_TAG = "latest"


def _looks_like_registry_host(segment: str) -> bool:
    return "." in segment or ":" in segment


def parse_image_reference(container_name: str, raw_image: str) -> ImageReference:
    """Parse *raw_image* for *container_name*.

    Raises:
        EmptyReferenceError: if *raw_image* is empty.
    """
    if not raw_image:
        raise EmptyReferenceError(container_name)

    remainder = raw_image
    tag = ""
    digest = ""
    is_digest = False

    name, sep, suffix = raw_image.rpartition("@")
    if sep:
        remainder = name
    if suffix and sep:
        digest = suffix
        is_digest = True
    else:
        # A trailing ":" segment is a tag only if it holds no "/", which
        # keeps "host:5000/app" from being read as tag "5000/app".
        colon_parts = remainder.split(":")
        if len(colon_parts) >= 2 and "/" not in colon_parts[-1]:
            tag = colon_parts[-1]
            remainder = ":".join(colon_parts[:-1])

    path = remainder.split("/")
    if len(path) == 1:
        registry = DOCKER_HUB_REGISTRY
        repository = f"library/{path[0]}"
    elif len(path) == 2:
        if _looks_like_registry_host(path[0]):
            registry, repository = path
        else:
            registry = DOCKER_HUB_REGISTRY
            repository = "/".join(path)
    else:
        registry = path[0]
        repository = "/".join(path[1:])

    if not tag and not is_digest:
        tag = DEFAULT_TAG

    return ImageReference(
        container_name=container_name,
        full_reference=raw_image,
        registry=registry,
        repository=repository,
        tag=tag,
        digest=digest,
        is_digest=is_digest,
    )


def container_image_references(containers: Iterable[ContainerSpec]) -> list[ImageReference]:
    """Parse the image of every container, preserving declaration order.

    Containers with an empty image are skipped (the API server rejects
    them, so this only happens with hand-built fixtures).
    """
    return [parse_image_reference(c.name, c.image) for c in containers if c.image]

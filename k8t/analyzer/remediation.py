"""Remediation step generation.

Each root cause maps to a fixed list of generic steps.  When the primary
image reference is known, extra steps interpolate its registry, repository
or full reference.  Remediation must never block report generation, so an
unrecognized root cause yields a single placeholder step.
"""

from __future__ import annotations

from collections.abc import Callable

from k8t.models.events import RootCause
from k8t.models.images import ImageReference

NO_REMEDIATION = "No remediation steps available for this root cause"


def _image_not_found(img: ImageReference | None) -> list[str]:
    if img is None:
        return [
            "Verify the image name and tag are correct in your pod specification",
            "Check if the image exists in the registry",
            "Ensure the image was pushed to the registry after building",
            "Verify the registry URL is correct and accessible from your cluster",
        ]
    return [
        f"Verify the image name and tag are correct: {img.full_reference}",
        f"Check if the image exists: docker pull {img.full_reference}",
        "Ensure the image was pushed to the registry after building",
        f"Verify registry '{img.registry}' is accessible from your cluster",
        "Check if the image tag was deleted or moved",
    ]


def _authentication_failure(img: ImageReference | None) -> list[str]:
    steps = [
        "Create or verify the image pull secret with valid registry credentials",
        "Ensure the secret is in the same namespace as the pod",
        "Reference the secret in pod spec: spec.imagePullSecrets",
    ]
    if img is not None:
        steps.append(
            "Create secret: kubectl create secret docker-registry regcred "
            f"--docker-server={img.registry} --docker-username=<user> --docker-password=<pwd>"
        )
        steps.append("Add to pod spec: imagePullSecrets: [{name: regcred}]")
    steps.append("Verify credentials are still valid (not expired or revoked)")
    return steps


def _network_issue(img: ImageReference | None) -> list[str]:
    steps = [
        "Check cluster network connectivity to external registries",
        "Verify DNS resolution is working in the cluster",
        "Check for firewall or network policies blocking registry access",
        "Verify proxy settings if cluster uses an HTTP proxy",
    ]
    if img is not None:
        steps.append(f"Test connectivity: kubectl run test --image=busybox --rm -it -- nslookup {img.registry}")
        steps.append(f"Test HTTPS access: kubectl run test --image=busybox --rm -it -- wget https://{img.registry}")
    steps.append("Check for service mesh or CNI issues that might block external traffic")
    return steps


def _rate_limit_exceeded(img: ImageReference | None) -> list[str]:
    steps = [
        "Wait for the rate limit window to reset (typically 5-60 minutes)",
        "Reduce the frequency of image pulls (use imagePullPolicy: IfNotPresent)",
        "Consider using a registry mirror or cache to reduce external pulls",
    ]
    if img is not None and img.registry == "docker.io":
        steps.append("Docker Hub rate limits: anonymous users (100 pulls/6h), authenticated (200 pulls/6h)")
        steps.append("Authenticate with Docker Hub to increase rate limits")
        steps.append("Consider Docker Hub paid plans for higher limits")
    steps.append("Use image pull secrets with authenticated registry access")
    steps.append("Consider deploying a registry mirror in your cluster")
    return steps


def _permission_denied(img: ImageReference | None) -> list[str]:
    steps = [
        "Verify the service account has permission to pull images",
        "Check if the image repository has access restrictions",
        "Ensure the image pull secret has sufficient permissions",
    ]
    if img is not None:
        steps.append(f"Verify repository '{img.registry}/{img.repository}' access permissions")
        steps.append("Check if the registry requires authentication")
    steps.append("For private registries, ensure the account in pull secret has read access")
    steps.append("Review registry access policies and IAM permissions")
    return steps


def _manifest_error(img: ImageReference | None) -> list[str]:
    steps = [
        "Verify the image manifest is valid and not corrupted",
        "Check if the image was built for the correct platform (linux/amd64, linux/arm64, etc.)",
        "Ensure multi-platform manifest includes your cluster's architecture",
    ]
    if img is not None:
        steps.append(f"Inspect image manifest: docker manifest inspect {img.full_reference}")
        steps.append("Verify platform compatibility with your Kubernetes nodes")
    steps.append("Try re-pushing the image to fix potential corruption")
    steps.append("Check registry logs for manifest-related errors")
    return steps


def _transient_failure(_img: ImageReference | None) -> list[str]:
    return [
        "This appears to be a transient failure (< 3 attempts within 5 minutes)",
        "Kubernetes will automatically retry pulling the image",
        "Monitor the pod status to see if it resolves automatically",
        "If the issue persists beyond 10 minutes, investigate for underlying causes",
        "Check recent events: kubectl describe pod <pod-name>",
    ]


def _unknown(img: ImageReference | None) -> list[str]:
    steps = [
        "Review the full error message in pod events for more details",
        "Check pod events: kubectl describe pod <pod-name>",
        "Verify the image reference is correct and complete",
        "Test image pull manually: docker pull <image>",
        "Check registry status and availability",
        "Review cluster logs for additional error context",
    ]
    if img is not None:
        steps.append(f"Manually test pull: docker pull {img.full_reference}")
    steps.append("Contact registry support if the issue persists")
    return steps


_GENERATORS: dict[RootCause, Callable[[ImageReference | None], list[str]]] = {
    RootCause.IMAGE_NOT_FOUND: _image_not_found,
    RootCause.AUTHENTICATION_FAILURE: _authentication_failure,
    RootCause.NETWORK_ISSUE: _network_issue,
    RootCause.RATE_LIMIT_EXCEEDED: _rate_limit_exceeded,
    RootCause.PERMISSION_DENIED: _permission_denied,
    RootCause.MANIFEST_ERROR: _manifest_error,
    RootCause.TRANSIENT_FAILURE: _transient_failure,
    RootCause.UNKNOWN: _unknown,
}


def generate_remediation(root_cause: RootCause | str, image_ref: ImageReference | None = None) -> list[str]:
    """Return the ordered, non-empty remediation steps for *root_cause*."""
    generator = _GENERATORS.get(root_cause)  # type: ignore[call-overload]
    if generator is None:
        return [NO_REMEDIATION]
    return generator(image_ref)

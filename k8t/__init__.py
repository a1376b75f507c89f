"""k8t -- Kubernetes ImagePullBackOff diagnostics."""

__version__ = "0.3.0"

"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class OutputFormat(StrEnum):
    """Report serialization format."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class ClusterConfig:
    """Kubernetes API connection configuration."""

    kubeconfig: str = ""  # empty: in-cluster, then $KUBECONFIG, then ~/.kube/config


@dataclass(frozen=True)
class AnalysisConfig:
    """Per-invocation analysis parameters."""

    namespace: str = "default"
    timeout_seconds: float = 30.0
    include_audit: bool = False


@dataclass(frozen=True)
class OutputConfig:
    """Report rendering configuration."""

    format: OutputFormat = OutputFormat.TEXT
    no_color: bool = False
    quiet: bool = False


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass(frozen=True)
class K8tConfig:
    """Top-level k8t configuration."""

    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log: LogConfig = field(default_factory=LogConfig)

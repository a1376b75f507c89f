"""Diagnostic analysis engine -- parser, event analyzer, classifier,
remediation generator, assembler and the async coordinator."""

from k8t.analyzer.assembler import (
    affected_containers,
    analyze_pod_data,
    build_finding,
    build_report,
    format_duration,
    select_primary_image,
)
from k8t.analyzer.classifier import CLASSIFICATION_RULES, ClassificationRule, classify, match_rule
from k8t.analyzer.coordinator import AnalysisCoordinator
from k8t.analyzer.events import (
    FAILURE_EVENT_REASONS,
    analyze_events,
    analyze_raw_events,
    filter_image_pull_events,
)
from k8t.analyzer.images import parse_image_reference
from k8t.analyzer.remediation import generate_remediation

__all__ = [
    "AnalysisCoordinator",
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "FAILURE_EVENT_REASONS",
    "affected_containers",
    "analyze_events",
    "analyze_pod_data",
    "analyze_raw_events",
    "build_finding",
    "build_report",
    "classify",
    "filter_image_pull_events",
    "format_duration",
    "generate_remediation",
    "match_rule",
    "parse_image_reference",
    "select_primary_image",
]

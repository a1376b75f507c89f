"""Root cause classification.

Event messages are case-folded, concatenated and matched against an ordered
rule table.  The first rule with a matching predicate wins; when nothing
matches the EventAnalysis transience signal decides between
TRANSIENT_FAILURE and UNKNOWN.

Order matters: NETWORK_ISSUE carries the bare token "failed", which appears
in almost every kubelet pull error, so the specific groups (missing image,
authentication) must be evaluated before it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from k8t.models.events import EventAnalysis, EventSummary, RootCause
from k8t.models.pods import PodView
from k8t.observability.logging import get_logger

_logger = get_logger("analyzer.classifier")

# A predicate matches when every one of its tokens occurs in the text.
Predicate = tuple[str, ...]


@dataclass(frozen=True)
class ClassificationRule:
    """One root cause and the predicates that select it."""

    root_cause: RootCause
    predicates: tuple[Predicate, ...]

    def match(self, text: str) -> Predicate | None:
        """Return the first predicate matching case-folded *text*, if any."""
        for predicate in self.predicates:
            if all(token in text for token in predicate):
                return predicate
        return None


def _any_of(*tokens: str) -> tuple[Predicate, ...]:
    return tuple((token,) for token in tokens)


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        RootCause.IMAGE_NOT_FOUND,
        _any_of(
            "manifest unknown",
            "manifest not found",
            "not found: manifest unknown",
            "image not found",
            "repository does not exist",
            "404",
        ),
    ),
    ClassificationRule(
        RootCause.AUTHENTICATION_FAILURE,
        _any_of(
            "unauthorized",
            "authentication required",
            "authentication failed",
            "authorization failed",
            "401",
            "403",
            "no basic auth credentials",
            "pull access denied",
            "access denied",
            "access forbidden",
        ),
    ),
    ClassificationRule(
        RootCause.NETWORK_ISSUE,
        _any_of(
            "dial tcp",
            "timeout",
            "i/o timeout",
            "connection refused",
            "no route to host",
            "dns",
            "failed",
            "lookup",
            "no such host",
        ),
    ),
    ClassificationRule(
        RootCause.RATE_LIMIT_EXCEEDED,
        _any_of("rate limit", "too many requests", "429", "toomanyrequests"),
    ),
    ClassificationRule(
        RootCause.PERMISSION_DENIED,
        _any_of("forbidden", "permission denied", "insufficient", "permission"),
    ),
    ClassificationRule(
        RootCause.MANIFEST_ERROR,
        (
            ("manifest invalid",),
            ("unsupported", "platform"),
            ("no matching manifest",),
            ("unknown blob",),
        ),
    ),
)


def search_text(events: Sequence[EventSummary]) -> str:
    """Case-folded concatenation of all event messages."""
    return " ".join(event.message.casefold() for event in events)


def match_rule(root_cause: RootCause, text: str) -> bool:
    """True if the rule group for *root_cause* matches *text* on its own."""
    for rule in CLASSIFICATION_RULES:
        if rule.root_cause == root_cause:
            return rule.match(text.casefold()) is not None
    return False


def classify(
    events: Sequence[EventSummary],
    pod: PodView | None,
    analysis: EventAnalysis | None,
) -> RootCause:
    """Determine the root cause of a pod's image pull failure.

    Deterministic and total: always returns a RootCause.  *pod* is accepted
    for context but the current rules only inspect event text.
    """
    text = search_text(events)
    for rule in CLASSIFICATION_RULES:
        predicate = rule.match(text)
        if predicate is not None:
            _logger.debug(
                "root_cause_matched",
                root_cause=str(rule.root_cause),
                predicate=list(predicate),
                pod=pod.name if pod else "",
            )
            return rule.root_cause

    if analysis is not None and analysis.is_transient:
        return RootCause.TRANSIENT_FAILURE
    return RootCause.UNKNOWN

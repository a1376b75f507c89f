"""Failure-event aggregation.

Folds a pod's image-pull failure events into an EventAnalysis: total
failure count, time span, ordered error messages and the transient /
persistent signal used by the classifier and the finding invariant.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import timedelta
from typing import Any

from k8t.cluster.redaction import redact_event_message
from k8t.models.events import EventAnalysis, EventSummary

# Event reasons that represent an image pull failure.  Anything else
# (Scheduled, Pulling, Created, ...) would corrupt the transience signal.
FAILURE_EVENT_REASONS = frozenset(
    {
        "Failed",
        "BackOff",
        "ErrImagePull",
        "ImagePullBackOff",
        "FailedPull",
        "InspectFailed",
    }
)

# Transient: fewer than 3 failures spanning under 5 minutes (both strict).
TRANSIENT_MAX_FAILURES = 3
TRANSIENT_MAX_SPAN = timedelta(minutes=5)


def is_transient(failure_count: int, span: timedelta) -> bool:
    return failure_count < TRANSIENT_MAX_FAILURES and span < TRANSIENT_MAX_SPAN


def analyze_events(events: Sequence[EventSummary]) -> EventAnalysis:
    """Aggregate *events* into an EventAnalysis.

    Pure and total; an empty sequence yields a zero-valued, non-transient
    analysis.
    """
    if not events:
        return EventAnalysis()

    failure_count = 0
    first = events[0].first_seen
    last = events[0].last_seen
    messages: list[str] = []

    for event in events:
        # An event with an unset/zero count still represents one occurrence.
        failure_count += max(event.count, 1)
        first = min(first, event.first_seen)
        last = max(last, event.last_seen)
        if event.message:
            messages.append(event.message)

    return EventAnalysis(
        failure_count=failure_count,
        first_failure_time=first,
        last_failure_time=last,
        error_messages=tuple(messages),
        is_transient=is_transient(failure_count, last - first),
    )


def filter_image_pull_events(raw_events: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Keep only serialized ``v1.Event`` objects whose reason is a pull failure."""
    return [e for e in raw_events if e.get("reason") in FAILURE_EVENT_REASONS]


def summarize_events(raw_events: Iterable[Mapping[str, Any]], redact: bool = True) -> list[EventSummary]:
    """Filter raw events to pull failures and project them to EventSummary.

    Messages are passed through ``redact_event_message`` unless *redact* is
    False.
    """
    summaries = [EventSummary.from_api(e) for e in filter_image_pull_events(raw_events)]
    if not redact:
        return summaries
    return [replace(s, message=redact_event_message(s.message)) for s in summaries]


def analyze_raw_events(raw_events: Iterable[Mapping[str, Any]]) -> EventAnalysis:
    """Filter unfiltered raw events to failure reasons, then aggregate."""
    return analyze_events(summarize_events(raw_events))

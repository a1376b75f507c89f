"""Event data structures and root-cause enumerations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class Severity(StrEnum):
    """Urgency of a diagnostic finding."""

    HIGH = "HIGH"  # requires immediate action
    MEDIUM = "MEDIUM"  # needs investigation
    LOW = "LOW"  # informational or may self-resolve


class RootCause(StrEnum):
    """Classified category explaining an image-pull failure."""

    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    AUTHENTICATION_FAILURE = "AUTHENTICATION_FAILURE"
    NETWORK_ISSUE = "NETWORK_ISSUE"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    MANIFEST_ERROR = "MANIFEST_ERROR"
    TRANSIENT_FAILURE = "TRANSIENT_FAILURE"
    UNKNOWN = "UNKNOWN"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def severity(self) -> Severity:
        return _SEVERITIES[self]


_DESCRIPTIONS: dict[RootCause, str] = {
    RootCause.IMAGE_NOT_FOUND: "Image does not exist in registry",
    RootCause.AUTHENTICATION_FAILURE: "Registry authentication failed",
    RootCause.NETWORK_ISSUE: "Cannot reach registry",
    RootCause.RATE_LIMIT_EXCEEDED: "Registry rate limit exceeded",
    RootCause.PERMISSION_DENIED: "Insufficient permissions to pull image",
    RootCause.MANIFEST_ERROR: "Image manifest is invalid or corrupted",
    RootCause.TRANSIENT_FAILURE: "Transient failure (may resolve automatically)",
    RootCause.UNKNOWN: "Unknown failure reason",
}

_SEVERITIES: dict[RootCause, Severity] = {
    RootCause.IMAGE_NOT_FOUND: Severity.HIGH,
    RootCause.AUTHENTICATION_FAILURE: Severity.HIGH,
    RootCause.PERMISSION_DENIED: Severity.HIGH,
    RootCause.NETWORK_ISSUE: Severity.MEDIUM,
    RootCause.RATE_LIMIT_EXCEEDED: Severity.MEDIUM,
    RootCause.MANIFEST_ERROR: Severity.MEDIUM,
    RootCause.TRANSIENT_FAILURE: Severity.LOW,
    RootCause.UNKNOWN: Severity.MEDIUM,
}


def parse_timestamp(value: object) -> datetime | None:
    """Parse a Kubernetes timestamp (datetime or RFC 3339 string) to aware UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


@dataclass(frozen=True)
class EventSummary:
    """Redacted, analyzer-facing projection of one cluster failure event."""

    timestamp: datetime
    reason: str
    message: str  # secrets redacted before reaching this layer
    count: int
    first_seen: datetime
    last_seen: datetime

    def __post_init__(self) -> None:
        if self.first_seen > self.last_seen:
            raise ValueError(
                f"event first_seen ({self.first_seen.isoformat()}) is after last_seen ({self.last_seen.isoformat()})"
            )

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> EventSummary:
        """Build a summary from a serialized ``v1.Event``.

        Missing timestamps fall back to ``eventTime`` then to the object's
        creation timestamp.  When first/last timestamps are reversed the
        span is normalized rather than rejected.  The message is taken
        verbatim; redaction happens in the analyzer before events reach a
        finding.
        """
        metadata = raw.get("metadata") or {}
        fallback = (
            parse_timestamp(raw.get("eventTime"))
            or parse_timestamp(metadata.get("creationTimestamp"))
            or datetime.fromtimestamp(0, tz=UTC)
        )
        first = parse_timestamp(raw.get("firstTimestamp")) or fallback
        last = parse_timestamp(raw.get("lastTimestamp")) or first
        if first > last:
            first, last = last, first

        return cls(
            timestamp=last,
            reason=str(raw.get("reason") or ""),
            message=str(raw.get("message") or ""),
            count=int(raw.get("count") or 0),
            first_seen=first,
            last_seen=last,
        )


@dataclass(frozen=True)
class EventAnalysis:
    """Aggregate over the EventSummary values of one pod.

    Computed once from a closed set of events by
    ``k8t.analyzer.events.analyze_events``; never mutated afterwards.
    """

    failure_count: int = 0
    first_failure_time: datetime | None = None
    last_failure_time: datetime | None = None
    error_messages: tuple[str, ...] = field(default_factory=tuple)
    is_transient: bool = False

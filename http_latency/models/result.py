"""Models for per-target measurement outcomes."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, get_args

from http_latency.models.target import Target

FailureKind = Literal[
    "MalformedTarget",
    "DnsResolutionFailure",
    "ConnectionRefused",
    "Timeout",
    "ProtocolError",
    "ServerRefusedRequest",
]

FAILURE_KINDS: tuple[FailureKind, ...] = get_args(FailureKind)


@dataclass(frozen=True, kw_only=True)
class Measurement:
    """Monotonic start and end timestamps of one completed request, in seconds."""

    target: Target
    start: float
    end: float

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Measurement end precedes its start")

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def latency_ms(self) -> int:
        """Duration rounded to whole milliseconds."""
        return round(self.duration * 1000)


@dataclass(frozen=True, kw_only=True)
class Success:
    """A response was fully received, whatever its status code."""

    status_code: int
    measurement: Measurement


@dataclass(frozen=True, kw_only=True)
class Failure:
    """The target could not be measured."""

    kind: FailureKind
    message: str


Outcome = Success | Failure


@dataclass(frozen=True, kw_only=True)
class Result:
    """Outcome for the input at position ``index``.

    ``target`` is None only when normalization failed.
    """

    index: int
    raw: str
    target: Target | None
    outcome: Outcome

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)


ResultSet = Sequence[Result]

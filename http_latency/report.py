"""Formatting and writing of latency reports."""

import json
import logging
import sys
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from http_latency.models.result import FAILURE_KINDS, FailureKind, Result, Success

ReportFormat = Literal["text", "json"]

STDOUT = "-"

SUCCESS_SYMBOL = "✓"
FAILURE_SYMBOLS: dict[FailureKind, str] = {
    "MalformedTarget": "?",
    "DnsResolutionFailure": "✗",
    "ConnectionRefused": "✗",
    "Timeout": "⏱",
    "ProtocolError": "!",
    "ServerRefusedRequest": "!",
}


class ReportRow(BaseModel):
    """One target's line in the JSON report."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(..., description="URL exactly as supplied")
    target: str | None = Field(default=None, description="Normalized URL")
    latency_ms: int | None = Field(default=None, ge=0)
    status: int | None = Field(default=None, description="HTTP status code")
    error: FailureKind | None = Field(default=None, description="Failure kind")
    message: str | None = Field(default=None, description="Failure detail")

    @classmethod
    def from_result(cls, result: Result) -> "ReportRow":
        target = result.target.url if result.target is not None else None
        outcome = result.outcome
        if isinstance(outcome, Success):
            return cls(
                url=result.raw,
                target=target,
                latency_ms=outcome.measurement.latency_ms,
                status=outcome.status_code,
            )
        return cls(
            url=result.raw,
            target=target,
            error=outcome.kind,
            message=outcome.message,
        )


def format_line(result: Result) -> str:
    """Format one result as ``url,latency_ms,status`` or ``url,ERROR:kind:message``."""
    outcome = result.outcome
    if isinstance(outcome, Success):
        return f"{result.raw},{outcome.measurement.latency_ms},{outcome.status_code}"
    message = " ".join(outcome.message.split())
    return f"{result.raw},ERROR:{outcome.kind}:{message}"


def format_output(results: Sequence[Result]) -> dict[str, Any]:
    """Format results for JSON output."""
    rows = [ReportRow.from_result(result) for result in results]
    kinds = Counter(row.error for row in rows if row.error is not None)

    return {
        "total": len(rows),
        "succeeded": sum(1 for row in rows if row.error is None),
        "failed": sum(kinds.values()),
        "failures": {kind: kinds.get(kind, 0) for kind in FAILURE_KINDS},
        "results": [row.model_dump() for row in rows],
    }


def render(results: Sequence[Result], fmt: ReportFormat = "text") -> str:
    """Render the whole report as text."""
    if fmt == "json":
        return json.dumps(format_output(results), indent=2) + "\n"
    return "".join(f"{format_line(result)}\n" for result in results)


def write_report(
    results: Sequence[Result],
    destination: Path | str,
    fmt: ReportFormat = "text",
) -> None:
    """Write the report, replacing any existing file at ``destination``.

    ``-`` writes to stdout.
    """
    content = render(results, fmt)
    if str(destination) == STDOUT:
        sys.stdout.write(content)
        return
    Path(destination).write_text(content, encoding="utf-8")


def log_results_summary(log: logging.Logger, results: Sequence[Result]) -> None:
    """Log a formatted summary of the run."""
    log.info("=" * 80)
    log.info("Latency Summary:")
    log.info("=" * 80)

    for result in results:
        outcome = result.outcome
        if isinstance(outcome, Success):
            log.info(
                "%s %s: %d ms (HTTP %d)",
                SUCCESS_SYMBOL,
                result.raw,
                outcome.measurement.latency_ms,
                outcome.status_code,
            )
        else:
            log.info("%s %s: %s", FAILURE_SYMBOLS[outcome.kind], result.raw, outcome.kind)
            log.info("  Message: %s", outcome.message)

    succeeded = sum(1 for result in results if result.ok)
    log.info("%d/%d target(s) measured", succeeded, len(results))

"""Execution of a single timed GET request."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

import aiohttp

from http_latency.classifier import to_failure
from http_latency.models.result import Failure, Outcome, Result, Success
from http_latency.models.target import Target
from http_latency.timer import LatencyTimer

log = logging.getLogger(__name__)

# idle -> sending -> waiting_for_response -> completed | failed
#
# "sending" covers connection setup, writing the request and awaiting the
# status line; "waiting_for_response" starts once the status line is in and
# lasts until the body is fully drained.
WorkerState = Literal[
    "idle", "sending", "waiting_for_response", "completed", "failed"
]

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, kw_only=True)
class RequestWorker:
    """Owns one in-flight GET request at a time.

    Every error is returned as a Failure; nothing but outside cancellation
    escapes ``run``.
    """

    session: aiohttp.ClientSession = field(repr=False)
    follow_redirects: bool = True
    max_redirects: int = 10
    clock: Callable[[], float] = time.perf_counter

    async def run(self, index: int, target: Target, timeout: float) -> Result:
        """Request ``target`` and time it until the body is fully received.

        Args:
            index: Position of the target in the input sequence
            target: Normalized target to request
            timeout: Budget in seconds for the whole request lifecycle

        Returns:
            Result holding either the status code and Measurement, or the
            classified Failure

        """
        timer = LatencyTimer(target=target, clock=self.clock)
        state: WorkerState = "idle"
        outcome: Outcome

        try:
            # Leaving the timeout block cancels the pending I/O and the
            # response context manager releases the connection.
            async with asyncio.timeout(timeout):
                state = self._transition(target, state, "sending")
                timer.start()
                async with self.session.get(
                    target.url,
                    allow_redirects=self.follow_redirects,
                    max_redirects=self.max_redirects,
                ) as response:
                    state = self._transition(target, state, "waiting_for_response")
                    async for _ in response.content.iter_chunked(CHUNK_SIZE):
                        pass
                    measurement = timer.stop()
                    outcome = Success(
                        status_code=response.status, measurement=measurement
                    )
        except TimeoutError:
            outcome = Failure(
                kind="Timeout",
                message=f"No complete response within {timeout:g}s",
            )
        except (aiohttp.ClientError, OSError) as exc:
            outcome = to_failure(exc, status_received=state == "waiting_for_response")

        if isinstance(outcome, Success):
            self._transition(target, state, "completed")
            log.info(
                "%s responded %d in %d ms",
                target.url,
                outcome.status_code,
                outcome.measurement.latency_ms,
            )
        else:
            self._transition(target, state, "failed")
            log.info("%s failed: %s (%s)", target.url, outcome.kind, outcome.message)

        return Result(index=index, raw=target.raw, target=target, outcome=outcome)

    def _transition(
        self, target: Target, current: WorkerState, new: WorkerState
    ) -> WorkerState:
        log.debug("%s: %s -> %s", target.url, current, new)
        return new

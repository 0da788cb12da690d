"""Bounded concurrent dispatch of request workers."""

import asyncio
import logging
import math
from collections.abc import AsyncGenerator, Iterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from http_latency.aggregator import collect
from http_latency.classifier import describe
from http_latency.config import LatencySettings
from http_latency.errors import EmptyInputError, InvalidConfigurationError
from http_latency.models.result import Failure, Result, ResultSet
from http_latency.models.target import Target
from http_latency.normalizer import normalize
from http_latency.session import open_session
from http_latency.worker import RequestWorker

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Dispatcher:
    """Fans targets out to at most ``concurrency`` workers at a time."""

    worker: RequestWorker

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, settings: LatencySettings
    ) -> AsyncGenerator["Dispatcher", None]:
        """Create a dispatcher with managed session lifecycle."""
        async with open_session(settings) as session:
            yield cls(
                worker=RequestWorker(
                    session=session,
                    follow_redirects=settings.follow_redirects,
                    max_redirects=settings.max_redirects,
                )
            )

    async def run(
        self,
        targets: Sequence[str],
        concurrency: int,
        timeout: float,
    ) -> ResultSet:
        """Measure every target once and return results in input order.

        Args:
            targets: Raw URL strings, in input order
            concurrency: Maximum number of requests in flight
            timeout: Per-request budget in seconds

        Returns:
            One Result per input, ordered by input index

        Raises:
            EmptyInputError: If ``targets`` is empty
            InvalidConfigurationError: If concurrency or timeout is not positive

        """
        _validate(targets, concurrency, timeout)

        pending: asyncio.Queue[tuple[int, Target]] = asyncio.Queue()
        completions: asyncio.Queue[Result] = asyncio.Queue()

        for index, raw in enumerate(targets):
            normalized = normalize(raw)
            if isinstance(normalized, Failure):
                log.warning("Malformed target %r: %s", raw, normalized.message)
                completions.put_nowait(
                    Result(index=index, raw=raw, target=None, outcome=normalized)
                )
            else:
                pending.put_nowait((index, normalized))

        slots = min(concurrency, pending.qsize())
        log.info(
            "Dispatching %d request(s) over %d slot(s) (timeout=%gs, %d malformed)",
            pending.qsize(),
            slots,
            timeout,
            completions.qsize(),
        )

        async with asyncio.TaskGroup() as group:
            for slot in range(slots):
                group.create_task(
                    self._serve_slot(pending, completions, timeout),
                    name=f"latency-slot-{slot}",
                )

        results = collect(_drain(completions), len(targets))
        log.info(
            "Run completed: %d succeeded, %d failed",
            sum(1 for result in results if result.ok),
            sum(1 for result in results if not result.ok),
        )
        return results

    async def _serve_slot(
        self,
        pending: asyncio.Queue[tuple[int, Target]],
        completions: asyncio.Queue[Result],
        timeout: float,
    ) -> None:
        """Take targets off the queue one at a time until it is empty."""
        while True:
            try:
                index, target = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            completions.put_nowait(await self._run_worker(index, target, timeout))

    async def _run_worker(self, index: int, target: Target, timeout: float) -> Result:
        """Run the worker, turning anything it fails to classify into a Failure."""
        try:
            return await self.worker.run(index, target, timeout)
        except Exception as exc:
            log.error(
                "Unexpected error measuring %s: %s", target.url, exc, exc_info=exc
            )
            return Result(
                index=index,
                raw=target.raw,
                target=target,
                outcome=Failure(kind="ProtocolError", message=describe(exc)),
            )


async def measure_latencies(
    targets: Sequence[str], settings: LatencySettings | None = None
) -> ResultSet:
    """Measure ``targets`` with a dispatcher built from ``settings``."""
    settings = settings or LatencySettings()
    async with Dispatcher.from_config(settings) as dispatcher:
        return await dispatcher.run(targets, settings.concurrency, settings.timeout)


def _validate(targets: Sequence[str], concurrency: int, timeout: float) -> None:
    if not targets:
        raise EmptyInputError("No targets to measure")
    if isinstance(concurrency, bool) or not isinstance(concurrency, int):
        raise InvalidConfigurationError(
            f"Concurrency must be an integer, got {concurrency!r}"
        )
    if concurrency < 1:
        raise InvalidConfigurationError(
            f"Concurrency must be positive, got {concurrency}"
        )
    if not timeout > 0 or not math.isfinite(timeout):
        raise InvalidConfigurationError(
            f"Timeout must be a positive number of seconds, got {timeout!r}"
        )


def _drain(queue: asyncio.Queue[Result]) -> Iterator[Result]:
    while not queue.empty():
        yield queue.get_nowait()

"""Reassembly of completions into input order."""

from collections.abc import Iterable

from http_latency.errors import AggregationError
from http_latency.models.result import Result, ResultSet


def collect(completions: Iterable[Result], size: int) -> ResultSet:
    """Place each completion in the slot of its original input index.

    Args:
        completions: Results in any order
        size: Number of inputs in the run

    Returns:
        Results ordered by index, exactly one per input

    Raises:
        AggregationError: If an index is out of range, repeated or missing

    """
    slots: list[Result | None] = [None] * size

    for result in completions:
        if not 0 <= result.index < size:
            raise AggregationError(
                f"Result index {result.index} outside of 0..{size - 1}"
            )
        if slots[result.index] is not None:
            raise AggregationError(f"Duplicate result for index {result.index}")
        slots[result.index] = result

    missing = [index for index, slot in enumerate(slots) if slot is None]
    if missing:
        raise AggregationError(f"No result for indices {missing}")

    return [slot for slot in slots if slot is not None]

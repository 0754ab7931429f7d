"""
Bounded-concurrency batch execution.

Items are processed in consecutive chunks of ``concurrency`` items. The
members of a chunk run in parallel on a thread pool and every one of them
settles before the next chunk starts. Failures are recorded as outcomes
and never cancel sibling or later work.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, TypeVar

from artifact_retention.core.exceptions import format_exception
from artifact_retention.core.models import ItemOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BatchReport:
    """Aggregated outcomes of a batch run."""

    outcomes: list[ItemOutcome] = field(default_factory=list)
    chunk_count: int = 0

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)

    @property
    def failures(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if not o.success]


def iter_chunks(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _settle(action: Callable[[T], Any], item: T) -> ItemOutcome:
    try:
        action(item)
    except Exception as e:
        logger.warning(f"Action failed for {item}: {format_exception(e)}")
        return ItemOutcome(item=item, success=False, error=format_exception(e))
    return ItemOutcome(item=item, success=True)


def run_batches(
    items: Sequence[T],
    concurrency: int,
    action: Callable[[T], Any],
) -> BatchReport:
    """
    Run ``action`` once for every item, at most ``concurrency`` at a time.

    Args:
        items: Work items, processed in chunk order
        concurrency: Chunk size and maximum number of parallel actions
        action: Callable invoked with each item; its return value is ignored

    Returns:
        BatchReport with one outcome per item, in input order

    Raises:
        ValueError: If concurrency is less than 1
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    report = BatchReport()
    if not items:
        return report

    with ThreadPoolExecutor(
        max_workers=concurrency,
        thread_name_prefix="retention_worker",
    ) as executor:
        for chunk in iter_chunks(items, concurrency):
            futures = [executor.submit(_settle, action, item) for item in chunk]
            wait(futures)
            report.outcomes.extend(f.result() for f in futures)
            report.chunk_count += 1

    if report.failed:
        logger.warning(f"{report.failed} of {len(items)} action(s) failed")
    return report

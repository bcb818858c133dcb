"""Local batch orchestration of prayer times over date ranges."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, timedelta
from math import ceil

from islamic_prayer_times.contracts import TimeMap
from islamic_prayer_times.geo.coordinates import Location
from islamic_prayer_times.geo.weather import Weather
from islamic_prayer_times.prayer.params import Params
from islamic_prayer_times.prayer.times import compute_prayer_times

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of local calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("start must be <= end.")

    @classmethod
    def single(cls, day: date) -> DateRange:
        return cls(start=day, end=day)

    @property
    def num_days(self) -> int:
        return (self.end - self.start).days + 1

    def iter_dates(self) -> Iterator[date]:
        """Yield each date from start to end inclusive."""
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def partition(self, count: int) -> list[DateRange]:
        """Split into at most ``count`` contiguous blocks of ``ceil(num_days / count)`` days."""
        if count <= 0:
            raise ValueError("count must be positive.")
        if count == 1:
            return [self]

        block_days = ceil(self.num_days / count)
        blocks: list[DateRange] = []
        block_start = self.start
        while block_start <= self.end:
            block_end = min(block_start + timedelta(days=block_days - 1), self.end)
            blocks.append(DateRange(start=block_start, end=block_end))
            block_start = block_end + timedelta(days=1)
        return blocks


def _compute_block(
    params: Params, location: Location, block: DateRange, weather: Weather | None
) -> dict[date, TimeMap]:
    return {day: compute_prayer_times(params, location, day, weather) for day in block.iter_dates()}


def compute_range(
    params: Params,
    location: Location,
    date_range: DateRange,
    weather: Weather | None = None,
    workers: int | None = None,
) -> dict[date, TimeMap]:
    """Compute prayer times for every date in ``date_range``.

    The range is cut into one block per worker and each block runs on its own
    thread. Blocks are disjoint, so their results merge without coordination.

    Args:
        params: Calculation parameters shared by all dates.
        location: Observer coordinates and UTC offset.
        date_range: Inclusive dates to compute.
        weather: Surface conditions for refraction; standard atmosphere if omitted.
        workers: Thread count; defaults to the number of CPUs.

    Returns:
        Per-date prayer times ordered by date.
    """
    worker_count = workers if workers is not None else (os.cpu_count() or 1)
    if worker_count <= 0:
        raise ValueError("workers must be positive.")
    worker_count = min(worker_count, date_range.num_days)
    blocks = date_range.partition(worker_count)
    logger.info(
        "computing %d days from %s to %s in %d blocks",
        date_range.num_days,
        date_range.start,
        date_range.end,
        len(blocks),
    )

    if len(blocks) == 1:
        merged = _compute_block(params, location, blocks[0], weather)
    else:
        merged = {}
        with ThreadPoolExecutor(max_workers=len(blocks)) as executor:
            futures = [
                executor.submit(_compute_block, params, location, block, weather) for block in blocks
            ]
            for future in futures:
                merged.update(future.result())

    return dict(sorted(merged.items()))

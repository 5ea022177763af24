"""Time axis tick planning for evenly indexed timeline charts.

Samples are plotted by index (0..N-1), not by time, so tick positions are
derived by mapping instants back to (fractional) indices.
"""

import logging
import math
from datetime import datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Union

from fleetstats.models.timeline import Granularity, Tick, parse_timestamp

logger = logging.getLogger("fleetstats.ticks")

LabelFormatter = Callable[[datetime, Granularity], str]

DEFAULT_TICK_COUNT = 4
HOUR_SPAN = timedelta(minutes=60)
HOUR_TICK_COUNT = 4
WEEK_SPAN = timedelta(days=7)
MONTH_SPAN = timedelta(days=30)
DAILY_TICK_STRIDE = 2

# Index precision used to key ticks; colliding ticks overwrite
INDEX_PRECISION = 9


def default_label_formatter(instant: datetime, granularity: Granularity) -> str:
    """Locale-neutral fallback formatter ("Mar 05", "14:30", "Mar 05 14:30")."""
    if granularity is Granularity.DATE:
        return instant.strftime("%b %d")
    if granularity is Granularity.TIME:
        return instant.strftime("%H:%M")
    return instant.strftime("%b %d %H:%M")


def _first_midnight(instant: datetime) -> datetime:
    """First midnight at or after the given instant, same tzinfo."""
    midnight = datetime.combine(instant.date(), time(0), tzinfo=instant.tzinfo)
    if midnight < instant:
        midnight += timedelta(days=1)
    return midnight


class _TickSet:
    """Ticks keyed by rounded index."""

    def __init__(self, formatter: LabelFormatter, last_index: int):
        self.formatter = formatter
        self.last_index = last_index
        self._ticks: Dict[float, Tick] = {}

    def add(self, index: float, instant: datetime, granularity: Granularity) -> None:
        index = min(max(index, 0.0), float(self.last_index))
        key = round(index, INDEX_PRECISION)
        self._ticks[key] = Tick(
            index=key,
            label=self.formatter(instant, granularity),
            instant=instant,
            granularity=granularity,
        )

    def sorted(self) -> List[Tick]:
        return [self._ticks[key] for key in sorted(self._ticks)]


def plan_ticks(
    sample_timestamps: Sequence[Union[datetime, str]],
    desired_tick_count: int = DEFAULT_TICK_COUNT,
    formatter: Optional[LabelFormatter] = None,
) -> List[Tick]:
    """Plan axis ticks for a series sampled at evenly spaced instants.

    Branches on the span between first and last sample:
    - exactly 1 hour: 4 evenly spaced time-only ticks
    - exactly 7 or 30 days: a date-only tick every 2 samples
    - anything else: a date-only tick at the first midnight in range plus
      time-only ticks walking outward from that midnight in steps of
      span / desired_tick_count

    Args:
        sample_timestamps: Ordered sample instants (datetime or ISO 8601)
        desired_tick_count: Number of steps the span is divided into
        formatter: Label formatter (instant, granularity) -> str

    Returns:
        Ticks sorted by index, every index within [0, N-1], never empty

    Raises:
        ValueError: If there are no samples or desired_tick_count <= 0
    """
    if desired_tick_count <= 0:
        raise ValueError(f"desired_tick_count must be > 0, got {desired_tick_count}")
    if not sample_timestamps:
        raise ValueError("Cannot plan ticks for an empty series")

    formatter = formatter or default_label_formatter
    timestamps = [parse_timestamp(ts) for ts in sample_timestamps]
    first, last = timestamps[0], timestamps[-1]
    last_index = len(timestamps) - 1
    span = last - first if last_index > 0 else timedelta(0)
    ticks = _TickSet(formatter, last_index)

    if span == HOUR_SPAN:
        for i in range(HOUR_TICK_COUNT):
            ticks.add(
                i * last_index / HOUR_TICK_COUNT,
                first + span * i / HOUR_TICK_COUNT,
                Granularity.TIME,
            )
    elif span in (WEEK_SPAN, MONTH_SPAN):
        for i in range(0, len(timestamps), DAILY_TICK_STRIDE):
            ticks.add(i, timestamps[i], Granularity.DATE)
    else:
        _plan_around_midnight(ticks, first, last, span, desired_tick_count)

    result = ticks.sorted()
    logger.debug(f"Planned {len(result)} ticks for {len(timestamps)} samples spanning {span}")
    return result


def _plan_around_midnight(
    ticks: _TickSet,
    first: datetime,
    last: datetime,
    span: timedelta,
    desired_tick_count: int,
) -> None:
    midnight = _first_midnight(first)

    if span <= timedelta(0):
        ticks.add(0, midnight, Granularity.DATE)
        return

    span_seconds = span.total_seconds()
    step_seconds = span_seconds / desired_tick_count
    midnight_offset = (midnight - first).total_seconds()

    def index_at(offset_seconds: float) -> float:
        return offset_seconds * ticks.last_index / span_seconds

    # Steps k with midnight + k*step inside [first, last]; walking outward
    # from an in-range midnight and stopping at the first step outside
    # yields exactly this set.
    epsilon = 1e-9 * step_seconds
    k_min = math.ceil((-midnight_offset - epsilon) / step_seconds)
    k_max = math.floor((span_seconds - midnight_offset + epsilon) / step_seconds)

    for k in range(k_min, k_max + 1):
        if k == 0:
            continue
        offset = midnight_offset + k * step_seconds
        ticks.add(index_at(offset), first + timedelta(seconds=offset), Granularity.TIME)

    # Added last so it wins any collision
    if 0 <= midnight_offset <= span_seconds:
        ticks.add(index_at(midnight_offset), midnight, Granularity.DATE)

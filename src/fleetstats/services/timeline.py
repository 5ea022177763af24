"""Chart rows and point-in-time breakdowns from group timelines.

Timelines come from the telemetry snapshot provider as mappings keyed by
timestamp, in chronological order:

    version timeline: {timestamp: {version: count}}
    status timeline:  {timestamp: {status: {version: count}}}
"""

import logging
from typing import Dict, List, Mapping, Optional

from fleetstats.models.timeline import StatusCount, TimelineChart, TimelineRow, VersionCount
from fleetstats.services.classifier import classify
from fleetstats.services.colors import assign_colors
from fleetstats.utils.semver import clean_semver_version, is_semver, sort_versions

logger = logging.getLogger("fleetstats.timeline")

# Status key the backend uses for instances without a status
NO_STATUS = 0


def _status_code(status) -> int:
    """Status keys arrive as strings from JSON.

    Raises:
        ValueError: If the key is not an integer
    """
    try:
        return int(status)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid status key {status!r}, expected an integer") from None


def _resolve_point(rows: List[TimelineRow], selected: int) -> Optional[TimelineRow]:
    """Row at the selected index; -1 (or out of range) means the latest."""
    if not rows:
        return None
    if 0 <= selected < len(rows):
        return rows[selected]
    return rows[-1]


def version_timeline(
    timeline: Mapping[str, Mapping[str, int]], reference_version: Optional[str] = None
) -> TimelineChart:
    """Build stacked-area rows for a version count timeline.

    Keys are the valid semantic versions found at the first point, build
    metadata stripped, earliest first.
    """
    if not timeline:
        return TimelineChart()

    rows = []
    for index, (timestamp, versions) in enumerate(timeline.items()):
        values: Dict[str, int] = {}
        for version, count in versions.items():
            cleaned = clean_semver_version(version)
            values[cleaned] = values.get(cleaned, 0) + count
        rows.append(TimelineRow(index=index, timestamp=timestamp, values=values))

    first_point = next(iter(timeline.values()))
    keys = sort_versions(
        {clean_semver_version(v) for v in first_point if is_semver(clean_semver_version(v))}
    )
    colors = assign_colors(keys, reference_version)

    logger.debug(f"Version timeline: {len(rows)} points, {len(keys)} versions")
    return TimelineChart(rows=rows, keys=keys, colors=colors)


def version_counts_at(chart: TimelineChart, selected: int = -1) -> List[VersionCount]:
    """Per-version breakdown at one point of a version timeline.

    Args:
        chart: Output of version_timeline()
        selected: Row index, -1 for the latest point

    Returns:
        Counts sorted by instances (highest first), percentages to 1 decimal
    """
    row = _resolve_point(chart.rows, selected)
    if row is None:
        return []

    counts = [(version, row.values.get(version, 0)) for version in chart.keys]
    total = sum(count for _, count in counts)

    breakdown = [
        VersionCount(
            version=version,
            instances=count,
            percentage=round(count * 100.0 / total, 1) if total > 0 else 0.0,
            color_role=chart.colors.get(version),
        )
        for version, count in counts
    ]
    breakdown.sort(key=lambda entry: entry.instances, reverse=True)
    return breakdown


def status_timeline(timeline: Mapping[str, Mapping[str, Mapping[str, int]]]) -> TimelineChart:
    """Build step-chart rows for a status count timeline.

    Each row sums instances per status across versions. Status 0 (no
    status yet) is left out of the keys.
    """
    if not timeline:
        return TimelineChart()

    rows = []
    for index, (timestamp, statuses) in enumerate(timeline.items()):
        values = {
            str(_status_code(status)): sum(versions.values())
            for status, versions in statuses.items()
        }
        rows.append(TimelineRow(index=index, timestamp=timestamp, values=values))

    first_point = next(iter(timeline.values()))
    keys = [str(code) for code in map(_status_code, first_point) if code != NO_STATUS]
    colors = {key: classify(int(key), "").color_role for key in keys}

    logger.debug(f"Status timeline: {len(rows)} points, {len(keys)} statuses")
    return TimelineChart(rows=rows, keys=keys, colors=colors)


def status_counts_at(
    timeline: Mapping[str, Mapping[str, Mapping[str, int]]],
    chart: TimelineChart,
    selected: int = -1,
) -> List[StatusCount]:
    """Per-(status, version) breakdown at one point of a status timeline.

    Args:
        timeline: Raw status timeline the chart was built from
        chart: Output of status_timeline()
        selected: Row index, -1 for the latest point

    Returns:
        Counts sorted by instances, highest first
    """
    row = _resolve_point(chart.rows, selected)
    if row is None:
        return []

    breakdown = []
    for status, versions in timeline.get(row.timestamp, {}).items():
        status_code = _status_code(status)
        if status_code == NO_STATUS:
            continue
        for version, count in versions.items():
            descriptor = classify(status_code, version)
            breakdown.append(
                StatusCount(
                    status=status_code,
                    label=descriptor.description,
                    version=version,
                    instances=count,
                    color_role=descriptor.color_role,
                )
            )

    breakdown.sort(key=lambda entry: entry.instances, reverse=True)
    return breakdown

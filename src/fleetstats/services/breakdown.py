"""Version breakdown aggregation for the rollout progress bar."""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from fleetstats.models.breakdown import OTHER_VERSION, VersionBucket, VersionEntry
from fleetstats.services.colors import assign_colors
from fleetstats.utils.semver import clean_semver_version

logger = logging.getLogger("fleetstats.breakdown")

DEFAULT_SIGNIFICANCE_THRESHOLD_PCT = 10.0

# Sort groups: channel version first, "Other" last
GROUP_REFERENCE = 0
GROUP_REGULAR = 1
GROUP_OTHER = 2

EntryLike = Union[VersionEntry, Mapping]


def _resolve_percentages(entries: List[VersionEntry]) -> Dict[str, float]:
    """Merge duplicate versions and derive missing percentages from counts.

    Returns:
        Ordered mapping version → percentage (first-seen order)
    """
    if any(entry.percentage is None for entry in entries):
        total = sum(entry.instances or 0 for entry in entries)
        measures = [
            (entry.version, entry.instances * 100.0 / total if total and entry.instances else 0.0)
            for entry in entries
        ]
    else:
        measures = [(entry.version, float(entry.percentage)) for entry in entries]

    percentages: Dict[str, float] = {}
    for version, percentage in measures:
        percentages[version] = percentages.get(version, 0.0) + percentage
    return percentages


def aggregate(
    entries: Iterable[EntryLike],
    reference_version: Optional[str] = None,
    significance_threshold_pct: float = DEFAULT_SIGNIFICANCE_THRESHOLD_PCT,
) -> List[VersionBucket]:
    """Bucket a version breakdown into significant versions plus "Other".

    Steps:
    1. Versions at or above the threshold stay as their own bucket.
    2. Versions below it are summed into one "Other" bucket (omitted if 0).
    3. Colors are assigned relative to the reference version, using only
       the significant versions as comparison basis.
    4. Order: reference bucket first, "Other" last, the rest by ascending
       percentage keeping input order on ties.

    Args:
        entries: VersionEntry objects or dicts with version and
                 percentage/instances
        reference_version: Version currently assigned to the channel
        significance_threshold_pct: Minimum percentage for an own bucket

    Returns:
        Ordered list of VersionBucket

    Raises:
        ValueError: If the threshold is negative or an entry is invalid
    """
    if significance_threshold_pct < 0:
        raise ValueError(
            f"significance_threshold_pct must be >= 0, got {significance_threshold_pct}"
        )

    parsed = [e if isinstance(e, VersionEntry) else VersionEntry.model_validate(e) for e in entries]
    if not parsed:
        return []

    percentages = _resolve_percentages(parsed)

    significant: Dict[str, float] = {}
    other_percentage = 0.0
    for version, percentage in percentages.items():
        # A reported "Other" version joins the synthetic bucket
        if version == OTHER_VERSION or percentage < significance_threshold_pct:
            other_percentage += percentage
        else:
            significant[version] = percentage

    versions = list(significant)
    if other_percentage > 0:
        versions.append(OTHER_VERSION)

    colors = assign_colors(versions, reference_version)
    reference = clean_semver_version(reference_version) if reference_version else None

    buckets = []
    for position, version in enumerate(versions):
        if version == OTHER_VERSION:
            group, percentage = GROUP_OTHER, other_percentage
        else:
            percentage = significant[version]
            is_reference = reference is not None and clean_semver_version(version) == reference
            group = GROUP_REFERENCE if is_reference else GROUP_REGULAR

        buckets.append(
            VersionBucket(
                version=version,
                percentage=percentage,
                color_role=colors[version],
                sort_key=(group, percentage, position),
                is_other=version == OTHER_VERSION,
            )
        )

    buckets.sort(key=lambda bucket: bucket.sort_key)

    logger.debug(
        f"Aggregated {len(parsed)} entries into {len(buckets)} buckets "
        f"(threshold={significance_threshold_pct}%, other={other_percentage:.2f}%)"
    )
    return buckets

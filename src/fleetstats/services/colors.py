"""Channel-relative color roles for versions."""

import logging
from typing import Dict, Iterable, List, Optional

from fleetstats.models.breakdown import OTHER_VERSION
from fleetstats.models.status import ColorRole
from fleetstats.utils.semver import clean_semver_version, compare_versions, is_semver, sort_versions

logger = logging.getLogger("fleetstats.colors")

OTHER_COLOR_ROLE = ColorRole.NEUTRAL


def assign_colors(
    versions: Iterable[str], reference_version: Optional[str] = None
) -> Dict[str, ColorRole]:
    """Assign a color role to every version relative to the channel version.

    Rules, per version (build metadata is ignored):
    - no reference version: neutral
    - equal to the reference: success
    - not a semantic version (or reference isn't one): neutral
    - newer than the reference: info
    - older: rank distance from the reference in the set sorted newest
      first; 1 → warning, more → danger

    The "Other" pseudo-version is always neutral.

    Args:
        versions: Versions to color (duplicates are harmless)
        reference_version: Version currently assigned to the channel

    Returns:
        Mapping of each input version (as given) to its color role
    """
    versions = list(dict.fromkeys(versions))
    colors: Dict[str, ColorRole] = {}

    reference = clean_semver_version(reference_version) if reference_version else None
    reference_valid = reference is not None and is_semver(reference)

    ranks: Dict[str, int] = {}
    if reference_valid:
        candidates = dict.fromkeys(
            clean_semver_version(v)
            for v in versions
            if v != OTHER_VERSION and is_semver(clean_semver_version(v))
        )
        candidates[reference] = None
        ranks = _precedence_ranks(sort_versions(candidates, descending=True))

    for version in versions:
        if version == OTHER_VERSION:
            continue
        colors[version] = _color_for(clean_semver_version(version), reference, reference_valid, ranks)

    # Resolved last so a real version can never override it
    if OTHER_VERSION in versions:
        colors[OTHER_VERSION] = OTHER_COLOR_ROLE

    logger.debug(f"Assigned colors for {len(colors)} versions (reference={reference_version})")
    return colors


def _color_for(version: str, reference: Optional[str], reference_valid: bool, ranks: Dict[str, int]) -> ColorRole:
    if reference is None:
        return ColorRole.NEUTRAL
    if version == reference:
        return ColorRole.SUCCESS
    if not reference_valid or version not in ranks:
        return ColorRole.NEUTRAL

    comparison = compare_versions(version, reference)
    if comparison == 0:
        # e.g. " 1.0.0" vs "1.0.0"
        return ColorRole.SUCCESS
    if comparison > 0:
        return ColorRole.INFO

    distance = ranks[version] - ranks[reference]
    return ColorRole.WARNING if distance == 1 else ColorRole.DANGER


def _precedence_ranks(newest_first: List[str]) -> Dict[str, int]:
    """Rank versions newest first; equal precedence shares a rank."""
    ranks: Dict[str, int] = {}
    rank = -1
    previous = None
    for version in newest_first:
        if previous is None or compare_versions(version, previous) != 0:
            rank += 1
        ranks[version] = rank
        previous = version
    return ranks

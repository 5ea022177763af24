"""Instance status classification."""

import logging
from types import MappingProxyType
from typing import NamedTuple, Optional

from fleetstats.models.status import ColorRole, StatusCode, StatusDescriptor
from fleetstats.services.error_codes import decode, format_error

logger = logging.getLogger("fleetstats.classifier")


class _StatusDef(NamedTuple):
    status: str
    description: str
    color_role: ColorRole
    in_progress: bool
    explanation: str  # may reference {version}


STATUS_DEFS = MappingProxyType({
    StatusCode.UNKNOWN: _StatusDef(
        "Undefined", "Unknown", ColorRole.NEUTRAL, False, ""
    ),
    StatusCode.UPDATE_GRANTED: _StatusDef(
        "Granted",
        "Updating: granted",
        ColorRole.WARNING,
        True,
        "The instance has received an update package -version {version}- "
        "and the update process is about to start",
    ),
    StatusCode.ERROR: _StatusDef(
        "Error",
        "Error updating",
        ColorRole.DANGER,
        False,
        "The instance reported an error while updating to version {version}",
    ),
    StatusCode.COMPLETE: _StatusDef(
        "Completed",
        "Update completed",
        ColorRole.SUCCESS,
        False,
        "The instance has been updated successfully and is now running version {version}",
    ),
    StatusCode.INSTALLED: _StatusDef(
        "Installed",
        "Updating: installed",
        ColorRole.WARNING,
        True,
        "The instance has installed the update package -version {version}- "
        "but it isn't using it yet",
    ),
    StatusCode.DOWNLOADED: _StatusDef(
        "Downloaded",
        "Updating: downloaded",
        ColorRole.WARNING,
        True,
        "The instance has downloaded the update package -version {version}- "
        "and will install it now",
    ),
    StatusCode.DOWNLOADING: _StatusDef(
        "Downloading",
        "Updating: downloading",
        ColorRole.WARNING,
        True,
        "The instance has just started downloading the update package -version {version}-",
    ),
    StatusCode.ON_HOLD: _StatusDef(
        "On hold",
        "Waiting...",
        ColorRole.NEUTRAL,
        False,
        "There was an update pending for the instance but it was put on hold "
        "because of the rollout policy",
    ),
})

# Fail at import time if a StatusCode member has no definition
_missing = set(StatusCode) - set(STATUS_DEFS)
if _missing:
    raise RuntimeError(f"Missing status definitions: {sorted(_missing)}")


def resolve_status(status_code: int) -> StatusCode:
    """Map any integer to a StatusCode, UNKNOWN when out of range."""
    try:
        return StatusCode(status_code)
    except ValueError:
        return StatusCode.UNKNOWN


def classify(
    status_code: int, version: str, error_code: Optional[int] = None
) -> StatusDescriptor:
    """Build the display descriptor for an instance status report.

    Args:
        status_code: Lifecycle code reported by the instance (any integer)
        version: Version the instance reported, embedded verbatim
        error_code: Packed error code, only used for StatusCode.ERROR

    Returns:
        StatusDescriptor; unmatched codes resolve to UNKNOWN/neutral
    """
    kind = resolve_status(status_code)
    if kind is StatusCode.UNKNOWN and status_code != StatusCode.UNKNOWN:
        logger.debug(f"Unrecognized status code {status_code}, using fallback")

    definition = STATUS_DEFS[kind]
    explanation = definition.explanation.format(version=version)

    if kind is StatusCode.ERROR:
        error_text = format_error(*decode(error_code))
        if error_text:
            explanation = f"{explanation}: {error_text}"

    label = f"{definition.description} ({version})" if version else definition.description

    return StatusDescriptor(
        kind=kind,
        label=label,
        color_role=definition.color_role,
        explanation=explanation,
        status=definition.status,
        description=definition.description,
        in_progress=definition.in_progress,
    )

"""API route handlers binding the telemetry transforms to JSON endpoints."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fleetstats.api.models import (
    BreakdownRequest,
    ClassifyRequest,
    ColorsRequest,
    DecodedError,
    DecodeRequest,
    ErrorResponse,
    StatusTimelineRequest,
    SuccessResponse,
    TicksRequest,
    VersionTimelineRequest,
)
from fleetstats.config.settings import get_settings
from fleetstats.models.timeline import TIME_INTERVALS
from fleetstats.services.breakdown import aggregate
from fleetstats.services.classifier import classify
from fleetstats.services.colors import assign_colors
from fleetstats.services.error_codes import decode, format_error
from fleetstats.services.ticks import plan_ticks
from fleetstats.services.timeline import (
    status_counts_at,
    status_timeline,
    version_counts_at,
    version_timeline,
)

logger = logging.getLogger("fleetstats.api")

router = APIRouter(prefix="/api/v1.0")


def _bad_request(endpoint: str, error: ValueError) -> JSONResponse:
    logger.warning(f"Rejected {endpoint} request: {error}")
    return JSONResponse(
        status_code=200, content=ErrorResponse(code=400, msg=str(error)).model_dump()
    )


@router.post("/status/classify", response_model=SuccessResponse)
async def post_classify(request: ClassifyRequest):
    """POST /api/v1.0/status/classify - Describe an instance status report.

    Response format:
        {
            "code": 200,
            "msg": "success",
            "data": {
                "kind": 3,
                "label": "Error updating (3510.2.0)",
                "color_role": "danger",
                "explanation": "The instance reported an error ...: DownloadTransferError with ResumedFlag",
                ...
            }
        }
    """
    descriptor = classify(request.status_code, request.version, request.error_code)
    return SuccessResponse(data=descriptor.model_dump(mode="json"))


@router.post("/errors/decode", response_model=SuccessResponse)
async def post_decode(request: DecodeRequest):
    """POST /api/v1.0/errors/decode - Decode a packed error code."""
    primary, flags = decode(request.error_code)
    decoded = DecodedError(primary=primary, flags=flags, message=format_error(primary, flags))
    return SuccessResponse(data=decoded.model_dump(mode="json"))


@router.post("/versions/colors", response_model=SuccessResponse)
async def post_colors(request: ColorsRequest):
    """POST /api/v1.0/versions/colors - Color roles relative to the channel version."""
    colors = assign_colors(request.versions, request.reference_version)
    return SuccessResponse(data={version: role.value for version, role in colors.items()})


@router.post("/versions/breakdown", response_model=SuccessResponse)
async def post_breakdown(request: BreakdownRequest):
    """POST /api/v1.0/versions/breakdown - Bucketed, ordered version breakdown.

    Returns code 400 if the significance threshold is negative.
    """
    threshold = request.significance_threshold_pct
    if threshold is None:
        threshold = get_settings().significance_threshold_pct

    try:
        buckets = aggregate(request.entries, request.reference_version, threshold)
    except ValueError as e:
        return _bad_request("breakdown", e)

    return SuccessResponse(data=[bucket.model_dump(mode="json") for bucket in buckets])


@router.post("/timeline/ticks", response_model=SuccessResponse)
async def post_ticks(request: TicksRequest):
    """POST /api/v1.0/timeline/ticks - Axis ticks for a sampled series.

    Returns code 400 for an empty series or a non-positive tick count.
    """
    tick_count = request.desired_tick_count
    if tick_count is None:
        tick_count = get_settings().desired_tick_count

    try:
        ticks = plan_ticks(request.timestamps, tick_count)
    except ValueError as e:
        return _bad_request("ticks", e)

    return SuccessResponse(data=[tick.model_dump(mode="json") for tick in ticks])


@router.post("/timeline/versions", response_model=SuccessResponse)
async def post_version_timeline(request: VersionTimelineRequest):
    """POST /api/v1.0/timeline/versions - Version chart rows and breakdown."""
    chart = version_timeline(request.timeline, request.reference_version)
    breakdown = version_counts_at(chart, request.selected)
    return SuccessResponse(
        data={
            "chart": chart.model_dump(mode="json"),
            "breakdown": [entry.model_dump(mode="json") for entry in breakdown],
        }
    )


@router.post("/timeline/statuses", response_model=SuccessResponse)
async def post_status_timeline(request: StatusTimelineRequest):
    """POST /api/v1.0/timeline/statuses - Status chart rows and breakdown.

    Returns code 400 if a status key is not an integer.
    """
    try:
        chart = status_timeline(request.timeline)
        breakdown = status_counts_at(request.timeline, chart, request.selected)
    except ValueError as e:
        return _bad_request("statuses", e)

    return SuccessResponse(
        data={
            "chart": chart.model_dump(mode="json"),
            "breakdown": [entry.model_dump(mode="json") for entry in breakdown],
        }
    )


@router.get("/intervals", response_model=SuccessResponse)
async def get_intervals():
    """GET /api/v1.0/intervals - Selectable dashboard durations."""
    return SuccessResponse(
        data=[
            {
                "display_value": interval.display_value,
                "query_value": interval.query_value,
                "disabled": interval.disabled,
            }
            for interval in TIME_INTERVALS
        ]
    )

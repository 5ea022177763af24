"""Timeline models: samples, ticks, chart rows and time intervals."""

from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetstats.models.status import ColorRole


class Granularity(str, Enum):
    """What part of an instant a tick label should show."""

    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


def parse_timestamp(value) -> datetime:
    """Parse ISO 8601 timestamp strings, pass datetimes through.

    Raises:
        ValueError: If the value is neither a datetime nor an ISO 8601 string
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported timestamp: {value!r}")


class TimeSeriesSample(BaseModel):
    """A point of an evenly time-spaced sequence."""

    index: int = Field(..., ge=0, description="0-based position in the series")
    timestamp: datetime = Field(..., description="Sample instant")

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_iso8601(cls, v):
        """Parse ISO 8601 timestamp strings."""
        return parse_timestamp(v)


class Tick(BaseModel):
    """Labeled reference point on a chart time axis."""

    model_config = ConfigDict(frozen=True)

    index: float = Field(..., ge=0, description="Possibly fractional sample index")
    label: str = Field(..., description="Formatted label")
    instant: datetime = Field(..., description="Instant the tick marks")
    granularity: Granularity = Field(..., description="Granularity of the label")


class TimelineRow(BaseModel):
    """One chart row: a sample plus its per-key values."""

    index: int
    timestamp: str
    values: Dict[str, int] = Field(default_factory=dict)


class TimelineChart(BaseModel):
    """Chart-ready series with stacking keys and their colors."""

    rows: List[TimelineRow] = Field(default_factory=list)
    keys: List[str] = Field(default_factory=list)
    colors: Dict[str, ColorRole] = Field(default_factory=dict)


class VersionCount(BaseModel):
    """Per-version instance count at one timeline point."""

    version: str
    instances: int
    percentage: float = Field(..., description="Share rounded to one decimal")
    color_role: Optional[ColorRole] = None


class StatusCount(BaseModel):
    """Per-(status, version) instance count at one timeline point."""

    status: int
    label: str
    version: str
    instances: int
    color_role: ColorRole


class TimeInterval(BaseModel):
    """Selectable dashboard duration."""

    model_config = ConfigDict(frozen=True)

    display_value: str
    query_value: str
    duration: timedelta
    disabled: bool = False


TIME_INTERVALS = (
    TimeInterval(display_value="30 days", query_value="30d", duration=timedelta(days=30)),
    TimeInterval(display_value="7 days", query_value="7d", duration=timedelta(days=7)),
    TimeInterval(display_value="1 day", query_value="1d", duration=timedelta(days=1)),
    TimeInterval(display_value="1 hour", query_value="1h", duration=timedelta(hours=1)),
)

_INTERVALS_BY_QUERY = MappingProxyType({i.query_value: i for i in TIME_INTERVALS})

DEFAULT_TIME_INTERVAL = _INTERVALS_BY_QUERY["1d"]


def get_time_interval(query_value: str) -> TimeInterval:
    """Look up an interval by its query value ('30d', '7d', '1d', '1h').

    Raises:
        ValueError: If the query value is not in the catalogue
    """
    try:
        return _INTERVALS_BY_QUERY[query_value]
    except KeyError:
        known = ", ".join(_INTERVALS_BY_QUERY)
        raise ValueError(f"Unknown time interval {query_value!r} (expected one of {known})") from None

"""Status enums and models for instance update telemetry."""

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


class StatusCode(IntEnum):
    """Update lifecycle stage reported by an instance.

    Values are the wire codes sent by the reporting clients:
    granted → downloading → downloaded → installed → complete
        ↓          ↓             ↓            ↓
      error ←──────────────────────────────────
    """

    UNKNOWN = 1
    UPDATE_GRANTED = 2
    ERROR = 3
    COMPLETE = 4
    INSTALLED = 5
    DOWNLOADED = 6
    DOWNLOADING = 7
    ON_HOLD = 8


class ColorRole(str, Enum):
    """Semantic color role, mapped to a palette by the renderer."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
    NEUTRAL = "neutral"


class StatusDescriptor(BaseModel):
    """Display descriptor for a (status code, version, error code) tuple.

    Derived on demand, never persisted.
    """

    model_config = ConfigDict(frozen=True)

    kind: StatusCode = Field(..., description="Resolved lifecycle stage")
    label: str = Field(..., description="Short label with the version embedded")
    color_role: ColorRole = Field(..., description="Semantic color for the label")
    explanation: str = Field(..., description="Sentence describing the stage")
    status: str = Field(..., description="Short stage name (e.g. 'Completed')")
    description: str = Field(..., description="Stage description without version")
    in_progress: bool = Field(
        default=False, description="True while the update is still moving"
    )

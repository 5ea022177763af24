"""Version breakdown models."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fleetstats.models.status import ColorRole

OTHER_VERSION = "Other"


class VersionEntry(BaseModel):
    """One row of an upstream version breakdown.

    Example:
        {"version": "3510.2.0", "percentage": 62.5}
        {"version": "3510.2.0", "instances": 125}
    """

    version: str = Field(..., description="Version string as reported")
    percentage: Optional[float] = Field(
        None, ge=0, description="Share of the population (0-100)"
    )
    instances: Optional[int] = Field(
        None, ge=0, description="Instance count, used when percentage is absent"
    )

    @model_validator(mode="after")
    def require_percentage_or_instances(self) -> "VersionEntry":
        """An entry needs at least one measure."""
        if self.percentage is None and self.instances is None:
            raise ValueError(
                f"Version entry {self.version!r} needs a percentage or an instance count"
            )
        return self


class VersionBucket(BaseModel):
    """Aggregated, colored bucket ready for a stacked bar."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(..., description="Version, or 'Other' for the synthetic bucket")
    percentage: float = Field(..., description="Share of the population (0-100)")
    color_role: ColorRole = Field(..., description="Semantic color")
    sort_key: Tuple[int, float, int] = Field(
        ..., description="(group, percentage, input position) used for ordering"
    )
    is_other: bool = Field(default=False, description="True for the 'Other' bucket")

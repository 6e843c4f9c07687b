"""Compatibility report contract: what the model must return to be usable."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

STATS_PER_REPORT = 4


class CompatibilityStat(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    label: str = Field(..., min_length=1)
    score: float = Field(..., ge=0, le=100, strict=True)
    description: str = Field(..., min_length=1)


class CompatibilityContent(BaseModel):
    """Validated body of a compatibility report.

    Fallback reports are built from this same model, so a consumer cannot
    tell a generated report from a local one by shape.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    score: float = Field(..., ge=0, le=100, strict=True)
    title: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    stats: list[CompatibilityStat] = Field(
        ..., min_length=STATS_PER_REPORT, max_length=STATS_PER_REPORT
    )

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.schemas.compatibility import CompatibilityContent
from models.schemas.reflection import QUESTIONS_PER_SET, StructuredReflectionContent


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AIResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime = Field(default_factory=_now)


class CardInterpretationResponse(AIResponse):
    interpretation: str


class ReflectionPromptsResponse(AIResponse):
    questions: list[str] = Field(..., min_length=QUESTIONS_PER_SET, max_length=QUESTIONS_PER_SET)


class PersonalizedGuidanceResponse(AIResponse):
    guidance: str


class NorthNodeInsightResponse(AIResponse):
    insight: str
    north_node_sign: str


class StructuredReflectionResponse(StructuredReflectionContent):
    timestamp: datetime = Field(default_factory=_now)


class CompatibilityReportResponse(CompatibilityContent):
    generated_at: datetime = Field(default_factory=_now)
    report_type: str
    person_a_name: str
    person_b_name: str
    insight: str


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: str | None = None

from datetime import date, time
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class RequestKind(str, Enum):
    CARD_INTERPRETATION = "card-interpretation"
    REFLECTION_PROMPTS = "reflection-prompts"
    PERSONALIZED_GUIDANCE = "personalized-guidance"
    NORTH_NODE_INSIGHT = "north-node-insight"
    COMPATIBILITY_REPORT = "compatibility-report"
    STRUCTURED_REFLECTION = "structured-reflection"


class Payload(BaseModel):
    """Base for request payloads: camelCase on the wire, immutable once parsed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


def _date_part(value):
    # mobile clients send JS Date ISO strings ("1990-05-14T07:00:00.000Z")
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


def _time_part(value):
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[1][:5]
    return value


class BirthProfile(Payload):
    name: str | None = None
    birth_date: date | None = None
    birth_time: time | None = None
    location: str | None = None
    coordinates: Coordinates | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def normalize_birth_date(cls, value):
        return _date_part(value)

    @field_validator("birth_time", mode="before")
    @classmethod
    def normalize_birth_time(cls, value):
        return _time_part(value)


class CardInterpretationPayload(Payload):
    card_name: str = Field(..., min_length=1)
    card_keywords: list[str] = []
    hexagram_name: str = Field(..., min_length=1)
    hexagram_number: int | None = None
    focus_area: str | None = None
    user_context: str | None = Field(None, max_length=2000)


class ReflectionPromptsPayload(Payload):
    card_name: str = Field(..., min_length=1)
    card_keywords: list[str] = []
    hexagram_name: str = Field(..., min_length=1)
    focus_area: str | None = None
    previous_entries: list[str] = []


class PersonalizedGuidancePayload(Payload):
    card_name: str = Field(..., min_length=1)
    hexagram_name: str = Field(..., min_length=1)
    focus_area: str | None = None
    time_of_day: Literal["morning", "afternoon", "evening"]
    mood: str | None = None


class NorthNodeInsightPayload(Payload):
    name: str | None = None
    north_node_sign: str | None = None
    north_node_house: str | None = None
    birth_date: date | None = None
    birth_time: time | None = None
    coordinates: Coordinates | None = None
    focus_area: str | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def normalize_birth_date(cls, value):
        return _date_part(value)

    @field_validator("birth_time", mode="before")
    @classmethod
    def normalize_birth_time(cls, value):
        return _time_part(value)

    @model_validator(mode="after")
    def needs_sign_or_birth_date(self):
        if not self.north_node_sign and self.birth_date is None:
            raise ValueError("northNodeSign or birthDate is required")
        return self


class CompatibilityReportPayload(Payload):
    person_a: BirthProfile
    person_b: BirthProfile
    report_type: str = "Relationship"


class TarotReference(Payload):
    """Reference text for a tarot card, as stored by the mobile app."""

    empowered: str = ""
    neutral: str = ""
    distorted: str = ""
    spectrum_insight: str = ""


class HexagramReference(Payload):
    """Reference text for an I Ching hexagram, as stored by the mobile app."""

    number: int | str | None = None
    traditional_symbols: str = ""
    energetic_theme: str = ""
    interpretation_paragraph: str = ""
    introspective_prompt: str = ""
    action_oriented_prompt: str = ""


class StructuredReflectionPayload(Payload):
    card_name: str = Field(..., min_length=1)
    hexagram_name: str = Field(..., min_length=1)
    is_reversed: bool = False
    prompt: str | None = Field(None, max_length=20000)
    card: TarotReference | None = None
    hexagram: HexagramReference | None = None


PAYLOAD_MODELS: dict[RequestKind, type[Payload]] = {
    RequestKind.CARD_INTERPRETATION: CardInterpretationPayload,
    RequestKind.REFLECTION_PROMPTS: ReflectionPromptsPayload,
    RequestKind.PERSONALIZED_GUIDANCE: PersonalizedGuidancePayload,
    RequestKind.NORTH_NODE_INSIGHT: NorthNodeInsightPayload,
    RequestKind.COMPATIBILITY_REPORT: CompatibilityReportPayload,
    RequestKind.STRUCTURED_REFLECTION: StructuredReflectionPayload,
}


class AIRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RequestKind
    payload: Payload

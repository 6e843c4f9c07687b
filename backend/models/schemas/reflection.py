"""Reflection contracts: prompt questions and the 4-part structured reflection."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

QUESTIONS_PER_SET = 3


class ReflectionQuestions(BaseModel):
    questions: list[str] = Field(..., min_length=QUESTIONS_PER_SET, max_length=QUESTIONS_PER_SET)


class StructuredReflectionContent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    i_ching_reflection: str = Field(..., min_length=1)
    tarot_reflection: str = Field(..., min_length=1)
    synthesis: str = Field(..., min_length=1)
    reflection_prompt: str = Field(..., min_length=1)

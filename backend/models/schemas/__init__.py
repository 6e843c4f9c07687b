"""Contracts for upstream model output, checked by services.validator."""

from models.schemas.compatibility import CompatibilityContent, CompatibilityStat
from models.schemas.reflection import ReflectionQuestions, StructuredReflectionContent

__all__ = [
    "CompatibilityContent",
    "CompatibilityStat",
    "ReflectionQuestions",
    "StructuredReflectionContent",
]

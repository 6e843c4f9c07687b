"""Per-kind checks on parsed upstream output.

``validate`` is pure: it either returns the usable value for a kind or raises
ResponseValidationError. Handlers decide what to do with the error.
"""

from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from models.requests import RequestKind
from models.schemas.compatibility import CompatibilityContent
from models.schemas.reflection import (
    QUESTIONS_PER_SET,
    ReflectionQuestions,
    StructuredReflectionContent,
)
from services.errors import ResponseValidationError


def _format_errors(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in e.errors()
    )


def _validate_text(parsed: Any) -> str:
    if not isinstance(parsed, str) or not parsed.strip():
        raise ResponseValidationError("Empty text response from AI service")
    return parsed.strip()


def _validate_questions(parsed: Any) -> ReflectionQuestions:
    # JSON mode sometimes wraps the array: {"questions": [...]}
    if isinstance(parsed, dict):
        parsed = parsed.get("questions")
    if not isinstance(parsed, list):
        raise ResponseValidationError("Reflection questions must be a JSON array")

    questions = [q.strip() for q in parsed if isinstance(q, str) and q.strip()]
    if len(questions) < QUESTIONS_PER_SET:
        raise ResponseValidationError(
            "Too few reflection questions",
            details=f"expected {QUESTIONS_PER_SET}, got {len(questions)}",
        )
    return ReflectionQuestions(questions=questions[:QUESTIONS_PER_SET])


def _model_validator(model: type[BaseModel]) -> Callable[[Any], BaseModel]:
    def validate_model(parsed: Any) -> BaseModel:
        if not isinstance(parsed, dict):
            raise ResponseValidationError(f"{model.__name__} must be a JSON object")
        try:
            return model.model_validate(parsed)
        except ValidationError as e:
            raise ResponseValidationError(
                f"AI response failed {model.__name__} validation",
                details=_format_errors(e),
            ) from e

    return validate_model


_VALIDATORS: dict[RequestKind, Callable[[Any], Any]] = {
    RequestKind.CARD_INTERPRETATION: _validate_text,
    RequestKind.REFLECTION_PROMPTS: _validate_questions,
    RequestKind.PERSONALIZED_GUIDANCE: _validate_text,
    RequestKind.NORTH_NODE_INSIGHT: _validate_text,
    RequestKind.COMPATIBILITY_REPORT: _model_validator(CompatibilityContent),
    RequestKind.STRUCTURED_REFLECTION: _model_validator(StructuredReflectionContent),
}


def validate(kind: RequestKind, parsed: Any) -> Any:
    """Check ``parsed`` against the contract for ``kind``."""
    return _VALIDATORS[kind](parsed)

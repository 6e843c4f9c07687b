"""Handler registry: one handler per RequestKind, built on first use.

Follows the same pattern as the upstream client: global, lazily filled.
"""

import logging

from config import settings
from models.requests import RequestKind
from services.handlers.base import BaseContentHandler
from services.handlers.card_interpretation import CardInterpretationHandler
from services.handlers.compatibility import CompatibilityReportHandler
from services.handlers.north_node import NorthNodeInsightHandler
from services.handlers.personalized_guidance import PersonalizedGuidanceHandler
from services.handlers.reflection_prompts import ReflectionPromptsHandler
from services.handlers.structured_reflection import StructuredReflectionHandler

logger = logging.getLogger(__name__)

HANDLER_CLASSES: dict[RequestKind, type[BaseContentHandler]] = {
    RequestKind.CARD_INTERPRETATION: CardInterpretationHandler,
    RequestKind.REFLECTION_PROMPTS: ReflectionPromptsHandler,
    RequestKind.PERSONALIZED_GUIDANCE: PersonalizedGuidanceHandler,
    RequestKind.NORTH_NODE_INSIGHT: NorthNodeInsightHandler,
    RequestKind.COMPATIBILITY_REPORT: CompatibilityReportHandler,
    RequestKind.STRUCTURED_REFLECTION: StructuredReflectionHandler,
}

_missing = set(RequestKind) - set(HANDLER_CLASSES)
if _missing:
    raise RuntimeError(f"No handler registered for: {sorted(k.value for k in _missing)}")

_registry: dict[RequestKind, BaseContentHandler] = {}


def get_handler(kind: RequestKind) -> BaseContentHandler:
    """Get the handler for ``kind``, creating it on first access."""
    if kind not in _registry:
        handler = HANDLER_CLASSES[kind](fallback_enabled=kind.value in settings.fallback_kinds)
        logger.info("Handler ready: %s (fallback=%s)", kind.value, handler.has_fallback)
        _registry[kind] = handler
    return _registry[kind]


def clear() -> None:
    """Drop all handlers so settings are re-read. Useful for testing."""
    _registry.clear()

"""4-part structured reflection (I Ching, tarot, synthesis, prompt).

A local fallback exists but is off by default: a response missing any of the
four fields is raised to the router instead of being patched over.
"""

from models.requests import RequestKind, StructuredReflectionPayload
from models.responses import StructuredReflectionResponse
from models.schemas.reflection import StructuredReflectionContent
from services import prompt_builder
from services.handlers.base import BaseContentHandler


class StructuredReflectionHandler(BaseContentHandler):
    kind = RequestKind.STRUCTURED_REFLECTION
    system_prompt = prompt_builder.SYSTEM_STRUCTURED_REFLECTION
    max_tokens = 500
    json_mode = True

    def build_prompt(self, payload: StructuredReflectionPayload) -> str:
        return prompt_builder.build_structured_reflection_prompt(payload)

    def build_response(
        self, payload: StructuredReflectionPayload, content: StructuredReflectionContent
    ) -> StructuredReflectionResponse:
        return StructuredReflectionResponse(**content.model_dump())

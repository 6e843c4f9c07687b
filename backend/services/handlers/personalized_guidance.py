"""Short check-in message for the time of day."""

from models.requests import PersonalizedGuidancePayload, RequestKind
from models.responses import PersonalizedGuidanceResponse
from services import prompt_builder
from services.handlers.base import BaseContentHandler


class PersonalizedGuidanceHandler(BaseContentHandler):
    kind = RequestKind.PERSONALIZED_GUIDANCE
    system_prompt = prompt_builder.SYSTEM_PERSONALIZED_GUIDANCE
    max_tokens = 150  # 50-80 words, by instruction only

    def build_prompt(self, payload: PersonalizedGuidancePayload) -> str:
        return prompt_builder.build_personalized_guidance_prompt(payload)

    def build_response(self, payload: PersonalizedGuidancePayload, content: str) -> PersonalizedGuidanceResponse:
        return PersonalizedGuidanceResponse(guidance=content)

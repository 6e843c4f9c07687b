"""Three journaling questions for the day's draw."""

from models.requests import ReflectionPromptsPayload, RequestKind
from models.responses import ReflectionPromptsResponse
from models.schemas.reflection import ReflectionQuestions
from services import prompt_builder
from services.handlers.base import BaseContentHandler


class ReflectionPromptsHandler(BaseContentHandler):
    kind = RequestKind.REFLECTION_PROMPTS
    system_prompt = prompt_builder.SYSTEM_REFLECTION_PROMPTS
    max_tokens = 300
    temperature = 0.8
    json_mode = True

    def build_prompt(self, payload: ReflectionPromptsPayload) -> str:
        return prompt_builder.build_reflection_prompts_prompt(payload)

    def build_response(
        self, payload: ReflectionPromptsPayload, content: ReflectionQuestions
    ) -> ReflectionPromptsResponse:
        return ReflectionPromptsResponse(questions=content.questions)

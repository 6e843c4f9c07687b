"""Free-text interpretation of a tarot card + I Ching hexagram pairing."""

from models.requests import CardInterpretationPayload, RequestKind
from models.responses import CardInterpretationResponse
from services import prompt_builder
from services.handlers.base import BaseContentHandler


class CardInterpretationHandler(BaseContentHandler):
    kind = RequestKind.CARD_INTERPRETATION
    system_prompt = prompt_builder.SYSTEM_CARD_INTERPRETATION
    max_tokens = 400

    def build_prompt(self, payload: CardInterpretationPayload) -> str:
        return prompt_builder.build_card_interpretation_prompt(payload)

    def build_response(self, payload: CardInterpretationPayload, content: str) -> CardInterpretationResponse:
        return CardInterpretationResponse(interpretation=content)

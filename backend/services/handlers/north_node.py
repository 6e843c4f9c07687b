"""North Node reading from a known sign or from birth data."""

from models.requests import NorthNodeInsightPayload, RequestKind
from models.responses import NorthNodeInsightResponse
from services import astrology, prompt_builder
from services.handlers.base import BaseContentHandler


def resolve_north_node_sign(payload: NorthNodeInsightPayload) -> str:
    if payload.north_node_sign:
        return payload.north_node_sign
    north, _ = astrology.node_signs(payload.birth_date, payload.birth_time)
    return north


class NorthNodeInsightHandler(BaseContentHandler):
    kind = RequestKind.NORTH_NODE_INSIGHT
    system_prompt = prompt_builder.SYSTEM_NORTH_NODE
    max_tokens = 300

    def build_prompt(self, payload: NorthNodeInsightPayload) -> str:
        return prompt_builder.build_north_node_prompt(payload, resolve_north_node_sign(payload))

    def build_response(self, payload: NorthNodeInsightPayload, content: str) -> NorthNodeInsightResponse:
        return NorthNodeInsightResponse(
            insight=content,
            north_node_sign=resolve_north_node_sign(payload),
        )

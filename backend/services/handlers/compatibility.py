"""Compatibility report for two birth profiles.

Each participant with a birth date is annotated with North/South Node signs
before prompting. The insight line is derived locally for generated and
fallback reports alike.
"""

import logging

from models.requests import BirthProfile, CompatibilityReportPayload, RequestKind
from models.responses import CompatibilityReportResponse
from models.schemas.compatibility import CompatibilityContent
from services import astrology, fallbacks, prompt_builder
from services.handlers.base import BaseContentHandler

logger = logging.getLogger(__name__)


def _nodes(person: BirthProfile) -> tuple[str, str] | None:
    if person.birth_date is None:
        return None
    return astrology.node_signs(person.birth_date, person.birth_time)


class CompatibilityReportHandler(BaseContentHandler):
    kind = RequestKind.COMPATIBILITY_REPORT
    system_prompt = prompt_builder.SYSTEM_COMPATIBILITY
    max_tokens = 900
    json_mode = True

    def build_prompt(self, payload: CompatibilityReportPayload) -> str:
        a_nodes = _nodes(payload.person_a)
        b_nodes = _nodes(payload.person_b)
        logger.debug("Node signs: A=%s B=%s", a_nodes, b_nodes)
        return prompt_builder.build_compatibility_prompt(payload, a_nodes, b_nodes)

    def build_response(
        self, payload: CompatibilityReportPayload, content: CompatibilityContent
    ) -> CompatibilityReportResponse:
        a, b = fallbacks.participant_names(payload)
        return CompatibilityReportResponse(
            **content.model_dump(),
            report_type=payload.report_type,
            person_a_name=a,
            person_b_name=b,
            insight=fallbacks.compatibility_insight(payload, content.score),
        )

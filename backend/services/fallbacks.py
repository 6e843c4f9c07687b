"""Local, network-free substitutes for upstream output.

Each builder returns the same type ``validator.validate`` returns for its
kind, so a fallback is indistinguishable from generated output by shape.
Randomness comes only from the ``rng`` argument.
"""

import random
from datetime import date
from typing import Any, Callable

from models.requests import (
    CardInterpretationPayload,
    CompatibilityReportPayload,
    NorthNodeInsightPayload,
    PersonalizedGuidancePayload,
    ReflectionPromptsPayload,
    RequestKind,
    StructuredReflectionPayload,
)
from models.schemas.compatibility import STATS_PER_REPORT, CompatibilityContent, CompatibilityStat
from models.schemas.reflection import ReflectionQuestions, StructuredReflectionContent

FALLBACK_SCORE_MIN = 65
FALLBACK_SCORE_MAX = 85
KARMIC = "karmic"

GUIDANCE_FALLBACK = "Take a moment to breathe and connect with your inner wisdom today."
NORTH_NODE_FALLBACK = (
    "We're unable to generate your North Node insight right now. Your North Node "
    "points toward growth that feels unfamiliar at first; notice where life asks you "
    "to stretch, and check back soon for a fuller reading."
)

# (label, category, description template)
STAT_POOL: list[tuple[str, str, str]] = [
    (
        "Emotional Harmony",
        "emotional",
        "{a} and {b} share a natural emotional rhythm that allows for deep "
        "understanding and mutual support.",
    ),
    (
        "Communication Flow",
        "communication",
        "Conversations between {a} and {b} flow with ease, each bringing a "
        "perspective that enriches the other.",
    ),
    (
        "Creative Synergy",
        "creative",
        "Together, {a} and {b} inspire each other to explore new creative "
        "territory and bring out hidden talents.",
    ),
    (
        "Long-term Potential",
        "growth",
        "This connection has the ingredients for lasting significance, deepening "
        "with time and weathering challenges with grace.",
    ),
    (
        "Shared Values",
        "values",
        "{a} and {b} tend to want the same things from life, which gives the bond "
        "a steady foundation.",
    ),
    (
        "Karmic Bond",
        KARMIC,
        "There is a sense that {a} and {b} have met before; their paths cross to "
        "finish something left open.",
    ),
    (
        "Soul Lessons",
        KARMIC,
        "Each mirrors what the other is here to learn, turning friction between "
        "{a} and {b} into growth.",
    ),
]

SEASON_PHRASES = {
    "spring": "the renewing energy of spring",
    "summer": "the warmth of summer",
    "autumn": "the reflective light of autumn",
    "winter": "the quiet depth of winter",
}


# ---------------------------------------------------------------------------
# Text and question fallbacks
# ---------------------------------------------------------------------------

def card_interpretation(payload: CardInterpretationPayload, rng: random.Random) -> str:
    return (
        f"Unable to generate a full interpretation right now. Sit for a moment with "
        f"{payload.card_name} and {payload.hexagram_name}, and notice what each is "
        f"asking of you today."
    )


def reflection_prompts(payload: ReflectionPromptsPayload, rng: random.Random) -> ReflectionQuestions:
    keyword = payload.card_keywords[0].lower() if payload.card_keywords else "growth"
    focus = (payload.focus_area or "life").lower()
    return ReflectionQuestions(questions=[
        f"What space could {keyword} open up in your {focus} today?",
        f"Where in your {focus} are you being invited to embrace {keyword}?",
        f"How might the wisdom of {payload.hexagram_name} help you carry {keyword} into daily life?",
    ])


def personalized_guidance(payload: PersonalizedGuidancePayload, rng: random.Random) -> str:
    return GUIDANCE_FALLBACK


def north_node_insight(payload: NorthNodeInsightPayload, rng: random.Random) -> str:
    return NORTH_NODE_FALLBACK


def structured_reflection(
    payload: StructuredReflectionPayload, rng: random.Random
) -> StructuredReflectionContent:
    theme = (payload.hexagram.energetic_theme if payload.hexagram else "").lower() or "change"
    empowered = payload.card.empowered if payload.card else ""
    quality = empowered.split(",")[0].strip().lower() or "growth"
    state = "shadow" if payload.is_reversed else "empowered"
    card_short = payload.card_name.removeprefix("The ").lower()

    return StructuredReflectionContent(
        i_ching_reflection=(
            f"{payload.hexagram_name} speaks to the energy of {theme}, inviting you to "
            f"embrace its wisdom in your current situation."
        ),
        tarot_reflection=(
            f"{payload.card_name} in its {state} state encourages you to explore themes "
            f"of {quality} and inner transformation."
        ),
        synthesis=(
            f"The convergence of {payload.card_name} and {payload.hexagram_name} creates "
            f"a reflection on your current journey. It invites you to explore how the "
            f"energy of {theme} can guide your understanding of {quality}. Together they "
            f"offer insight into where you are and where you're being called to grow."
        ),
        reflection_prompt=(
            f"How might you honor both the energy of {card_short} and the wisdom of "
            f"{payload.hexagram_name.lower()} in your life today?"
        ),
    )


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------

def participant_names(payload: CompatibilityReportPayload) -> tuple[str, str]:
    return payload.person_a.name or "Person A", payload.person_b.name or "Person B"


def season_for(birth_date: date | None) -> str | None:
    if birth_date is None:
        return None
    month = birth_date.month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def compatibility_adjective(score: float) -> str:
    if score >= 80:
        return "exceptional"
    if score >= 70:
        return "strong"
    if score >= 60:
        return "promising"
    return "complex but meaningful"


def compatibility_insight(payload: CompatibilityReportPayload, score: float) -> str:
    """Insight line derived from person A's birth season and the overall score."""
    a, b = participant_names(payload)
    season = season_for(payload.person_a.birth_date)
    origin = f"Born under {SEASON_PHRASES[season]}" if season else "Guided by their own stars"
    return (
        f"{origin}, {a} meets {b} in a {payload.report_type.lower()} with "
        f"{compatibility_adjective(score)} compatibility, rich with opportunities "
        f"for mutual growth and understanding."
    )


def _select_stats(rng: random.Random) -> list[tuple[str, str, str]]:
    chosen = rng.sample(STAT_POOL, STATS_PER_REPORT)
    if not any(category == KARMIC for _, category, _ in chosen) and rng.random() < 0.5:
        karmic = [stat for stat in STAT_POOL if stat[1] == KARMIC]
        chosen[rng.randrange(STATS_PER_REPORT)] = rng.choice(karmic)
    return chosen


def compatibility_report(payload: CompatibilityReportPayload, rng: random.Random) -> CompatibilityContent:
    a, b = participant_names(payload)
    report = payload.report_type.lower()
    score = rng.randint(FALLBACK_SCORE_MIN, FALLBACK_SCORE_MAX)

    stats = [
        CompatibilityStat(
            label=label,
            score=max(0, min(100, score + rng.randint(-5, 4))),
            description=template.format(a=a, b=b),
        )
        for label, _, template in _select_stats(rng)
    ]

    return CompatibilityContent(
        score=score,
        title=f"{a} & {b}: A Cosmic Connection",
        summary=(
            f"The stars have woven an intricate pattern between {a} and {b}. Their "
            f"connection offers a balance of challenge and harmony, and this {report} "
            f"holds the potential for deep understanding, mutual growth, and shared "
            f"adventures."
        ),
        stats=stats,
    )


_FALLBACKS: dict[RequestKind, Callable[[Any, random.Random], Any]] = {
    RequestKind.CARD_INTERPRETATION: card_interpretation,
    RequestKind.REFLECTION_PROMPTS: reflection_prompts,
    RequestKind.PERSONALIZED_GUIDANCE: personalized_guidance,
    RequestKind.NORTH_NODE_INSIGHT: north_node_insight,
    RequestKind.COMPATIBILITY_REPORT: compatibility_report,
    RequestKind.STRUCTURED_REFLECTION: structured_reflection,
}


def fallback(kind: RequestKind, payload: Any, rng: random.Random | None = None) -> Any:
    """Build the local substitute for ``kind`` from the original payload."""
    return _FALLBACKS[kind](payload, rng or random.Random())

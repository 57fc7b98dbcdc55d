"""Tone guidance for whole scripts and improvement focus for single blocks."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .scale import clamp_score


class ToneBand(BaseModel):
    """Closed score range mapped to a writing-tone recommendation."""

    model_config = ConfigDict(frozen=True)

    low: float
    high: float
    tone_label: str
    action_hint: str

    def contains(self, score: float) -> bool:
        return self.low <= score <= self.high


class BlockImprovementRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    focus: str


TONE_BANDS: Tuple[ToneBand, ...] = (
    ToneBand(
        low=0.0,
        high=5.9,
        tone_label="Direct and provocative",
        action_hint="Rewrite the weak blocks: open with a sharper hook and close with an explicit call to action.",
    ),
    ToneBand(
        low=6.0,
        high=7.4,
        tone_label="Clear and explanatory",
        action_hint="Clarify the main benefit and tighten the conflict before publishing.",
    ),
    ToneBand(
        low=7.5,
        high=8.9,
        tone_label="Confident and emotional",
        action_hint="Fine-tune the blocks scoring below 8.5 and reinforce the emotional connection.",
    ),
    ToneBand(
        low=9.0,
        high=10.0,
        tone_label="Authoritative and inspiring",
        action_hint="Keep the current tone; the script is ready to publish.",
    ),
)

DEFAULT_TONE_BAND = TONE_BANDS[1]

HOOK_FOCUS = "Make the opening hook more striking with a rhetorical question or a surprising figure"
CONFLICT_FOCUS = "Make the pain point specific so the audience recognises their own problem"
TURN_FOCUS = "Show the concrete result the audience can expect once the problem is solved"
ENDING_FOCUS = "Strengthen the call to action with urgency or what the viewer loses by waiting"
GENERIC_FOCUS = "Optimize clarity and impact"

# Order matters for the substring fallback
IMPROVEMENT_RULES: Tuple[BlockImprovementRule, ...] = (
    BlockImprovementRule(key="gancho", focus=HOOK_FOCUS),
    BlockImprovementRule(key="hook", focus=HOOK_FOCUS),
    BlockImprovementRule(key="identifica", focus=HOOK_FOCUS),
    BlockImprovementRule(key="conflito", focus=CONFLICT_FOCUS),
    BlockImprovementRule(key="conflict", focus=CONFLICT_FOCUS),
    BlockImprovementRule(key="virada", focus=TURN_FOCUS),
    BlockImprovementRule(key="turn", focus=TURN_FOCUS),
    BlockImprovementRule(key="final", focus=ENDING_FOCUS),
    BlockImprovementRule(key="cta", focus=ENDING_FOCUS),
    BlockImprovementRule(key="ending", focus=ENDING_FOCUS),
)

_RULES_BY_KEY = {rule.key: rule for rule in IMPROVEMENT_RULES}


def normalise_score(score: float) -> float:
    """Clamp and round half-up to the table's one-decimal resolution."""
    clamped = clamp_score(score, "tone score")
    return float(Decimal(str(clamped)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def tone_for_score(score: float) -> ToneBand:
    """Return the tone band covering the overall script score."""
    value = normalise_score(score)
    for band in TONE_BANDS:
        if band.contains(value):
            return band

    # Unreachable while the table covers [0, 10]; a hit means a boundary bug
    logger.error(f"No tone band covers score {value}, falling back to '{DEFAULT_TONE_BAND.tone_label}'")
    return DEFAULT_TONE_BAND


def improvement_focus(label: str) -> str:
    """
    Resolve a block name to the aspect worth improving.

    Lookup is exact key first, then the first rule whose key occurs inside
    the label, then a generic hint. Case, emoji and surrounding words are
    tolerated ("💡 Gancho Inicial" resolves like "gancho").
    """
    normalised = (label or "").strip().lower()
    if not normalised:
        return GENERIC_FOCUS

    rule = _RULES_BY_KEY.get(normalised)
    if rule is not None:
        return rule.focus

    for rule in IMPROVEMENT_RULES:
        if rule.key in normalised:
            return rule.focus

    logger.debug(f"No improvement rule for block '{label}', using generic focus")
    return GENERIC_FOCUS

"""Qualitative reading of validation scores."""

from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict

from .scale import clamp_score
from .tone import ToneBand, tone_for_score
from .validation import CRITERIA, ValidationResult


class ScoreColor(str, Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    EXCELLENT = "excellent"


class ScoreBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: ScoreColor
    label: str


# (exclusive upper bound, band); scores from 8 up to 10 are excellent
QUALITY_BANDS: Tuple[Tuple[float, ScoreBand], ...] = (
    (4.0, ScoreBand(color=ScoreColor.LOW, label="Needs improvement")),
    (6.0, ScoreBand(color=ScoreColor.MID, label="Regular")),
    (8.0, ScoreBand(color=ScoreColor.HIGH, label="Good")),
)
TOP_BAND = ScoreBand(color=ScoreColor.EXCELLENT, label="Excellent")

QUALITY_DESCRIPTORS: Dict[ScoreColor, str] = {
    ScoreColor.LOW: "The script needs a substantial rewrite before it can be used.",
    ScoreColor.MID: "The script works but several blocks need improvement.",
    ScoreColor.HIGH: "Good script; a few adjustments will make it stronger.",
    ScoreColor.EXCELLENT: "Excellent script, ready to record.",
}


class ScoreReport(BaseModel):
    """Bands for each criterion and the total, plus tone guidance."""

    model_config = ConfigDict(frozen=True)

    criteria: Dict[str, ScoreBand]
    total: ScoreBand
    descriptor: str
    tone: ToneBand


def band_score(score: float) -> ScoreBand:
    """Quality band with boundaries at 4, 6 and 8."""
    value = clamp_score(score)
    for upper, band in QUALITY_BANDS:
        if value < upper:
            return band
    return TOP_BAND


def quality_descriptor(total: float) -> str:
    return QUALITY_DESCRIPTORS[band_score(total).color]


def interpret_validation(result: ValidationResult) -> ScoreReport:
    return ScoreReport(
        criteria={name: band_score(result.criterion(name)) for name in CRITERIA},
        total=band_score(result.total),
        descriptor=quality_descriptor(result.total),
        tone=tone_for_score(result.total),
    )

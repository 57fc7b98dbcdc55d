from .scale import clamp_score
from .tone import ToneBand, TONE_BANDS, tone_for_score, improvement_focus
from .validation import (
    ValidationResult,
    ValidationStore,
    BlockScore,
    StructuredVerdict,
    block_scores,
    coerce_validation,
    criterion_suggestions,
    structured_verdict,
)
from .interpret import ScoreBand, ScoreColor, ScoreReport, band_score, interpret_validation, quality_descriptor

__all__ = [
    "clamp_score",
    "ToneBand", "TONE_BANDS", "tone_for_score", "improvement_focus",
    "ValidationResult", "ValidationStore", "BlockScore", "StructuredVerdict",
    "block_scores", "coerce_validation", "criterion_suggestions", "structured_verdict",
    "ScoreBand", "ScoreColor", "ScoreReport", "band_score", "interpret_validation", "quality_descriptor",
]

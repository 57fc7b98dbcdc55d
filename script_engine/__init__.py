from .parsing import (
    NarrativeStage,
    ScriptDocument,
    Section,
    SectionKind,
    extract_metadata,
    has_canonical_structure,
    parse_script,
    segment_script,
)
from .scoring import (
    ToneBand,
    ValidationResult,
    ValidationStore,
    band_score,
    improvement_focus,
    interpret_validation,
    tone_for_score,
)
from .adaptation import AdaptationSession, AdaptationResult, BatchStatus, ADAPTATION_THRESHOLD

__version__ = "0.1.0"

__all__ = [
    "NarrativeStage",
    "ScriptDocument",
    "Section",
    "SectionKind",
    "extract_metadata",
    "has_canonical_structure",
    "parse_script",
    "segment_script",
    "ToneBand",
    "ValidationResult",
    "ValidationStore",
    "band_score",
    "improvement_focus",
    "interpret_validation",
    "tone_for_score",
    "AdaptationSession",
    "AdaptationResult",
    "BatchStatus",
    "ADAPTATION_THRESHOLD",
]

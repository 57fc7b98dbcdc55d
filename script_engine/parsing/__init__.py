from .labels import NarrativeStage, StageMatcher, STAGE_ORDER, garbled_variants
from .metadata import ExtractedMetadata, extract_metadata
from .structure import has_canonical_structure
from .segment import QuotedRun, ScriptSegmenter, Section, SectionKind, segment_script
from .document import ScriptDocument, ScriptParser, parse_directory, parse_script
from .render import render_text

__all__ = [
    "NarrativeStage",
    "StageMatcher",
    "STAGE_ORDER",
    "garbled_variants",
    "ExtractedMetadata",
    "extract_metadata",
    "has_canonical_structure",
    "QuotedRun",
    "ScriptSegmenter",
    "Section",
    "SectionKind",
    "segment_script",
    "ScriptDocument",
    "ScriptParser",
    "parse_directory",
    "parse_script",
    "render_text",
]

"""Composition of the parsing passes into one document."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict

from ..config import ParsingConfig
from ..utils.progress import process_files
from .labels import NarrativeStage, StageMatcher
from .metadata import ExtractedMetadata, extract_metadata
from .segment import ScriptSegmenter, Section, SectionKind
from .structure import has_canonical_structure


class ScriptDocument(BaseModel):
    """Structured, renderer-agnostic view of a generated script."""

    model_config = ConfigDict(frozen=True)

    metadata: ExtractedMetadata
    has_canonical_structure: bool
    sections: Tuple[Section, ...] = ()

    @property
    def structured(self) -> bool:
        return any(s.kind == SectionKind.STAGE_BLOCK for s in self.sections)

    def stage_sections(self) -> Dict[NarrativeStage, Section]:
        """Stage blocks keyed by stage, in canonical order."""
        return {s.stage: s for s in self.sections if s.kind == SectionKind.STAGE_BLOCK}

    def stage_text(self, stage: NarrativeStage) -> Optional[str]:
        section = self.stage_sections().get(stage)
        return section.text if section else None

    def sections_of(self, kind: SectionKind) -> List[Section]:
        return [s for s in self.sections if s.kind == kind]


class ScriptParser:
    """Runs metadata extraction, structure classification and segmentation."""

    def __init__(self, config: Optional[ParsingConfig] = None):
        self.config = config or ParsingConfig()
        self.matcher = StageMatcher(self.config.extra_stage_aliases)
        self.segmenter = ScriptSegmenter(self.matcher)

    def parse(self, raw: str) -> ScriptDocument:
        raw = raw or ""
        return ScriptDocument(
            metadata=extract_metadata(raw, default_title=self.config.default_title),
            has_canonical_structure=has_canonical_structure(raw, self.matcher),
            sections=tuple(self.segmenter.segment(raw)),
        )

    def parse_file(self, file_path: Path) -> ScriptDocument:
        logger.info(f"Parsing script: {file_path.name}")
        with open(file_path, "r", encoding="utf-8") as f:
            return self.parse(f.read())


def parse_script(raw: str, config: Optional[ParsingConfig] = None) -> ScriptDocument:
    """Parse ``raw`` into a ScriptDocument."""
    return ScriptParser(config).parse(raw)


def parse_directory(
    input_dir: Path,
    output_file: Path,
    config: Optional[ParsingConfig] = None,
) -> int:
    """
    Parse every ``.txt`` script in a directory into a JSONL file.

    Returns:
        Number of documents written
    """
    parser = ScriptParser(config)
    files = sorted(input_dir.glob("*.txt"))
    logger.info(f"Parsing {len(files)} scripts from {input_dir}")

    def parse_one(file_path: Path) -> dict:
        document = parser.parse_file(file_path)
        record = document.model_dump(mode="json")
        record["source"] = file_path.name
        return record

    records, _ = process_files(files, parse_one)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        for record in records:
            json.dump(record, f, ensure_ascii=False)
            f.write("\n")

    logger.success(f"Wrote {len(records)} parsed scripts to {output_file}")
    return len(records)

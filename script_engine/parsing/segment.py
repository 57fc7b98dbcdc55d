import re
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .labels import (
    CLOSING_PATTERN,
    DEFAULT_MATCHER,
    LEGEND_PATTERN,
    METADATA_PATTERN,
    STAGE_ORDER,
    NarrativeStage,
    StageMatcher,
)
from .metadata import find_title

PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

# Straight or curly double quotes; the run spans the quote marks
QUOTE_PATTERN = re.compile(r'"([^"]+)"|“([^”]+)”')


class SectionKind(str, Enum):
    TITLE_BANNER = "title_banner"
    METADATA_BANNER = "metadata_banner"
    STRUCTURE_LEGEND = "structure_legend"
    STAGE_BLOCK = "stage_block"
    CLOSING_NOTE = "closing_note"
    PLAIN = "plain"


class QuotedRun(BaseModel):
    """A spoken line inside a stage block.

    ``start``/``end`` are offsets into the section text covering the quote
    marks; ``text`` is the line without them.
    """

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str


class Section(BaseModel):
    """One classified paragraph of a script."""

    model_config = ConfigDict(frozen=True)

    index: int
    kind: SectionKind
    text: str
    stage: Optional[NarrativeStage] = None
    title: Optional[str] = None
    lines: Tuple[str, ...] = ()
    quotes: Tuple[QuotedRun, ...] = ()


def split_paragraphs(raw: str) -> List[str]:
    """Split on blank lines, dropping empty paragraphs."""
    if not raw:
        return []
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = (p.strip() for p in PARAGRAPH_BREAK.split(text))
    return [p for p in paragraphs if p]


def find_quotes(text: str) -> Tuple[QuotedRun, ...]:
    runs = []
    for match in QUOTE_PATTERN.finditer(text):
        inner = match.group(1) if match.group(1) is not None else match.group(2)
        runs.append(QuotedRun(start=match.start(), end=match.end(), text=inner.strip()))
    return tuple(runs)


class ScriptSegmenter:
    """Splits generated scripts into classified paragraph sections."""

    def __init__(self, matcher: Optional[StageMatcher] = None):
        """
        Args:
            matcher: Stage label matcher (defaults to the built-in labels)
        """
        self.matcher = matcher or DEFAULT_MATCHER

    def assign_stages(self, paragraphs: List[str]) -> Dict[int, NarrativeStage]:
        """
        Map paragraph positions to the stage each one opens.

        Paragraphs opening with a stage label ("🟩 Virada") are tried first,
        so a label mentioned in the title or metadata cannot take a stage
        from its real block. Failing that, each stage is claimed by the
        first paragraph mentioning it that has not already claimed another
        stage. Anything other than exactly the four stages in canonical
        order is treated as unstructured.

        Returns:
            Dict of paragraph index -> stage, empty when unstructured
        """
        claimed = self._claim(paragraphs, self.matcher.heading_stages)
        if not self._canonical(claimed):
            claimed = self._claim(paragraphs, self.matcher.stages_in)

        if len(claimed) != len(STAGE_ORDER):
            if claimed:
                logger.warning(
                    f"Partial structure ({len(claimed)}/{len(STAGE_ORDER)} stages in separate paragraphs), "
                    "treating as unstructured"
                )
            return {}

        positions = [claimed[stage] for stage in STAGE_ORDER]
        if positions != sorted(positions):
            logger.warning("Stage blocks out of canonical order, treating as unstructured")
            return {}

        return {index: stage for stage, index in claimed.items()}

    @staticmethod
    def _claim(
        paragraphs: List[str], locate: Callable[[str], List[NarrativeStage]]
    ) -> Dict[NarrativeStage, int]:
        claimed: Dict[NarrativeStage, int] = {}
        for index, paragraph in enumerate(paragraphs):
            if LEGEND_PATTERN.search(paragraph):
                continue
            available = [s for s in locate(paragraph) if s not in claimed]
            if available:
                claimed[available[0]] = index
        return claimed

    @staticmethod
    def _canonical(claimed: Dict[NarrativeStage, int]) -> bool:
        if len(claimed) != len(STAGE_ORDER):
            return False
        positions = [claimed[stage] for stage in STAGE_ORDER]
        return positions == sorted(positions)

    def segment(self, raw: str) -> List[Section]:
        """
        Classify every paragraph of ``raw`` exactly once, in source order.

        Returns:
            List of Section, empty for empty input
        """
        paragraphs = split_paragraphs(raw)
        if not paragraphs:
            return []

        labelled = self.matcher.has_all(raw)
        stage_for = self.assign_stages(paragraphs) if labelled else {}

        sections = []
        title_claimed = False
        metadata_claimed = False

        for index, paragraph in enumerate(paragraphs):
            title = None if title_claimed else find_title(paragraph)

            if labelled and LEGEND_PATTERN.search(paragraph):
                section = Section(index=index, kind=SectionKind.STRUCTURE_LEGEND, text=paragraph)
            elif index in stage_for:
                section = Section(
                    index=index,
                    kind=SectionKind.STAGE_BLOCK,
                    text=paragraph,
                    stage=stage_for[index],
                    quotes=find_quotes(paragraph),
                )
            elif title is not None:
                section = Section(
                    index=index, kind=SectionKind.TITLE_BANNER, text=paragraph, title=title
                )
                title_claimed = True
            elif not metadata_claimed and METADATA_PATTERN.search(paragraph):
                lines = tuple(
                    line.strip() for line in paragraph.splitlines() if METADATA_PATTERN.search(line)
                )
                section = Section(
                    index=index, kind=SectionKind.METADATA_BANNER, text=paragraph, lines=lines
                )
                metadata_claimed = True
            elif CLOSING_PATTERN.search(paragraph):
                section = Section(index=index, kind=SectionKind.CLOSING_NOTE, text=paragraph)
            else:
                section = Section(index=index, kind=SectionKind.PLAIN, text=paragraph)
            sections.append(section)

        logger.debug(
            f"Segmented script into {len(sections)} sections ({len(stage_for)} stage blocks)"
        )
        return sections


_DEFAULT_SEGMENTER = ScriptSegmenter()


def segment_script(raw: str) -> List[Section]:
    """Segment ``raw`` with the built-in labels."""
    return _DEFAULT_SEGMENTER.segment(raw)

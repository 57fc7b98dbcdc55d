"""Plain-text rendering of parsed scripts.

Works only from Section data; the raw script is never re-read.
"""

from typing import List

from .document import ScriptDocument
from .segment import Section, SectionKind


def _render_stage(section: Section) -> List[str]:
    lines = [f"## {section.stage.display_name}"]
    cursor = 0
    body = []
    for run in section.quotes:
        narration = section.text[cursor:run.start].strip()
        if narration:
            body.append(narration)
        body.append(f"    > {run.text}")
        cursor = run.end
    tail = section.text[cursor:].strip()
    if tail:
        body.append(tail)
    return lines + body


def render_section(section: Section) -> List[str]:
    if section.kind == SectionKind.TITLE_BANNER:
        return [section.title.upper(), "=" * len(section.title)]
    if section.kind == SectionKind.METADATA_BANNER:
        return [f"- {line}" for line in section.lines]
    if section.kind == SectionKind.STRUCTURE_LEGEND:
        return ["Identificação → Conflito → Virada → Final Marcante"]
    if section.kind == SectionKind.STAGE_BLOCK:
        return _render_stage(section)
    if section.kind == SectionKind.CLOSING_NOTE:
        return ["---", section.text]
    return [section.text]


def render_text(document: ScriptDocument) -> str:
    """Render a document as plain text, one blank line between sections."""
    return "\n\n".join("\n".join(render_section(s)) for s in document.sections)

"""Descriptive metadata embedded in generated scripts."""

import re
from typing import Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .labels import LEGEND_PATTERN, OBJECTIVES, literal_pattern, spellings

DEFAULT_TITLE = "Roteiro"

# "Roteiro sobre Laser X", "🎬 Script: Laser X", "Roteiro Laser X"
TITLE_PATTERN = re.compile(
    r"^[^\w\n]*(?:roteiro|script)\b(?:[ \t]*:|[^\n:]*?\b(?:sobre|about)\b[ \t]*:?)?[ \t]*([^\n:]+)",
    re.IGNORECASE | re.MULTILINE,
)

CONTENT_TYPE_PATTERN = re.compile(
    "(?:"
    + "|".join(literal_pattern(form) for label in ("Tipo de Conteúdo", "Content Type") for form in spellings(label))
    + r")\s*:[ \t]*([^\n]+)",
    re.IGNORECASE,
)


def _objective_pattern(emoji: str, phrase: str) -> re.Pattern:
    emojis = "|".join(re.escape(form) for form in spellings(emoji))
    phrases = "|".join(literal_pattern(form) for form in spellings(phrase))
    return re.compile(rf"(?:(?:{emojis})\s*)?(?:{phrases})")


OBJECTIVE_RULES = tuple(
    (f"{emoji} {phrase}", _objective_pattern(emoji, phrase)) for emoji, phrase in OBJECTIVES
)


class ExtractedMetadata(BaseModel):
    """Typed fields pulled out of a raw script."""

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    objective: str = ""
    content_type: str = ""


def find_title(text: str) -> Optional[str]:
    """Return the title captured from the first title line, or None.

    The structure legend ("Roteiro com estrutura Disney: ...") names the
    template, not the script, and is skipped.
    """
    for match in TITLE_PATTERN.finditer(text):
        line_start = text.rfind("\n", 0, match.start(1)) + 1
        line_end = text.find("\n", match.start(1))
        line = text[line_start:] if line_end == -1 else text[line_start:line_end]
        if LEGEND_PATTERN.search(line):
            continue
        title = match.group(1).strip()
        if title:
            return title
    return None


def find_objective(text: str) -> str:
    """Canonical phrase of the objective appearing earliest in ``text``."""
    best, best_start = "", None
    # Ties at the same offset go to the earlier rule
    for canonical, pattern in OBJECTIVE_RULES:
        match = pattern.search(text)
        if match and (best_start is None or match.start() < best_start):
            best, best_start = canonical, match.start()
    return best


def find_content_type(text: str) -> str:
    match = CONTENT_TYPE_PATTERN.search(text)
    return match.group(1).strip() if match else ""


def extract_metadata(raw: str, default_title: str = DEFAULT_TITLE) -> ExtractedMetadata:
    """Extract title, marketing objective and content type from ``raw``.

    Never raises; anything missing falls back to the default title or the
    empty string.
    """
    if not raw or not raw.strip():
        return ExtractedMetadata(title=default_title)

    title = find_title(raw)
    if title is None:
        logger.debug("No title line found, using placeholder")

    return ExtractedMetadata(
        title=title or default_title,
        objective=find_objective(raw),
        content_type=find_content_type(raw),
    )

"""
Marker vocabulary for generated scripts.

Upstream text is Portuguese and is sometimes delivered with its UTF-8
bytes decoded through a Windows code page, so "Identificação" can arrive
as "IdentificaÃ§Ã£o" and "🟦" as "ğŸŸ¦". Every label here is matched in its
canonical form and in those mis-decoded forms.
"""

import re
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

from loguru import logger


# Code pages whose mis-decoding of UTF-8 has been seen in generated output
GARBLING_ENCODINGS = ("cp1252", "cp1254", "latin-1")


class NarrativeStage(str, Enum):
    """The four-part storytelling template, in canonical order."""

    IDENTIFICATION = "identification"
    CONFLICT = "conflict"
    TURN = "turn"
    MEMORABLE_ENDING = "memorable_ending"

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)

    @property
    def block_key(self) -> str:
        """Block name used by the scoring service and improvement rules."""
        return STAGE_BLOCK_KEYS[self]

    @property
    def display_name(self) -> str:
        return STAGE_DISPLAY_NAMES[self]


STAGE_ORDER: Tuple[NarrativeStage, ...] = tuple(NarrativeStage)

STAGE_BLOCK_KEYS = {
    NarrativeStage.IDENTIFICATION: "gancho",
    NarrativeStage.CONFLICT: "conflito",
    NarrativeStage.TURN: "virada",
    NarrativeStage.MEMORABLE_ENDING: "final",
}

STAGE_DISPLAY_NAMES = {
    NarrativeStage.IDENTIFICATION: "Identificação",
    NarrativeStage.CONFLICT: "Conflito",
    NarrativeStage.TURN: "Virada",
    NarrativeStage.MEMORABLE_ENDING: "Final Marcante",
}

# (label, needs word boundaries). Short English words get boundaries so
# "return" never reads as a Turn marker.
STAGE_LABELS: Dict[NarrativeStage, Tuple[Tuple[str, bool], ...]] = {
    NarrativeStage.IDENTIFICATION: (("Identificação", False), ("Identification", True)),
    NarrativeStage.CONFLICT: (("Conflito", False), ("Conflict", True)),
    NarrativeStage.TURN: (("Virada", False), ("Turn", True)),
    NarrativeStage.MEMORABLE_ENDING: (
        ("Final Marcante", False),
        ("Final marcante", False),
        ("Memorable Ending", True),
    ),
}

OBJECTIVES: Tuple[Tuple[str, str], ...] = (
    ("🟡", "Atrair Atenção"),
    ("🟢", "Criar Conexão"),
    ("🔴", "Fazer Comprar"),
    ("🔁", "Reativar Interesse"),
    ("✅", "Fechar Agora"),
)

METADATA_LABELS: Tuple[str, ...] = (
    "Tipo de Conteúdo",
    "Objetivo",
    "Tom de linguagem",
    "Ideal para",
    "Content Type",
    "Objective",
    "Tone of voice",
    "Target audience",
)

LEGEND_PHRASES: Tuple[str, ...] = ("estrutura Disney", "Disney structure")

CLOSING_MARKERS: Tuple[str, ...] = (
    "Sugestão de melhorias",
    "Sugestões de melhoria",
    "Prompt para Lovable",
    "Prompt:",
    "Improvement suggestions",
    "Generation prompt",
)


def garbled_variants(label: str) -> List[str]:
    """Return the mis-decoded spellings of ``label`` (canonical form excluded)."""
    raw = label.encode("utf-8")
    variants = []
    for encoding in GARBLING_ENCODINGS:
        try:
            garbled = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if garbled != label and garbled not in variants:
            variants.append(garbled)
    return variants


def spellings(label: str, include_upper: bool = False) -> List[str]:
    """Canonical label, optionally its upper-case form, and all garbled variants."""
    forms = [label]
    if include_upper and label.upper() != label:
        forms.append(label.upper())
    result = []
    for form in forms:
        for candidate in [form] + garbled_variants(form):
            if candidate not in result:
                result.append(candidate)
    return result


def literal_pattern(text: str) -> str:
    # A single space in a label also matches a missing space ("FinalMarcante")
    return r"\s?".join(re.escape(part) for part in text.split(" "))


def compile_labels(
    labels: Iterable[str],
    ignore_case: bool = True,
    bounded: bool = False,
) -> Pattern:
    """Compile an alternation over every spelling of ``labels``."""
    alternatives = []
    for label in labels:
        for form in spellings(label):
            body = literal_pattern(form)
            alternatives.append(rf"\b{body}\b" if bounded else body)
    # Longest first so a garbled form is never shadowed by a shorter prefix
    alternatives.sort(key=len, reverse=True)
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile("|".join(alternatives), flags)


class StageMatcher:
    """Locates narrative-stage labels in text.

    Stage labels are matched case-sensitively (canonical or all-caps), as
    lower-case "conflito" or "virada" routinely occur inside narration.
    """

    def __init__(self, extra_aliases: Optional[Mapping[str, Iterable[str]]] = None):
        self.patterns: Dict[NarrativeStage, Pattern] = {}
        self.headings: Dict[NarrativeStage, Pattern] = {}
        extra_aliases = extra_aliases or {}

        for stage in STAGE_ORDER:
            alternatives = []
            labels = list(STAGE_LABELS[stage])
            labels += [(alias, False) for alias in extra_aliases.get(stage.value, ())]
            for label, bounded in labels:
                for form in spellings(label, include_upper=True):
                    body = literal_pattern(form)
                    alternatives.append(rf"\b{body}\b" if bounded else body)
            alternatives.sort(key=len, reverse=True)
            self.patterns[stage] = re.compile("|".join(alternatives))
            # Label opening the line, after any emoji or markup
            self.headings[stage] = re.compile(r"^[^A-Za-z\n]*(?:" + "|".join(alternatives) + ")")

        if extra_aliases:
            logger.debug(f"Stage matcher built with extra aliases for: {sorted(extra_aliases)}")

    def stages_in(self, text: str) -> List[NarrativeStage]:
        """Stages whose label occurs in ``text``, in canonical order."""
        return [stage for stage in STAGE_ORDER if self.patterns[stage].search(text)]

    def heading_stages(self, text: str) -> List[NarrativeStage]:
        """Stages whose label opens the first line of ``text`` ("🟩 Virada")."""
        first_line = text.lstrip().split("\n", 1)[0]
        return [stage for stage in STAGE_ORDER if self.headings[stage].match(first_line)]

    def has_all(self, text: str) -> bool:
        return all(self.patterns[stage].search(text) for stage in STAGE_ORDER)


DEFAULT_MATCHER = StageMatcher()

METADATA_PATTERN = re.compile(
    "|".join(rf"(?:{literal_pattern(form)})\s*:" for label in METADATA_LABELS for form in spellings(label)),
    re.IGNORECASE,
)
LEGEND_PATTERN = compile_labels(LEGEND_PHRASES)
CLOSING_PATTERN = compile_labels(CLOSING_MARKERS)

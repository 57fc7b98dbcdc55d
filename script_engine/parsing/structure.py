from typing import Optional

from .labels import DEFAULT_MATCHER, StageMatcher


def has_canonical_structure(raw: str, matcher: Optional[StageMatcher] = None) -> bool:
    """True when all four narrative-stage labels occur somewhere in ``raw``.

    This is an existence check only; where the stages sit is the
    segmenter's concern.
    """
    if not raw:
        return False
    return (matcher or DEFAULT_MATCHER).has_all(raw)

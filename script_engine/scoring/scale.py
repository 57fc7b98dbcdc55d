import math

from loguru import logger

SCORE_MIN = 0.0
SCORE_MAX = 10.0


def clamp_score(score: float, name: str = "score") -> float:
    """Force ``score`` into [0, 10].

    Upstream scores are trusted but not guaranteed in range, so anything
    outside is pulled back to the nearest bound and logged.
    """
    if score is None or math.isnan(score):
        logger.warning(f"Missing {name}, treating as {SCORE_MIN}")
        return SCORE_MIN
    if score < SCORE_MIN or score > SCORE_MAX:
        clamped = min(SCORE_MAX, max(SCORE_MIN, score))
        logger.warning(f"{name} {score} outside [{SCORE_MIN}, {SCORE_MAX}], clamped to {clamped}")
        return clamped
    return float(score)

import pytest

from script_engine.scoring import tone
from script_engine.scoring.tone import (
    CONFLICT_FOCUS,
    DEFAULT_TONE_BAND,
    ENDING_FOCUS,
    GENERIC_FOCUS,
    HOOK_FOCUS,
    TONE_BANDS,
    TURN_FOCUS,
    improvement_focus,
    tone_for_score,
)


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, 0),
        (5.9, 0),
        (6.0, 1),
        (7.4, 1),
        (7.5, 2),
        (8.9, 2),
        (9.0, 3),
        (10, 3),
    ],
)
def test_boundaries(score, expected):
    assert tone_for_score(score) == TONE_BANDS[expected]


def test_exactly_one_band_per_boundary():
    for score in (0, 5.9, 6.0, 7.4, 7.5, 8.9, 9.0, 10):
        assert sum(band.contains(score) for band in TONE_BANDS) == 1


def test_bands_partition_the_scale():
    assert TONE_BANDS[0].low == 0.0
    assert TONE_BANDS[-1].high == 10.0
    for lower, upper in zip(TONE_BANDS, TONE_BANDS[1:]):
        assert round(upper.low - lower.high, 1) == 0.1


def test_scores_between_table_steps_round_half_up():
    assert tone_for_score(5.94) == TONE_BANDS[0]
    assert tone_for_score(5.95) == TONE_BANDS[1]
    assert tone_for_score(8.96) == TONE_BANDS[3]


def test_scenario_total():
    assert tone_for_score(7.9) == TONE_BANDS[2]


def test_out_of_range_is_clamped():
    assert tone_for_score(-3) == TONE_BANDS[0]
    assert tone_for_score(15) == TONE_BANDS[3]


def test_fallback_when_no_band_matches(monkeypatch):
    monkeypatch.setattr(tone, "TONE_BANDS", (TONE_BANDS[0],))
    assert tone_for_score(9.5) == DEFAULT_TONE_BAND == TONE_BANDS[1]


@pytest.mark.parametrize("label", ["GANCHO", "💡 Gancho Inicial", "gancho", "  Hook "])
def test_hook_labels(label):
    assert improvement_focus(label) == HOOK_FOCUS


@pytest.mark.parametrize(
    "label,expected",
    [
        ("🟧 Conflito", CONFLICT_FOCUS),
        ("Virada", TURN_FOCUS),
        ("Final Marcante", ENDING_FOCUS),
        ("CTA", ENDING_FOCUS),
        ("IdentificaÃ§Ã£o", HOOK_FOCUS),
        ("Identificação", HOOK_FOCUS),
    ],
)
def test_stage_labels(label, expected):
    assert improvement_focus(label) == expected


def test_unknown_label_gets_generic_focus():
    assert improvement_focus("Legenda") == GENERIC_FOCUS
    assert improvement_focus("") == GENERIC_FOCUS

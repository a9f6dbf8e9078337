import pytest

from composition import (
    CompositionScore,
    known_champion_names,
    render_scores,
    resolve_name,
    score_composition,
)
from stats import ChampionProfile, WinRateAccumulator


def _profiles() -> dict:
    ashe = ChampionProfile(matches_played=6)
    ashe.allies["Lulu"] = WinRateAccumulator(wins=4, matches=5)
    ashe.allies["Braum"] = WinRateAccumulator(wins=2, matches=5)
    ashe.enemies["Zed"] = WinRateAccumulator(wins=1, matches=5)

    jinx = ChampionProfile(matches_played=3)
    jinx.enemies["Zed"] = WinRateAccumulator(wins=3, matches=5)
    return {"Ashe": ashe, "Jinx": jinx}


def test_known_names_union_profiles_allies_and_enemies() -> None:
    assert known_champion_names(_profiles()) == ["Ashe", "Braum", "Jinx", "Lulu", "Zed"]


def test_resolve_name_fixes_typos() -> None:
    known = ["Ashe", "Braum", "Jinx", "Lulu", "Zed"]
    assert resolve_name("Zedd", known) == "Zed"
    assert resolve_name("lulu", known) == "Lulu"
    assert resolve_name("Ahse", known) == "Ashe"


def test_resolve_name_keeps_unmatched_candidate() -> None:
    assert resolve_name("qqq", ["Ashe", "Zed"]) == "qqq"
    assert resolve_name("Ashe", ["Ashe"], similarity=lambda a, b: 0.0) == "Ashe"
    assert resolve_name("Teemo", [], similarity=lambda a, b: 1.0) == "Teemo"


def test_resolve_name_ties_go_to_first_known_name() -> None:
    assert resolve_name("x", ["Braum", "Ashe"], similarity=lambda a, b: 1.0) == "Braum"


def test_score_composition_averages_win_chances() -> None:
    scores = score_composition(_profiles(), ["Lullu", "Braum"], ["Zedd"], threshold=5)

    ashe = scores["Ashe"]
    assert ashe.ally_chances == {"Braum": 0.4, "Lulu": 0.8}
    assert ashe.ally_strength == pytest.approx(0.6)
    assert ashe.enemy_weakness == pytest.approx(0.2)
    assert ashe.combined == pytest.approx((0.8 + 0.4 + 0.2) / 3)


def test_missing_category_is_unknown_not_zero() -> None:
    scores = score_composition(_profiles(), ["Lulu"], ["Zed"], threshold=5)

    jinx = scores["Jinx"]
    assert jinx.ally_strength is None
    assert jinx.enemy_weakness == pytest.approx(0.6)
    assert jinx.combined == pytest.approx(0.6)

    text = render_scores(scores)
    assert "ally strength: ? (0 matched)" in text
    assert "ally strength: 0%" not in text


def test_shrinkage_applies_to_low_sample_matchups() -> None:
    profile = ChampionProfile(matches_played=1)
    profile.enemies["Zed"] = WinRateAccumulator(wins=1, matches=1)
    scores = score_composition({"Ashe": profile}, [], ["Zed"], threshold=5)
    assert scores["Ashe"].enemy_weakness == pytest.approx(0.5 + 0.5 / 4)


def test_empty_score_is_entirely_unknown() -> None:
    score = CompositionScore()
    assert score.ally_strength is None
    assert score.enemy_weakness is None
    assert score.combined is None


def test_render_orders_by_combined_score_with_unknown_last() -> None:
    scores = {
        "Lux": CompositionScore(),
        "Ashe": CompositionScore(enemy_chances={"Zed": 0.2}),
        "Jinx": CompositionScore(enemy_chances={"Zed": 0.6}),
    }
    text = render_scores(scores)
    assert text.index("Jinx") < text.index("Ashe") < text.index("Lux")
    assert "combined score: 60%" in text

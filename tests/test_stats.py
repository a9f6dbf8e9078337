import pytest

from stats import ChampionProfile, WinRateAccumulator, win_chance


def test_win_chance_without_matches_is_even() -> None:
    assert win_chance(0, 0) == 0.5
    assert win_chance(0, 0, threshold=1) == 0.5


def test_win_chance_one_short_of_threshold_divides_by_1_3() -> None:
    chance = win_chance(3, 4, threshold=5)
    assert chance == pytest.approx(0.5 + 0.25 / 1.3)
    assert chance == pytest.approx(0.6923, abs=1e-4)


def test_win_chance_two_short_of_threshold_divides_by_1_6() -> None:
    assert win_chance(3, 3, threshold=5) == pytest.approx(0.5 + 0.5 / 1.6)


def test_win_chance_larger_gap_divides_by_gap() -> None:
    # lack = 3
    assert win_chance(2, 2, threshold=5) == pytest.approx(0.5 + 0.5 / 3)
    # lack = 4, losses pull below 0.5 the same way
    assert win_chance(0, 1, threshold=5) == pytest.approx(0.5 - 0.5 / 4)


def test_win_chance_at_or_above_threshold_is_raw_win_rate() -> None:
    assert win_chance(3, 7, threshold=5) == 3 / 7
    assert win_chance(5, 5, threshold=5) == 1.0
    assert win_chance(0, 6, threshold=5) == 0.0


def test_win_chance_stays_inside_unit_interval_below_threshold() -> None:
    for threshold in range(2, 9):
        for matches in range(1, threshold):
            for wins in range(matches + 1):
                assert 0.0 < win_chance(wins, matches, threshold) < 1.0


def test_accumulator_keeps_wins_at_most_matches() -> None:
    acc = WinRateAccumulator()
    for win in [True, False, True, True, False]:
        acc.record(win)
        assert 0 <= acc.wins <= acc.matches
    assert (acc.wins, acc.matches) == (3, 5)
    assert acc.win_rate == 0.6


def test_accumulator_without_matches_has_zero_win_rate() -> None:
    acc = WinRateAccumulator()
    assert acc.win_rate == 0.0
    assert acc.win_chance() == 0.5


def test_saturated_accumulator_ignores_further_records() -> None:
    acc = WinRateAccumulator(saturation_cap=2)
    assert acc.record(True) is True
    assert acc.record(False) is True
    assert acc.saturated

    assert acc.record(True) is False
    assert acc.record(True) is False
    assert (acc.wins, acc.matches) == (1, 2)


def test_profile_get_or_create_returns_same_accumulator() -> None:
    profile = ChampionProfile(saturation_cap=3)
    zed = profile.enemy("Zed")
    assert profile.enemy("Zed") is zed
    assert zed.saturation_cap == 3
    assert profile.ally("Zed") is not zed
    assert set(profile.enemies) == {"Zed"}
    assert set(profile.allies) == {"Zed"}


def test_profile_counts_own_results() -> None:
    profile = ChampionProfile()
    profile.add_match(True)
    profile.add_match(False)
    assert profile.matches_played == 2
    assert profile.wins == 1
    assert profile.win_rate == 0.5

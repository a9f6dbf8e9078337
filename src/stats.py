"""
Win-rate accumulators and per-champion profiles

A WinRateAccumulator counts wins and matches for one matchup (the player's
champion with or against one other champion). A ChampionProfile holds the
player's overall match count on one champion plus one accumulator per ally
and per enemy champion seen alongside it.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

import config
from utils import safe_divide

# Damping divisors for the smallest gaps below the significance threshold.
# Larger gaps divide by the gap itself.
SMALL_LACK_DIVISORS = {1: 1.3, 2: 1.6}


def win_chance(wins: int, matches: int,
               threshold: int = config.SIGNIFICANCE_THRESHOLD) -> float:
    """
    Estimate the chance of winning a matchup from sparse counts.

    Raw win rates are pulled toward 0.5 when fewer than `threshold` matches
    were seen. The pull grows with the number of missing matches: a gap of 1
    divides the distance from 0.5 by 1.3, a gap of 2 by 1.6, and any larger
    gap by the gap itself. At or above the threshold the raw win rate is
    returned unchanged.

    Args:
        wins: Number of wins
        matches: Number of matches
        threshold: Significance threshold (sample count)

    Returns:
        Win chance; 0.5 when there are no matches
    """
    if matches == 0:
        return 0.5

    win_rate = wins / matches
    if matches < threshold:
        lack = threshold - matches
        divisor = SMALL_LACK_DIVISORS.get(lack, lack)
        return 0.5 + (win_rate - 0.5) / divisor

    return win_rate


@dataclass
class WinRateAccumulator:
    """Wins and matches for one matchup"""
    wins: int = 0
    matches: int = 0
    saturation_cap: Optional[int] = None

    @property
    def saturated(self) -> bool:
        return self.saturation_cap is not None and self.matches >= self.saturation_cap

    def record(self, win: bool) -> bool:
        """
        Count one match outcome.

        Returns:
            False if the accumulator is saturated and the outcome was dropped
        """
        if self.saturated:
            return False
        self.matches += 1
        if win:
            self.wins += 1
        return True

    @property
    def win_rate(self) -> float:
        return safe_divide(self.wins, self.matches, 0.0)

    def win_chance(self, threshold: int = config.SIGNIFICANCE_THRESHOLD) -> float:
        return win_chance(self.wins, self.matches, threshold)

    def to_dict(self, threshold: int = config.SIGNIFICANCE_THRESHOLD) -> Dict:
        return {
            'wins': self.wins,
            'matches': self.matches,
            'win_rate': self.win_rate,
            'win_chance': self.win_chance(threshold),
        }


@dataclass
class ChampionProfile:
    """One champion's match count and its ally/enemy matchup accumulators"""
    matches_played: int = 0
    wins: int = 0
    allies: Dict[str, WinRateAccumulator] = field(default_factory=dict)
    enemies: Dict[str, WinRateAccumulator] = field(default_factory=dict)
    saturation_cap: Optional[int] = None

    def add_match(self, win: bool) -> None:
        self.matches_played += 1
        if win:
            self.wins += 1

    @property
    def win_rate(self) -> float:
        return safe_divide(self.wins, self.matches_played, 0.0)

    def ally(self, champion_name: str) -> WinRateAccumulator:
        """Get the accumulator for an allied champion, creating it on first use"""
        return self._get_or_create(self.allies, champion_name)

    def enemy(self, champion_name: str) -> WinRateAccumulator:
        """Get the accumulator for an enemy champion, creating it on first use"""
        return self._get_or_create(self.enemies, champion_name)

    def _get_or_create(self, table: Dict[str, WinRateAccumulator],
                       champion_name: str) -> WinRateAccumulator:
        accumulator = table.get(champion_name)
        if accumulator is None:
            accumulator = WinRateAccumulator(saturation_cap=self.saturation_cap)
            table[champion_name] = accumulator
        return accumulator

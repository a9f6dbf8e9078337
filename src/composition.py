"""
Team composition scoring

Given the champions already picked by teammates and seen on the enemy team,
score every champion the player has played by the win chances of the matching
ally and enemy matchups. Candidate names are resolved against the known
champion names with fuzzy matching, so minor typos still match.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from rapidfuzz import fuzz

import config
from stats import ChampionProfile, WinRateAccumulator
from utils import format_percent, indent_text

logger = logging.getLogger(__name__)

Similarity = Callable[[str, str], float]


def name_similarity(candidate: str, known: str) -> float:
    """Case-insensitive similarity score in [0, 100]"""
    return fuzz.ratio(candidate.lower(), known.lower())


def known_champion_names(profiles: Dict[str, ChampionProfile]) -> List[str]:
    """Every champion name seen as a played champion, ally or enemy, sorted"""
    names = set(profiles)
    for profile in profiles.values():
        names.update(profile.allies)
        names.update(profile.enemies)
    return sorted(names)


def resolve_name(candidate: str, known_names: Iterable[str],
                 similarity: Similarity = name_similarity) -> str:
    """
    Resolve a possibly misspelled champion name to the closest known name

    The first name with the highest score wins ties. The candidate is returned
    unchanged when no known name scores above zero.
    """
    best_name = None
    best_score = 0.0
    for known in known_names:
        score = similarity(candidate, known)
        if score > best_score:
            best_name = known
            best_score = score

    if best_name is None:
        logger.warning(f"No known champion resembles '{candidate}', keeping it as is")
        return candidate
    if best_name != candidate:
        logger.debug(f"Resolved '{candidate}' to '{best_name}' (score {best_score:.0f})")
    return best_name


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


@dataclass
class CompositionScore:
    """Win-chance averages for one champion against a candidate composition"""
    ally_chances: Dict[str, float] = field(default_factory=dict)
    enemy_chances: Dict[str, float] = field(default_factory=dict)

    @property
    def ally_strength(self) -> Optional[float]:
        return _mean(list(self.ally_chances.values()))

    @property
    def enemy_weakness(self) -> Optional[float]:
        return _mean(list(self.enemy_chances.values()))

    @property
    def combined(self) -> Optional[float]:
        return _mean(list(self.ally_chances.values()) + list(self.enemy_chances.values()))

    def to_dict(self) -> Dict:
        return {
            'ally_strength': self.ally_strength,
            'enemy_weakness': self.enemy_weakness,
            'combined': self.combined,
            'matched_allies': self.ally_chances,
            'matched_enemies': self.enemy_chances,
        }


def _matched_chances(table: Dict[str, WinRateAccumulator], names: Iterable[str],
                     threshold: int) -> Dict[str, float]:
    return {
        name: table[name].win_chance(threshold)
        for name in sorted(set(names)) if name in table
    }


def score_composition(profiles: Dict[str, ChampionProfile],
                      allies: Iterable[str], enemies: Iterable[str],
                      threshold: int = config.SIGNIFICANCE_THRESHOLD,
                      similarity: Similarity = name_similarity) -> Dict[str, CompositionScore]:
    """
    Score every played champion against candidate allies and enemies

    Args:
        profiles: Champion name to profile mapping
        allies: Candidate ally champion names, possibly misspelled
        enemies: Candidate enemy champion names, possibly misspelled
        threshold: Significance threshold used by the win chance estimate
        similarity: Name similarity function; higher is closer

    Returns:
        Champion name to CompositionScore
    """
    known_names = known_champion_names(profiles)
    resolved_allies = [resolve_name(name, known_names, similarity) for name in allies]
    resolved_enemies = [resolve_name(name, known_names, similarity) for name in enemies]
    logger.info(f"Scoring allies {resolved_allies} against enemies {resolved_enemies}")

    scores = {}
    for champion_name, profile in profiles.items():
        scores[champion_name] = CompositionScore(
            ally_chances=_matched_chances(profile.allies, resolved_allies, threshold),
            enemy_chances=_matched_chances(profile.enemies, resolved_enemies, threshold),
        )
    return scores


def rank_scores(scores: Dict[str, CompositionScore]) -> List:
    """Highest combined score first; unknown scores last, ties by name"""
    def sort_key(item):
        name, score = item
        combined = score.combined
        return (combined is None, -(combined or 0.0), name)

    return sorted(scores.items(), key=sort_key)


def render_scores(scores: Dict[str, CompositionScore]) -> str:
    blocks = []
    for champion_name, score in rank_scores(scores):
        lines = [
            f"ally strength: {format_percent(score.ally_strength)} "
            f"({len(score.ally_chances)} matched)",
            f"enemy weakness: {format_percent(score.enemy_weakness)} "
            f"({len(score.enemy_chances)} matched)",
            f"combined score: {format_percent(score.combined)}",
        ]
        blocks.append(champion_name + '\n' + indent_text('\n'.join(lines)))
    return '\n\n'.join(blocks)

"""
Champion summary report: ranked profiles and best/worst matchup lists
"""
from typing import Dict, List, Tuple

import config
from stats import ChampionProfile, WinRateAccumulator
from utils import format_percent, format_ratio, indent_text

RankedMatchups = List[Tuple[str, WinRateAccumulator]]

# (title, relation, descending)
SUMMARY_SECTIONS = [
    ('best allies', 'allies', True),
    ('worst allies', 'allies', False),
    ('easiest enemies', 'enemies', True),
    ('worst enemies', 'enemies', False),
]


def rank_profiles(profiles: Dict[str, ChampionProfile]) -> List[Tuple[str, ChampionProfile]]:
    """Most played champion first; ties ordered by name"""
    return sorted(profiles.items(), key=lambda item: (-item[1].matches_played, item[0]))


def significant_matchups(table: Dict[str, WinRateAccumulator],
                         threshold: int = config.SIGNIFICANCE_THRESHOLD) -> RankedMatchups:
    """
    Matchups with at least `threshold` samples, ranked by ascending win chance

    Ties are ordered by champion name.
    """
    significant = [
        (name, accumulator) for name, accumulator in table.items()
        if accumulator.matches >= threshold
    ]
    significant.sort(key=lambda item: (item[1].win_chance(threshold), item[0]))
    return significant


def top_matchups(ranked: RankedMatchups, limit: int, descending: bool) -> RankedMatchups:
    """Take up to `limit` entries from either end of an ascending ranking"""
    if descending:
        return list(reversed(ranked))[:limit]
    return ranked[:limit]


def _entry(name: str, accumulator: WinRateAccumulator, threshold: int) -> Dict:
    entry = {'champion': name}
    entry.update(accumulator.to_dict(threshold))
    return entry


def build_summary(profiles: Dict[str, ChampionProfile],
                  threshold: int = config.SIGNIFICANCE_THRESHOLD,
                  limit: int = config.SUMMARY_LIMIT) -> Dict:
    """
    Build the champion summary as plain data

    Args:
        profiles: Champion name to profile mapping
        threshold: Minimum matchup samples for inclusion in the lists
        limit: Maximum entries per list

    Returns:
        Dictionary with a 'champions' list, most played first
    """
    champions = []
    for champion_name, profile in rank_profiles(profiles):
        champion = {
            'champion': champion_name,
            'matches_played': profile.matches_played,
            'wins': profile.wins,
            'win_rate': profile.win_rate,
        }
        ranked = {
            'allies': significant_matchups(profile.allies, threshold),
            'enemies': significant_matchups(profile.enemies, threshold),
        }
        for title, relation, descending in SUMMARY_SECTIONS:
            champion[title.replace(' ', '_')] = [
                _entry(name, accumulator, threshold)
                for name, accumulator in top_matchups(ranked[relation], limit, descending)
            ]
        champions.append(champion)

    return {
        'significance_threshold': threshold,
        'summary_limit': limit,
        'champions': champions,
    }


def format_matchup_line(entry: Dict) -> str:
    """e.g. 'Zed chance 69% ratio 75% of 4'"""
    return (
        f"{entry['champion']} chance {format_percent(entry['win_chance'])} "
        f"ratio {format_ratio(entry['wins'], entry['matches'])} of {entry['matches']}"
    )


def render_champion(champion: Dict) -> str:
    lines = [
        f"count of matches: {champion['matches_played']}",
        f"win rate: {format_ratio(champion['wins'], champion['matches_played'])}",
    ]
    for title, _, _ in SUMMARY_SECTIONS:
        entries = champion[title.replace(' ', '_')]
        lines.append(f"{title}: {len(entries)}")
        lines.extend(indent_text(format_matchup_line(entry)) for entry in entries)
    return '\n'.join(lines)


def render_summary(summary: Dict) -> str:
    """Render a build_summary() result as indented text"""
    blocks = []
    for champion in summary['champions']:
        blocks.append(champion['champion'] + '\n' + indent_text(render_champion(champion)))
    return '\n\n'.join(blocks)


def summarize(profiles: Dict[str, ChampionProfile],
              threshold: int = config.SIGNIFICANCE_THRESHOLD,
              limit: int = config.SUMMARY_LIMIT) -> str:
    return render_summary(build_summary(profiles, threshold, limit))

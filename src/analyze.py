"""
Step 2: Analyze cached matches

Aggregates the player's cached matches into per-champion profiles, prints the
champion summary and, when candidate allies or enemies are given, scores each
played champion against that team composition. Results are also saved as JSON
for the CSV export and chart steps.
"""

import argparse
import json
import logging
import os
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from aggregate import ChampionAggregator
from composition import render_scores, score_composition
from config import AnalysisConfig
from records import MatchStore
from report import build_summary, render_summary
from stats import ChampionProfile
from utils import setup_logging, format_number, create_output_dirs

logger = logging.getLogger(__name__)


def parse_names(text: Optional[str]) -> List[str]:
    """Split a comma separated champion list, dropping blanks"""
    if not text:
        return []
    return [name.strip() for name in text.split(',') if name.strip()]


def resolve_target_player(store: MatchStore, puuid: Optional[str]) -> str:
    """Use the given PUUID, or the one saved by the collection step"""
    if puuid:
        return puuid
    player = store.load_player()
    if not player or not player.get('puuid'):
        raise SystemExit(
            f"No player PUUID given and no {config.PLAYER_FILE_NAME} in {store.data_dir}. "
            f"Run collect_matches.py first or pass --puuid."
        )
    return player['puuid']


def run_analysis(store: MatchStore, settings: AnalysisConfig) -> ChampionAggregator:
    """Aggregate the cached matches; a malformed match aborts the run"""
    aggregator = ChampionAggregator(
        settings.target_player_id,
        recency_limit=settings.recency_limit,
        saturation_cap=settings.saturation_cap,
    )
    aggregator.run(store.iter_records(), total=store.count())
    return aggregator


def profiles_to_dict(profiles: Dict[str, ChampionProfile], threshold: int) -> Dict:
    """Every accumulator of every profile, for the CSV export and charts"""
    return {
        champion_name: {
            'matches_played': profile.matches_played,
            'wins': profile.wins,
            'allies': {name: acc.to_dict(threshold) for name, acc in sorted(profile.allies.items())},
            'enemies': {name: acc.to_dict(threshold) for name, acc in sorted(profile.enemies.items())},
        }
        for champion_name, profile in sorted(profiles.items())
    }


def build_results(aggregator: ChampionAggregator, settings: AnalysisConfig,
                  allies: List[str], enemies: List[str]) -> Dict:
    profiles: Dict[str, ChampionProfile] = aggregator.profiles
    results = {
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'target_player_id': settings.target_player_id,
        'recency_days': settings.recency_limit.days,
        'saturation_cap': settings.saturation_cap,
        'run': aggregator.summary_counts(),
        'summary': build_summary(profiles, settings.significance_threshold,
                                 settings.summary_limit),
        'profiles': profiles_to_dict(profiles, settings.significance_threshold),
        'composition': None,
    }
    if allies or enemies:
        scores = score_composition(profiles, allies, enemies,
                                   threshold=settings.significance_threshold)
        results['composition'] = {
            'allies': allies,
            'enemies': enemies,
            'scores': {name: score.to_dict() for name, score in scores.items()},
        }
        results['composition_text'] = render_scores(scores)
    return results


def save_results(results: Dict, output_dir: str) -> str:
    """Save analysis results to JSON"""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, config.RESULTS_FILE_NAME)
    with open(path, 'w') as f:
        json.dump(results, f, indent=2)
    logger.info(f"Results saved to: {path}")
    return path


def main():
    parser = argparse.ArgumentParser(description='Analyze champion matchups from cached matches')
    parser.add_argument('--data-dir', default=config.MATCH_DATA_DIR,
                        help=f'Match cache directory (default: {config.MATCH_DATA_DIR})')
    parser.add_argument('--puuid', default=None,
                        help='Player PUUID (default: the one saved by collect_matches.py)')
    parser.add_argument('--days', type=int, default=config.DEFAULT_RECENCY_DAYS,
                        help=f'Recency window in days (default: {config.DEFAULT_RECENCY_DAYS})')
    parser.add_argument('--threshold', type=int, default=config.SIGNIFICANCE_THRESHOLD,
                        help=f'Significance threshold (default: {config.SIGNIFICANCE_THRESHOLD})')
    parser.add_argument('--summary-limit', type=int, default=config.SUMMARY_LIMIT,
                        help=f'Entries per best/worst list (default: {config.SUMMARY_LIMIT})')
    parser.add_argument('--saturation-cap', type=int, default=config.SATURATION_CAP,
                        help=f'Samples per matchup before saturation (default: {config.SATURATION_CAP})')
    parser.add_argument('--allies', default=None,
                        help='Comma separated ally champions to score against')
    parser.add_argument('--enemies', default=None,
                        help='Comma separated enemy champions to score against')
    parser.add_argument('--output', type=str, default=config.OUTPUT_DIR,
                        help=f'Output directory (default: {config.OUTPUT_DIR})')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    store = MatchStore(args.data_dir)
    settings = AnalysisConfig(
        target_player_id=resolve_target_player(store, args.puuid),
        recency_limit=timedelta(days=args.days),
        saturation_cap=args.saturation_cap,
        significance_threshold=args.threshold,
        summary_limit=args.summary_limit,
    )
    errors = settings.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise SystemExit(1)

    logger.info("Starting analysis...")
    logger.info(f"Recency window: {args.days} days | Threshold: {args.threshold} | "
                f"Saturation cap: {args.saturation_cap}")
    create_output_dirs(args.output)
    start = time.time()

    aggregator = run_analysis(store, settings)
    results = build_results(aggregator, settings,
                            parse_names(args.allies), parse_names(args.enemies))
    save_results(results, args.output)

    print(f"Champion summary:\n{render_summary(results['summary'])}")
    if results['composition'] is not None:
        print(f"\nComposition scores:\n{results['composition_text']}")

    logger.info(f"Processed {format_number(aggregator.records_processed)} matches "
                f"in {time.time() - start:.1f}s")


if __name__ == '__main__':
    main()

"""
Step 3: Export matchup tables to CSV

Generates two CSVs from the analysis results:
  - Champions: one row per played champion
  - Matchups: one row per (champion, ally/enemy, matchup)
"""

import argparse
import csv
import json
import logging
import os
import sys
from typing import Dict, Optional

from tqdm import tqdm

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from utils import setup_logging, format_ratio

logger = logging.getLogger(__name__)

MATCHUP_HEADER = ['Champion', 'Relation', 'Matchup', 'Wins', 'Matches',
                  'Win Rate', 'Win Chance']
CHAMPION_HEADER = ['Champion', 'Matches', 'Wins', 'Win Rate']


def load_results(input_dir: str) -> Optional[Dict]:
    """Load analysis results JSON"""
    path = os.path.join(input_dir, config.RESULTS_FILE_NAME)
    if not os.path.exists(path):
        logger.error(f"Results file not found: {path}")
        return None

    with open(path, 'r') as f:
        return json.load(f)


def format_win_rate(value) -> str:
    """Format a 0-1 fraction as percentage with 2 decimal places"""
    if value is None:
        return 'low data'
    return f'{value * 100:.2f}%'


def export_champions(results: Dict, output_dir: str) -> str:
    """Export the per-champion CSV, most played first"""
    rows = [CHAMPION_HEADER]
    for champion in results['summary']['champions']:
        rows.append([
            champion['champion'],
            champion['matches_played'],
            champion['wins'],
            format_ratio(champion['wins'], champion['matches_played']),
        ])

    path = os.path.join(output_dir, 'Champions.csv')
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerows(rows)

    logger.info(f"  Saved: {path}")
    return path


def export_matchups(results: Dict, output_dir: str) -> str:
    """Export every ally and enemy accumulator"""
    rows = [MATCHUP_HEADER]
    profiles = results.get('profiles', {})
    for champion_name in tqdm(sorted(profiles), desc="Exporting matchups", unit="champion",
                              leave=False):
        profile = profiles[champion_name]
        for relation in ('allies', 'enemies'):
            for matchup, stats in profile[relation].items():
                rows.append([
                    champion_name,
                    'ally' if relation == 'allies' else 'enemy',
                    matchup,
                    stats['wins'],
                    stats['matches'],
                    format_win_rate(stats['win_rate'] if stats['matches'] else None),
                    format_win_rate(stats['win_chance']),
                ])

    path = os.path.join(output_dir, 'Matchups.csv')
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerows(rows)

    logger.info(f"  Saved: {path} ({len(rows) - 1} matchups)")
    return path


def main():
    parser = argparse.ArgumentParser(description='Export champion and matchup CSVs')
    parser.add_argument('--input', type=str, default=config.OUTPUT_DIR,
                        help='Input directory with the analysis results JSON')
    parser.add_argument('--output', type=str, default=os.path.join(config.OUTPUT_DIR, 'csv'),
                        help='Output directory for CSVs')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    logger.info("Starting CSV export...")
    os.makedirs(args.output, exist_ok=True)

    results = load_results(args.input)
    if results is None:
        raise SystemExit("No analysis results found; run analyze.py first.")

    export_champions(results, args.output)
    export_matchups(results, args.output)

    logger.info("\nCSV export complete!")


if __name__ == '__main__':
    main()

"""
Step 4: Generate charts from the analysis results JSON
"""

import argparse
import logging
import os
import re
import sys
from typing import Dict, List, Optional

from tqdm import tqdm

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import seaborn as sns

import config
from config import CHART_DPI, CHART_FIGSIZE_MEDIUM
from export_csv import load_results
from utils import setup_logging

logger = logging.getLogger(__name__)

COLORS = {
    'favored': '#2ecc71',   # Green
    'even': '#f39c12',      # Orange
    'unfavored': '#e74c3c', # Red
    'bar': '#3498db',       # Blue
    'reference': '#95a5a6', # Gray
}

MAX_BARS = 15


def _slug(name: str) -> str:
    return re.sub(r'[^A-Za-z0-9]+', '_', name).strip('_') or 'champion'


def _chance_color(chance: float) -> str:
    if chance >= 0.55:
        return COLORS['favored']
    if chance >= 0.45:
        return COLORS['even']
    return COLORS['unfavored']


def chart_champion_matches(results: Dict, output_dir: str) -> Optional[str]:
    """Horizontal bar chart of matches played per champion"""
    champions = results['summary']['champions'][:MAX_BARS]
    if not champions:
        logger.warning("No champions in results, skipping matches chart")
        return None

    champions = list(reversed(champions))  # Most played at the top
    labels = [c['champion'] for c in champions]
    counts = [c['matches_played'] for c in champions]

    fig, ax = plt.subplots(figsize=CHART_FIGSIZE_MEDIUM)
    bars = ax.barh(labels, counts, color=COLORS['bar'], edgecolor='white')
    for bar, count in zip(bars, counts):
        ax.text(bar.get_width(), bar.get_y() + bar.get_height() / 2,
                f' {count}', ha='left', va='center', fontsize=10)

    ax.set_title('Matches Played per Champion', fontsize=14, pad=15)
    ax.set_xlabel('Matches', fontsize=11)

    plt.tight_layout()
    path = os.path.join(output_dir, 'champion_matches.png')
    fig.savefig(path, dpi=CHART_DPI)
    plt.close(fig)
    logger.info(f"  Saved: {path}")
    return path


def chart_matchups(champion_name: str, profile: Dict, relation: str,
                   threshold: int, output_dir: str) -> Optional[str]:
    """Win chance per significant ally or enemy of one champion, best at the top"""
    matchups = [
        (name, stats) for name, stats in profile[relation].items()
        if stats['matches'] >= threshold
    ]
    if not matchups:
        logger.debug(f"No significant {relation} for {champion_name}, skipping")
        return None

    matchups.sort(key=lambda item: (item[1]['win_chance'], item[0]))
    if len(matchups) > MAX_BARS:
        half = MAX_BARS // 2
        matchups = matchups[:half] + matchups[-(MAX_BARS - half):]

    labels = [f"{name} ({stats['matches']})" for name, stats in matchups]
    chances = [stats['win_chance'] for _, stats in matchups]

    fig, ax = plt.subplots(figsize=CHART_FIGSIZE_MEDIUM)
    bars = ax.barh(labels, chances, color=[_chance_color(c) for c in chances],
                   edgecolor='white')
    for bar, chance in zip(bars, chances):
        ax.text(bar.get_width() + 0.005, bar.get_y() + bar.get_height() / 2,
                f'{int(chance * 100)}%', ha='left', va='center', fontsize=10)

    title_relation = 'Allies' if relation == 'allies' else 'Enemies'
    ax.set_title(f'{champion_name}: Win Chance by {title_relation}', fontsize=14, pad=15)
    ax.set_xlabel('Win chance (label shows matches)', fontsize=11)
    ax.set_xlim(0, 1.05)
    ax.axvline(x=0.5, color=COLORS['reference'], linestyle='--', linewidth=0.8)

    plt.tight_layout()
    path = os.path.join(output_dir, f'{_slug(champion_name)}_{relation}.png')
    fig.savefig(path, dpi=CHART_DPI)
    plt.close(fig)
    logger.info(f"  Saved: {path}")
    return path


def generate_all_charts(results: Dict, output_dir: str,
                        max_champions: int = config.SUMMARY_LIMIT) -> List[str]:
    """Generate the overview chart plus ally/enemy charts for the most played champions"""
    os.makedirs(output_dir, exist_ok=True)
    sns.set_theme(style='whitegrid')

    threshold = results['summary']['significance_threshold']
    paths = [chart_champion_matches(results, output_dir)]

    champions = results['summary']['champions'][:max_champions]
    for champion in tqdm(champions, desc="Generating charts", unit="champion"):
        profile = results['profiles'][champion['champion']]
        for relation in ('allies', 'enemies'):
            paths.append(chart_matchups(champion['champion'], profile, relation,
                                        threshold, output_dir))

    return [path for path in paths if path]


def main():
    parser = argparse.ArgumentParser(description='Generate charts from analysis results')
    parser.add_argument('--input', type=str, default=config.OUTPUT_DIR,
                        help='Input directory with the analysis results JSON')
    parser.add_argument('--output', type=str, default=os.path.join(config.OUTPUT_DIR, 'charts'),
                        help='Output directory for charts')
    parser.add_argument('--champions', type=int, default=config.SUMMARY_LIMIT,
                        help='Number of most played champions to chart')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    logger.info("Starting visualization...")
    results = load_results(args.input)
    if results is None:
        raise SystemExit("No analysis results found; run analyze.py first.")

    paths = generate_all_charts(results, args.output, args.champions)
    logger.info(f"\nVisualization complete! {len(paths)} charts written")


if __name__ == '__main__':
    main()

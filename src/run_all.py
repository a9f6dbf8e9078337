"""
Run all pipeline steps: collect -> analyze -> export CSV -> visualize

Convenience script that runs the full pipeline in sequence,
passing through common arguments like --data-dir and --verbose.
"""

import argparse
import subprocess
import sys
import os


def build_steps(src_dir: str, args: argparse.Namespace) -> list:
    """Command lines for each pipeline step, in order"""
    common_args = ['--verbose'] if args.verbose else []
    data_args = ['--data-dir', args.data_dir] if args.data_dir else []

    analyze_args = ['--days', str(args.days)]
    for flag, value in (('--threshold', args.threshold),
                        ('--summary-limit', args.summary_limit),
                        ('--saturation-cap', args.saturation_cap)):
        if value is not None:
            analyze_args += [flag, str(value)]
    if args.allies:
        analyze_args += ['--allies', args.allies]
    if args.enemies:
        analyze_args += ['--enemies', args.enemies]

    steps = []
    if not args.skip_collect:
        steps.append(('Collect', [sys.executable, os.path.join(src_dir, 'collect_matches.py')]
                      + data_args + common_args))
    steps += [
        ('Analyze', [sys.executable, os.path.join(src_dir, 'analyze.py')]
         + data_args + analyze_args + common_args),
        ('Export CSV', [sys.executable, os.path.join(src_dir, 'export_csv.py')] + common_args),
        ('Visualize', [sys.executable, os.path.join(src_dir, 'visualize.py')] + common_args),
    ]
    return steps


def main():
    parser = argparse.ArgumentParser(
        description='Run full pipeline (collect + analyze + export + visualize)')
    parser.add_argument('--data-dir', default=None,
                        help='Match cache directory (default: MATCH_DATA_DIR)')
    parser.add_argument('--days', type=int, default=300,
                        help='Recency window in days (default: 300)')
    parser.add_argument('--threshold', type=int, default=None,
                        help='Minimum matchup samples for the summary (default: analyze.py default)')
    parser.add_argument('--summary-limit', type=int, default=None,
                        help='Entries per best/worst list (default: analyze.py default)')
    parser.add_argument('--saturation-cap', type=int, default=None,
                        help='Matchup samples after which observations are dropped')
    parser.add_argument('--allies', default=None,
                        help='Comma separated ally champions to score against')
    parser.add_argument('--enemies', default=None,
                        help='Comma separated enemy champions to score against')
    parser.add_argument('--skip-collect', action='store_true',
                        help='Analyze the existing cache without calling the Riot API')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()

    src_dir = os.path.dirname(os.path.abspath(__file__))

    for step_name, cmd in build_steps(src_dir, args):
        print(f"\n{'='*60}")
        print(f"  {step_name}")
        print(f"{'='*60}\n")

        result = subprocess.run(cmd)
        if result.returncode != 0:
            print(f"\n{step_name} failed with exit code {result.returncode}")
            sys.exit(result.returncode)

    print(f"\n{'='*60}")
    print("  Pipeline complete!")
    print(f"{'='*60}\n")


if __name__ == '__main__':
    main()

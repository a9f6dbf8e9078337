"""
Step 1: Collect a player's ranked matches from the Riot API

Resolves the player's Riot ID to a PUUID, pages through their ranked solo
match ids and downloads every match that is not cached yet.
"""

import argparse
import logging
import os
import signal
import sys
import time
from typing import Dict, List, Tuple

from tqdm import tqdm

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from config import REGIONS, RANKED_SOLO_QUEUE_ID, MATCH_PAGE_SIZE
from records import MatchStore
from riot_api import RiotAPIClient, TransientAPIError
from utils import setup_logging, format_duration, format_number

logger = logging.getLogger(__name__)

RETRY_PAUSE_SECONDS = 30

_shutdown = False


def _signal_handler(sig, frame):
    global _shutdown
    logger.info("\nShutdown requested, finishing current match...")
    _shutdown = True


def parse_riot_id(riot_id: str) -> Tuple[str, str]:
    """
    Split a Riot ID into game name and tag line

    Raises:
        ValueError: If the Riot ID is not of the form GameName#TAG
    """
    game_name, sep, tag_line = riot_id.strip().rpartition('#')
    if not sep or not game_name or not tag_line:
        raise ValueError(f"Riot ID must look like GameName#TAG, got '{riot_id}'")
    return game_name, tag_line


def resolve_puuid(api: RiotAPIClient, region: str, riot_id: str) -> str:
    """Resolve a Riot ID to the player's PUUID"""
    game_name, tag_line = parse_riot_id(riot_id)
    account = api.get_account_by_riot_id(region, game_name, tag_line)
    if not account or not account.get('puuid'):
        raise LookupError(f"No account found for Riot ID '{riot_id}' in {region}")
    return account['puuid']


def collect_match_ids(api: RiotAPIClient, region: str, puuid: str,
                      page_size: int = MATCH_PAGE_SIZE) -> List[str]:
    """Page through every ranked solo match id of a player, most recent first"""
    match_ids: List[str] = []
    start = 0
    while not _shutdown:
        page = api.get_match_ids_by_puuid(
            region, puuid, queue=RANKED_SOLO_QUEUE_ID,
            start=start, count=page_size
        )
        match_ids.extend(page)
        logger.debug(f"Match id page at {start}: {len(page)} ids")
        if len(page) < page_size:
            break
        start += page_size

    logger.info(f"Match ids found: {format_number(len(match_ids))}")
    return match_ids


def download_match(api: RiotAPIClient, store: MatchStore, region: str, match_id: str) -> bool:
    """Fetch and cache one match. Returns True if stored."""
    match_data = api.get_match(region, match_id)
    if not match_data:
        logger.warning(f"Match {match_id} not found, skipping")
        return False
    store.save_match(match_id, match_data)
    return True


def download_matches(api: RiotAPIClient, store: MatchStore, region: str,
                     match_ids: List[str]) -> Dict[str, int]:
    """
    Download every match not cached yet

    Matches that keep failing with server errors are retried once after a
    pause; whatever still fails is reported and left for the next run.

    Returns:
        Counts of 'saved', 'cached' and 'failed' matches
    """
    counts = {'saved': 0, 'cached': 0, 'failed': 0}
    failed: List[str] = []

    pbar = tqdm(match_ids, desc="Downloading matches", unit="match")
    for match_id in pbar:
        if _shutdown:
            break
        if store.has_match(match_id):
            counts['cached'] += 1
            continue
        try:
            if download_match(api, store, region, match_id):
                counts['saved'] += 1
        except TransientAPIError:
            logger.warning(f"Transient failure fetching {match_id}, queuing for retry")
            failed.append(match_id)
        pbar.set_postfix(saved=counts['saved'])
    pbar.close()

    if failed and not _shutdown:
        logger.info(f"Retrying {len(failed)} failed matches after {RETRY_PAUSE_SECONDS}s pause...")
        time.sleep(RETRY_PAUSE_SECONDS)
        still_failed = []
        for match_id in failed:
            try:
                if download_match(api, store, region, match_id):
                    counts['saved'] += 1
            except TransientAPIError:
                still_failed.append(match_id)
        failed = still_failed

    counts['failed'] = len(failed)
    for match_id in failed:
        logger.warning(f"Match {match_id} still unreachable, it will be retried next run")
    return counts


def main():
    parser = argparse.ArgumentParser(description='Collect ranked match data from Riot API')
    parser.add_argument('--riot-id', default=config.RIOT_ID,
                        help='Player Riot ID, GameName#TAG (default: RIOT_ID env var)')
    parser.add_argument('--region', choices=list(REGIONS.keys()), default=config.RIOT_REGION,
                        help=f'Region to query (default: {config.RIOT_REGION})')
    parser.add_argument('--data-dir', default=config.MATCH_DATA_DIR,
                        help=f'Match cache directory (default: {config.MATCH_DATA_DIR})')
    parser.add_argument('--dev-key', action='store_true',
                        help='Use conservative dev key rate limits')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--log-file', type=str,
                        help='Write logs to file')

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    signal.signal(signal.SIGINT, _signal_handler)

    errors = config.validate_config()
    if not args.riot_id:
        errors.append("No Riot ID given (--riot-id or RIOT_ID env var)")
    if errors:
        for error in errors:
            logger.error(error)
        raise SystemExit(1)

    logger.info(f"Starting match collection for {args.riot_id} ({args.region})...")
    start_time = time.time()

    store = MatchStore(args.data_dir)
    api = RiotAPIClient(use_dev_key=args.dev_key)
    try:
        puuid = resolve_puuid(api, args.region, args.riot_id)
        store.save_player(puuid, args.riot_id, args.region)

        match_ids = collect_match_ids(api, args.region, puuid)
        counts = download_matches(api, store, args.region, match_ids)
    finally:
        api.close()

    elapsed = time.time() - start_time
    logger.info(f"\n{'='*60}")
    logger.info("COLLECTION SUMMARY")
    logger.info(f"{'='*60}")
    logger.info(f"New matches saved: {format_number(counts['saved'])}")
    logger.info(f"Already cached:    {format_number(counts['cached'])}")
    logger.info(f"Failed:            {format_number(counts['failed'])}")
    logger.info(f"Time elapsed: {format_duration(int(elapsed))}")
    logger.info(f"Total matches in cache: {format_number(store.count())}")


if __name__ == '__main__':
    main()

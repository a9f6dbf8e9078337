"""
Aggregation of cached matches into per-champion profiles
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from tqdm import tqdm

import config
from records import MatchRecord, Participant
from stats import ChampionProfile

logger = logging.getLogger(__name__)

PROGRESS_LOG_INTERVAL = 10


def split_teams(record: MatchRecord, player: Participant):
    """
    Partition the other participants of a match into allies and enemies

    Team membership is compared by team id, so either side may be the player's.

    Returns:
        (allies, enemies) lists of participants
    """
    allies = []
    enemies = []
    for participant in record.participants:
        if participant is player:
            continue
        if participant.team_id == player.team_id:
            allies.append(participant)
        else:
            enemies.append(participant)
    return allies, enemies


def find_player(record: MatchRecord, target_player_id: str) -> Optional[Participant]:
    """Return the first participant matching the player id, if any"""
    for participant in record.participants:
        if participant.puuid == target_player_id:
            return participant
    return None


class ChampionAggregator:
    """
    Builds ChampionProfiles for one player from a most-recent-first match sequence

    Processing stops at the first match older than `recency_limit` relative to
    the most recent match. Matchups that reached `saturation_cap` samples stop
    counting for the rest of the run.
    """

    def __init__(self, target_player_id: str,
                 recency_limit: timedelta = timedelta(days=config.DEFAULT_RECENCY_DAYS),
                 saturation_cap: int = config.SATURATION_CAP):
        self.target_player_id = target_player_id
        self.recency_limit = recency_limit
        self.saturation_cap = saturation_cap
        self.profiles: Dict[str, ChampionProfile] = {}
        self._reset_counters()

    def _reset_counters(self):
        self.records_seen = 0
        self.records_processed = 0
        self.records_skipped_no_player = 0
        self.matchups_saturated = 0
        self.window_reached_at: Optional[datetime] = None

    def run(self, records: Iterable[MatchRecord],
            total: Optional[int] = None) -> Dict[str, ChampionProfile]:
        """
        Aggregate a sequence of matches, most recent first

        Args:
            records: Matches ordered most recent first; parsed lazily by the caller
            total: Number of records, if known, to display a progress bar

        Returns:
            Mapping of champion name to ChampionProfile

        Raises:
            MatchParseError, OSError: From the record source; the run is aborted
        """
        self.profiles = {}
        self._reset_counters()

        anchor: Optional[datetime] = None
        if total is not None:
            records = tqdm(records, total=total, desc="Analyzing matches",
                           unit="match", leave=False)

        for record in records:
            self.records_seen += 1
            cursor = record.created_at
            if anchor is None:
                anchor = cursor
            if anchor - cursor > self.recency_limit:
                self.window_reached_at = cursor
                logger.info(f"Duration limit reached at {cursor:%Y-%m-%d %H:%M}")
                break

            if self.records_seen % PROGRESS_LOG_INTERVAL == 1:
                logger.debug(f"Analyzing match {self.records_seen} -> {cursor:%Y-%m-%d %H:%M}...")

            if self.add_match(record):
                self.records_processed += 1
            else:
                self.records_skipped_no_player += 1

        logger.info(
            f"Analysis complete. Matches read: {self.records_seen}, "
            f"aggregated: {self.records_processed}, "
            f"without player: {self.records_skipped_no_player}, "
            f"champions: {len(self.profiles)}"
        )
        return self.profiles

    def add_match(self, record: MatchRecord) -> bool:
        """
        Add one match from the target player's perspective

        Returns:
            False if the player did not take part in the match
        """
        player = find_player(record, self.target_player_id)
        if player is None:
            return False

        profile = self.profile(player.champion_name)
        profile.add_match(player.win)

        allies, enemies = split_teams(record, player)
        for ally in allies:
            self._record(profile.ally(ally.champion_name), player.win)
        for enemy in enemies:
            self._record(profile.enemy(enemy.champion_name), player.win)
        return True

    def profile(self, champion_name: str) -> ChampionProfile:
        """Get the profile for a champion, creating it on first use"""
        profile = self.profiles.get(champion_name)
        if profile is None:
            profile = ChampionProfile(saturation_cap=self.saturation_cap)
            self.profiles[champion_name] = profile
        return profile

    def _record(self, accumulator, win: bool) -> None:
        if not accumulator.record(win):
            self.matchups_saturated += 1

    def summary_counts(self) -> Dict[str, object]:
        return {
            'records_seen': self.records_seen,
            'records_processed': self.records_processed,
            'records_skipped_no_player': self.records_skipped_no_player,
            'matchups_saturated': self.matchups_saturated,
            'window_reached_at': (self.window_reached_at.isoformat()
                                  if self.window_reached_at else None),
        }


def aggregate(records: Iterable[MatchRecord], target_player_id: str,
              recency_limit: timedelta, saturation_cap: int) -> Dict[str, ChampionProfile]:
    """Run a fresh ChampionAggregator over the records"""
    aggregator = ChampionAggregator(target_player_id, recency_limit, saturation_cap)
    return aggregator.run(records)

"""
Local match cache and match-v5 record parsing

Each downloaded match is stored as one pretty-printed JSON file named after
its match id. Reading the cache yields MatchRecords most recent first, using
the file name (the match id) as the recency key.
"""
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import config

logger = logging.getLogger(__name__)


class MatchParseError(ValueError):
    """A cached match document is unreadable or missing required fields"""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


@dataclass(frozen=True)
class Participant:
    champion_name: str
    puuid: str
    team_id: int
    win: bool


@dataclass(frozen=True)
class MatchRecord:
    match_id: str
    created_at: datetime
    participants: List[Participant]


def _match_sort_key(file_name: str) -> tuple:
    """Order match files by platform, then by numeric game id"""
    prefix, _, game_id = file_name[:-len('.json')].rpartition('_')
    return prefix, game_id.rjust(20, '0')


def _require(container: Dict[str, Any], key: str, source: str) -> Any:
    if not isinstance(container, dict) or key not in container or container[key] is None:
        raise MatchParseError(source, f"missing field '{key}'")
    return container[key]


def parse_match(data: Dict[str, Any], source: Optional[str] = None) -> MatchRecord:
    """
    Parse a match-v5 match document

    Args:
        data: Decoded JSON of a match-v5 match
        source: Label used in error messages (file path or match id)

    Returns:
        MatchRecord

    Raises:
        MatchParseError: If a required field is missing or malformed
    """
    source = source or '<match>'
    metadata = _require(data, 'metadata', source)
    info = _require(data, 'info', source)
    match_id = str(_require(metadata, 'matchId', source))

    try:
        game_creation = int(_require(info, 'gameCreation', source))
    except (TypeError, ValueError):
        raise MatchParseError(source, "field 'gameCreation' is not an epoch timestamp")
    created_at = datetime.fromtimestamp(game_creation / 1000, tz=timezone.utc)

    participants = []
    for entry in _require(info, 'participants', source):
        participants.append(Participant(
            champion_name=str(_require(entry, 'championName', source)),
            puuid=str(_require(entry, 'puuid', source)),
            team_id=int(_require(entry, 'teamId', source)),
            win=bool(_require(entry, 'win', source)),
        ))

    return MatchRecord(match_id=match_id, created_at=created_at, participants=participants)


class MatchStore:
    """Directory of cached match-v5 JSON documents for one player"""

    def __init__(self, data_dir: str = config.MATCH_DATA_DIR):
        self.data_dir = data_dir

    def ensure_dir(self) -> None:
        os.makedirs(self.data_dir, exist_ok=True)

    def match_path(self, match_id: str) -> str:
        return os.path.join(self.data_dir, f"{match_id}.json")

    def has_match(self, match_id: str) -> bool:
        return os.path.exists(self.match_path(match_id))

    def save_match(self, match_id: str, data: Dict[str, Any]) -> str:
        """Write a match document to the cache and return its path"""
        self.ensure_dir()
        path = self.match_path(match_id)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved match {match_id} to {path}")
        return path

    def match_files(self) -> List[str]:
        """
        List cached match files, most recent first

        Raises:
            FileNotFoundError: If the data directory does not exist
        """
        if not os.path.isdir(self.data_dir):
            raise FileNotFoundError(f"Match data directory not found: {self.data_dir}")
        names = [
            name for name in os.listdir(self.data_dir)
            if name.endswith('.json') and name != config.PLAYER_FILE_NAME
        ]
        names.sort(key=_match_sort_key, reverse=True)
        return [os.path.join(self.data_dir, name) for name in names]

    def count(self) -> int:
        return len(self.match_files())

    def load_record(self, path: str) -> MatchRecord:
        """
        Read and parse one cached match

        Raises:
            OSError: If the file cannot be read
            MatchParseError: If the file is not a valid match document
        """
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise MatchParseError(path, f"invalid JSON ({e})")
        return parse_match(data, source=path)

    def iter_records(self) -> Iterator[MatchRecord]:
        """Yield cached matches most recent first, parsing each file on demand"""
        for path in self.match_files():
            yield self.load_record(path)

    # Player identity saved next to the cached matches

    def player_path(self) -> str:
        return os.path.join(self.data_dir, config.PLAYER_FILE_NAME)

    def save_player(self, puuid: str, riot_id: str, region: str) -> None:
        self.ensure_dir()
        with open(self.player_path(), 'w', encoding='utf-8') as f:
            json.dump({'puuid': puuid, 'riot_id': riot_id, 'region': region}, f, indent=2)

    def load_player(self) -> Optional[Dict[str, str]]:
        """Load the saved player identity, or None if the cache has none"""
        path = self.player_path()
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

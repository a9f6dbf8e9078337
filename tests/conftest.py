from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from records import MatchRecord, Participant

PLAYER = "puuid-player"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_match(
    match_id: str,
    day: int,
    champion: str,
    win: bool,
    allies: Optional[List[str]] = None,
    enemies: Optional[List[str]] = None,
    player_team: int = 100,
    player: str = PLAYER,
) -> MatchRecord:
    enemy_team = 200 if player_team == 100 else 100
    participants = [Participant(champion, player, player_team, win)]
    for i, name in enumerate(allies or []):
        participants.append(Participant(name, f"ally-{i}", player_team, win))
    for i, name in enumerate(enemies or []):
        participants.append(Participant(name, f"enemy-{i}", enemy_team, not win))
    return MatchRecord(
        match_id=match_id,
        created_at=BASE_TIME + timedelta(days=day),
        participants=participants,
    )


def match_document(match_id: str, game_creation: int, participants: List[dict]) -> dict:
    return {
        "metadata": {"matchId": match_id, "participants": [p["puuid"] for p in participants]},
        "info": {"gameCreation": game_creation, "queueId": 420, "participants": participants},
    }


def participant_document(champion: str, puuid: str, team_id: int, win: bool) -> dict:
    return {"championName": champion, "puuid": puuid, "teamId": team_id, "win": win}


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_document():
    def _make(match_id: str, game_creation: int = 1704067200000) -> dict:
        return match_document(
            match_id,
            game_creation,
            [
                participant_document("Ashe", PLAYER, 100, True),
                participant_document("Lulu", "ally-0", 100, True),
                participant_document("Zed", "enemy-0", 200, False),
            ],
        )

    return _make

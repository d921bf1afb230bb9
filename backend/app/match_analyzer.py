from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from app.csv_parser import Record
from app.dataset import FIELD_PLAYER, FIELD_TEAM, FIELD_WINNER


def winner_votes(records: Iterable[Record]) -> Dict[str, int]:
    """Tally of non-empty ``GANADOR`` values, in first-seen order."""
    votes: Dict[str, int] = {}
    for record in records:
        vote = record.get(FIELD_WINNER, "")
        if vote:
            votes[vote] = votes.get(vote, 0) + 1
    return votes


def determine_winner(records: Iterable[Record]) -> Optional[str]:
    """Plurality winner of a match, or None when nobody voted.

    Ties go to the team whose vote was seen first; a later team must have
    strictly more votes to take over.
    """
    winner: Optional[str] = None
    best = 0
    for team, count in winner_votes(records).items():
        if count > best:
            winner = team
            best = count
    return winner


def teams_in_match(records: Iterable[Record]) -> List[str]:
    teams: List[str] = []
    for record in records:
        team = record.get(FIELD_TEAM, "")
        if team and team not in teams:
            teams.append(team)
    return teams


def players_by_team_in_match(team: str, records: Iterable[Record]) -> List[str]:
    players: List[str] = []
    for record in records:
        if record.get(FIELD_TEAM, "") != team:
            continue
        player = record.get(FIELD_PLAYER, "")
        if player and player not in players:
            players.append(player)
    return players


def team_stats_in_match(team: str, records: Iterable[Record]) -> Dict[str, int]:
    # "wins" is the team's own vote count, which is what the bracket cards show.
    rows = list(records)
    return {
        "wins": winner_votes(rows).get(team, 0),
        "player_count": len(players_by_team_in_match(team, rows)),
    }

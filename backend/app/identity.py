from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.csv_parser import Record
from app.dataset import FIELD_PLAYER, FIELD_TEAM, TournamentDataset


@dataclass(frozen=True)
class Identities:
    teams: Tuple[str, ...]
    players: Tuple[str, ...]


def _unique(values) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


def resolve_identities(dataset: TournamentDataset) -> Identities:
    """Distinct team and player names across every loaded match.

    Names compare by exact string equality. Order is first appearance: phase
    order, then file order, then row order. Rows with an empty name are not
    identities.
    """
    records = list(dataset.iter_records())
    return Identities(
        teams=tuple(_unique(record.get(FIELD_TEAM, "") for record in records)),
        players=tuple(_unique(record.get(FIELD_PLAYER, "") for record in records)),
    )


def name_frequencies(dataset: TournamentDataset, field: str = FIELD_PLAYER) -> Dict[str, int]:
    # Occurrence counts only; variants like "Moon" / "M00N" are never merged.
    counts = Counter(
        record.get(field, "") for record in dataset.iter_records() if record.get(field, "")
    )
    return dict(counts)


def teams_in_phase(dataset: TournamentDataset, phase: str) -> List[str]:
    return _unique(record.get(FIELD_TEAM, "") for record in dataset.iter_records(phase))


def players_in_phase(dataset: TournamentDataset, phase: str) -> List[str]:
    return _unique(record.get(FIELD_PLAYER, "") for record in dataset.iter_records(phase))


def players_by_team(dataset: TournamentDataset, team: str) -> List[str]:
    return _unique(
        record.get(FIELD_PLAYER, "")
        for record in dataset.iter_records()
        if record.get(FIELD_TEAM, "") == team
    )


def first_record_for_player(dataset: TournamentDataset, player: str) -> Optional[Record]:
    for record in dataset.iter_records():
        if record.get(FIELD_PLAYER, "") == player:
            return record
    return None


def first_record_for_team(dataset: TournamentDataset, team: str) -> Optional[Record]:
    for record in dataset.iter_records():
        if record.get(FIELD_TEAM, "") == team:
            return record
    return None

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.dataset import TournamentDataset
from app.identity import (
    first_record_for_player,
    first_record_for_team,
    name_frequencies,
    players_by_team,
    players_in_phase,
    resolve_identities,
    teams_in_phase,
)


def _build_row(team: str, player: str, kills: int = 0) -> Dict[str, str]:
    return {"EQUIPO": team, "JUGADOR": player, "Eliminaciones": str(kills)}


def _build_dataset() -> TournamentDataset:
    return TournamentDataset.from_raw(
        {
            "cuartos": {
                "Q1M1.csv": [_build_row("Wolves", "Moon", 3), _build_row("Tigers", "Sun")],
                "Q1M2.csv": [_build_row("Wolves", "M00N", 1), _build_row("", "")],
            },
            "semifinal": {
                "S1M1.csv": [_build_row("Wolves", "Moon", 7), _build_row("Lions", "Star")],
            },
        }
    )


def test_identities_are_distinct_in_first_seen_order() -> None:
    identities = resolve_identities(_build_dataset())

    assert identities.teams == ("Wolves", "Tigers", "Lions")
    assert identities.players == ("Moon", "Sun", "M00N", "Star")


def test_name_variants_are_counted_but_not_merged() -> None:
    dataset = _build_dataset()

    assert name_frequencies(dataset) == {"Moon": 2, "Sun": 1, "M00N": 1, "Star": 1}
    assert name_frequencies(dataset, "EQUIPO")["Wolves"] == 3
    assert "M00N" in resolve_identities(dataset).players


def test_phase_and_team_lookups() -> None:
    dataset = _build_dataset()

    assert teams_in_phase(dataset, "semifinal") == ["Wolves", "Lions"]
    assert players_in_phase(dataset, "cuartos") == ["Moon", "Sun", "M00N"]
    assert players_by_team(dataset, "Wolves") == ["Moon", "M00N"]
    assert players_by_team(dataset, "Nobody") == []


def test_first_record_lookups() -> None:
    dataset = _build_dataset()

    assert first_record_for_player(dataset, "Moon")["Eliminaciones"] == "3"
    assert first_record_for_team(dataset, "Lions")["JUGADOR"] == "Star"
    assert first_record_for_player(dataset, "Ghost") is None

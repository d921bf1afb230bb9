from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.analyzer import Scope, TournamentAnalyzer
from app.dataset import TournamentDataset
from app.view_state import (
    DashboardState,
    filtered_players,
    filtered_teams,
    reduce_state,
    search,
    stats_scope,
)


def _build_row(team: str, player: str) -> Dict[str, str]:
    return {"EQUIPO": team, "JUGADOR": player, "Eliminaciones": "1"}


def _build_analyzer() -> TournamentAnalyzer:
    return TournamentAnalyzer(
        TournamentDataset.from_raw(
            {
                "cuartos": {
                    "Q1M1.csv": [_build_row("Wolves", "Moon"), _build_row("Tigers", "Sun")],
                },
                "semifinal": {
                    "S1M1.csv": [_build_row("Wolves", "Moonlight"), _build_row("Lions", "Star")],
                },
            }
        )
    )


def test_reducer_returns_new_state_without_mutating() -> None:
    state = DashboardState()

    updated = reduce_state(state, "set_team_filter", "Wolves")

    assert updated.team == "Wolves"
    assert state.team == "all"
    assert updated is not state


def test_changing_phase_clears_bracket() -> None:
    state = reduce_state(DashboardState(), "set_phase", "cuartos")
    state = reduce_state(state, "set_bracket", "Q1M1")
    assert state.bracket == "Q1M1"

    state = reduce_state(state, "set_phase", "semifinal")
    assert state.phase == "semifinal"
    assert state.bracket == ""


def test_reset_and_empty_values_fall_back_to_defaults() -> None:
    state = DashboardState(phase="final", team="Wolves", player="Moon", search="x")

    assert reduce_state(state, "reset") == DashboardState()
    assert reduce_state(state, "set_player_filter", None).player == "all"
    assert reduce_state(state, "set_search", "  moon ").search == "moon"


def test_unknown_action_raises() -> None:
    with pytest.raises(ValueError):
        reduce_state(DashboardState(), "set_colour", "red")


def test_stats_scope_follows_phase_and_bracket() -> None:
    assert stats_scope(DashboardState()) == Scope()
    assert stats_scope(DashboardState(phase="final")) == Scope(phase="final")
    assert stats_scope(DashboardState(phase="cuartos", bracket="Q1M1")) == Scope(
        phase="cuartos", match_id="Q1M1"
    )


def test_filtered_teams_and_players() -> None:
    analyzer = _build_analyzer()

    assert filtered_teams(DashboardState(), analyzer) == ["Wolves", "Tigers", "Lions"]
    assert filtered_teams(DashboardState(phase="semifinal"), analyzer) == ["Wolves", "Lions"]
    assert filtered_teams(DashboardState(team="Tigers"), analyzer) == ["Tigers"]

    assert filtered_players(DashboardState(team="Wolves"), analyzer) == ["Moon", "Moonlight"]
    assert filtered_players(
        DashboardState(phase="cuartos", team="Wolves"), analyzer
    ) == ["Moon"]
    assert filtered_players(DashboardState(player="Star"), analyzer) == ["Star"]


def test_search_is_case_insensitive_substring() -> None:
    analyzer = _build_analyzer()

    result = search(DashboardState(search="moon"), analyzer)
    assert result == {"teams": [], "players": ["Moon", "Moonlight"]}
    assert search(DashboardState(search="WOL"), analyzer)["teams"] == ["Wolves"]
    assert search(DashboardState(), analyzer) == {"teams": [], "players": []}

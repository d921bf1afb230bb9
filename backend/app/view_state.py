from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from app.analyzer import Scope, TournamentAnalyzer

ALL_FILTER = "all"


@dataclass(frozen=True)
class DashboardState:
    """Current dashboard selection. Replaced, never mutated, on every change."""

    phase: str = ALL_FILTER
    bracket: str = ""
    team: str = ALL_FILTER
    player: str = ALL_FILTER
    search: str = ""


def reduce_state(state: DashboardState, action: str, value: Optional[str] = None) -> DashboardState:
    """Return the state that follows ``action``.

    Changing phase drops the bracket selection, since bracket ids belong to a
    single phase.
    """
    if action == "set_phase":
        return replace(state, phase=value or ALL_FILTER, bracket="")
    if action == "set_bracket":
        return replace(state, bracket=value or "")
    if action == "set_team_filter":
        return replace(state, team=value or ALL_FILTER)
    if action == "set_player_filter":
        return replace(state, player=value or ALL_FILTER)
    if action == "set_search":
        return replace(state, search=(value or "").strip())
    if action == "reset":
        return DashboardState()
    raise ValueError(f"Unknown dashboard action: {action}")


def stats_scope(state: DashboardState) -> Scope:
    phase = None if state.phase == ALL_FILTER else state.phase
    match_id = state.bracket or None
    return Scope(phase=phase, match_id=match_id)


def filtered_teams(state: DashboardState, analyzer: TournamentAnalyzer) -> List[str]:
    teams = analyzer.team_names(stats_scope(state))
    if state.team != ALL_FILTER:
        teams = [team for team in teams if team == state.team]
    return teams


def filtered_players(state: DashboardState, analyzer: TournamentAnalyzer) -> List[str]:
    scope = stats_scope(state)
    players = analyzer.player_names(scope)
    if state.team != ALL_FILTER:
        roster = set(analyzer.player_names_for_team(state.team, scope))
        players = [player for player in players if player in roster]
    if state.player != ALL_FILTER:
        players = [player for player in players if player == state.player]
    return players


def search(state: DashboardState, analyzer: TournamentAnalyzer) -> Dict[str, List[str]]:
    term = state.search.lower()
    if not term:
        return {"teams": [], "players": []}
    identities = analyzer.identities
    return {
        "teams": [team for team in identities.teams if term in team.lower()],
        "players": [player for player in identities.players if term in player.lower()],
    }

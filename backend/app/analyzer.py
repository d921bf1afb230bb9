from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from dataclasses import dataclass
import logging
import math
import time

import numpy as np
import pandas as pd

from app.csv_parser import parse_float, parse_int
from app.dataset import (
    FIELD_ASSISTS,
    FIELD_CROWD_CONTROL,
    FIELD_DAMAGE,
    FIELD_DEATHS,
    FIELD_GOLD,
    FIELD_KILLS,
    FIELD_PARTICIPATION,
    FIELD_PLAYER,
    FIELD_TEAM,
    FIELD_TOWER_DAMAGE,
    FIELD_WINNER,
    PHASE_LABELS,
    TournamentDataset,
)
from app.identity import Identities, resolve_identities
from app.match_analyzer import (
    determine_winner,
    players_by_team_in_match,
    team_stats_in_match,
    teams_in_match,
)
from app.models import (
    DashboardSnapshot,
    EntityStats,
    FeaturedPlayer,
    MatchSummary,
    PhaseProgression,
    PlayerShare,
    RadarData,
    TeamInMatch,
    TournamentSummary,
)
from app import rankings

logger = logging.getLogger(__name__)

ROW_COLUMNS = [
    "phase",
    "match_id",
    "team",
    "player",
    "kills",
    "deaths",
    "assists",
    "damage",
    "gold",
    "participation",
    "crowd_control",
    "tower_damage",
    "winner",
]
INT_COLUMNS = ["kills", "deaths", "assists", "damage", "gold", "crowd_control", "tower_damage"]

# A team's per-match participation, crowd control and tower damage are summed
# over its roster and divided by this, whatever the number of rows present.
ROSTER_SIZE = 5

TEAM_RADAR_LABELS = ["Eliminaciones", "Daño", "Oro", "Participación", "Control de Masas"]
PLAYER_RADAR_LABELS = TEAM_RADAR_LABELS + ["Daño a Torres"]

# Lower bounds for the radar scale so a weak field does not look maxed out.
TEAM_RADAR_FLOORS = {"kills": 50, "damage": 30000, "gold": 15000, "crowd_control": 100}
PLAYER_RADAR_FLOORS = {
    "kills": 10,
    "damage": 30000,
    "gold": 15000,
    "crowd_control": 100,
    "tower_damage": 5000,
}


def _convert_to_serializable(obj: Any) -> Any:
    """Recursively convert numpy/pandas types to native Python types for JSON serialization."""
    if isinstance(obj, dict):
        return {k: _convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_to_serializable(v) for v in obj]
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif obj is None or (isinstance(obj, float) and pd.isna(obj)):
        return None
    return obj


def _round_half_up(value: float) -> int:
    if math.isnan(value):
        return 0
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Scope:
    """Which matches an aggregation covers. Empty scope means the whole tournament."""

    phase: Optional[str] = None
    match_id: Optional[str] = None


ALL = Scope()


class TournamentAnalyzer:
    """Aggregate team and player statistics over a loaded tournament."""

    def __init__(self, dataset: TournamentDataset) -> None:
        self.dataset = dataset
        self.df_rows = pd.DataFrame(columns=ROW_COLUMNS)
        self._winners: Dict[Tuple[str, str], Optional[str]] = {}
        self._normalize_data()

    def _normalize_data(self) -> None:
        t0 = time.perf_counter()
        rows: List[Dict] = []
        for match in self.dataset.iter_matches():
            self._winners[(match.phase, match.match_id)] = determine_winner(match.records)
            for record in match.records:
                rows.append(
                    {
                        "phase": match.phase,
                        "match_id": match.match_id,
                        "team": record.get(FIELD_TEAM, ""),
                        "player": record.get(FIELD_PLAYER, ""),
                        "kills": parse_int(record.get(FIELD_KILLS)),
                        "deaths": parse_int(record.get(FIELD_DEATHS)),
                        "assists": parse_int(record.get(FIELD_ASSISTS)),
                        "damage": parse_int(record.get(FIELD_DAMAGE)),
                        "gold": parse_int(record.get(FIELD_GOLD)),
                        "participation": parse_float(record.get(FIELD_PARTICIPATION)),
                        "crowd_control": parse_int(record.get(FIELD_CROWD_CONTROL)),
                        "tower_damage": parse_int(record.get(FIELD_TOWER_DAMAGE)),
                        "winner": record.get(FIELD_WINNER, ""),
                    }
                )

        df = pd.DataFrame(rows, columns=ROW_COLUMNS)
        df[INT_COLUMNS] = df[INT_COLUMNS].astype("int64")
        df["participation"] = df["participation"].astype("float64")
        self.df_rows = df
        logger.info(
            f"[ANALYZER TIMING] _normalize_data: {time.perf_counter() - t0:.2f}s "
            f"({self.dataset.match_count} matches, {len(rows)} rows)"
        )

    def _scoped(self, scope: Scope) -> pd.DataFrame:
        df = self.df_rows
        if scope.phase is not None:
            df = df[df["phase"] == scope.phase]
        if scope.match_id is not None:
            df = df[df["match_id"] == scope.match_id]
        return df

    def _scoped_match_keys(self, scope: Scope) -> List[Tuple[str, str]]:
        keys = []
        for match in self.dataset.iter_matches(scope.phase):
            if scope.match_id is not None and match.match_id != scope.match_id:
                continue
            keys.append((match.phase, match.match_id))
        return keys

    @property
    def identities(self) -> Identities:
        return resolve_identities(self.dataset)

    def team_names(self, scope: Scope = ALL) -> List[str]:
        names = self._scoped(scope)["team"]
        return [name for name in pd.unique(names) if name]

    def player_names(self, scope: Scope = ALL) -> List[str]:
        names = self._scoped(scope)["player"]
        return [name for name in pd.unique(names) if name]

    def player_names_for_team(self, team: str, scope: Scope = ALL) -> List[str]:
        rows = self._scoped(scope)
        names = rows[rows["team"] == team]["player"]
        return [name for name in pd.unique(names) if name]

    # Accumulated statistics

    def _accumulate(self, rows: pd.DataFrame, roster_divisor: int) -> Dict[str, Any]:
        per_match = rows.groupby(["phase", "match_id"], sort=False).agg(
            kills=("kills", "sum"),
            deaths=("deaths", "sum"),
            assists=("assists", "sum"),
            damage=("damage", "sum"),
            gold=("gold", "sum"),
            participation=("participation", "sum"),
            crowd_control=("crowd_control", "sum"),
            tower_damage=("tower_damage", "sum"),
        )
        matches = len(per_match)
        totals = {
            "matches": matches,
            "kills": per_match["kills"].sum(),
            "deaths": per_match["deaths"].sum(),
            "assists": per_match["assists"].sum(),
            "total_damage": per_match["damage"].sum(),
            "total_gold": per_match["gold"].sum(),
            "total_participation": (per_match["participation"] / roster_divisor).sum(),
            "total_crowd_control": (per_match["crowd_control"] / roster_divisor).sum(),
            "total_tower_damage": (per_match["tower_damage"] / roster_divisor).sum(),
        }
        totals = _convert_to_serializable(totals)
        totals.update(
            {
                "avg_kills": totals["kills"] / matches,
                "avg_deaths": totals["deaths"] / matches,
                "avg_assists": totals["assists"] / matches,
                "avg_damage": totals["total_damage"] / matches,
                "avg_gold": totals["total_gold"] / matches,
                "avg_participation": totals["total_participation"] / matches,
                "avg_crowd_control": totals["total_crowd_control"] / matches,
                "avg_tower_damage": totals["total_tower_damage"] / matches,
                "kda": round((totals["kills"] + totals["assists"]) / max(totals["deaths"], 1), 2),
            }
        )
        return totals

    def team_stats(self, name: str, scope: Scope = ALL) -> EntityStats:
        rows = self._scoped(scope)
        rows = rows[rows["team"] == name]
        if rows.empty:
            return EntityStats(name=name)

        totals = self._accumulate(rows, ROSTER_SIZE)
        keys = rows[["phase", "match_id"]].drop_duplicates().itertuples(index=False)
        totals["wins"] = sum(1 for key in keys if self._winners.get(tuple(key)) == name)
        return EntityStats(name=name, **totals)

    def player_stats(self, name: str, scope: Scope = ALL) -> EntityStats:
        """Player totals. Roster metrics are the player's own values, not fifths of a team sum."""
        rows = self._scoped(scope)
        rows = rows[rows["player"] == name]
        if rows.empty:
            return EntityStats(name=name)

        totals = self._accumulate(rows, 1)
        # The team the player was listed under last in each match decides that match's win.
        last_team = rows.groupby(["phase", "match_id"], sort=False)["team"].last()
        totals["wins"] = sum(
            1 for key, team in last_team.items() if team and self._winners.get(key) == team
        )
        totals["team"] = str(rows["team"].iloc[-1]) or None
        return EntityStats(name=name, **totals)

    def team_wins(self, name: str, scope: Scope = ALL) -> int:
        """Matches in scope whose plurality winner is ``name``, rows for the team or not.

        ``team_stats().wins``, which the team tables and best-team score use,
        only counts matches where the team has rows.
        """
        return sum(1 for key in self._scoped_match_keys(scope) if self._winners.get(key) == name)

    def winner(self, match_id: str) -> Optional[str]:
        match = self.dataset.get_match(match_id)
        if match is None:
            return None
        return self._winners.get((match.phase, match.match_id))

    def gold_efficiency(self, name: str, scope: Scope = ALL) -> float:
        return rankings.gold_efficiency(self.team_stats(name, scope))

    def team_phase_progression(self, name: str) -> PhaseProgression:
        phases = self.dataset.phase_names()
        return PhaseProgression(
            team=name,
            phases=phases,
            labels=[PHASE_LABELS.get(phase, phase) for phase in phases],
            total_damage=[self.team_stats(name, Scope(phase=phase)).total_damage for phase in phases],
        )

    def player_team_share(self, player: str, team: str, scope: Scope = ALL) -> PlayerShare:
        player_stats = self.player_stats(player, scope)
        team_stats = self.team_stats(team, scope)

        def percent(part: float, whole: float) -> float:
            return round(part / whole * 100, 1) if whole > 0 else 0.0

        return PlayerShare(
            player=player,
            team=team,
            kills_percent=percent(player_stats.kills, team_stats.kills),
            assists_percent=percent(player_stats.assists, team_stats.assists),
            damage_percent=percent(player_stats.total_damage, team_stats.total_damage),
        )

    def tournament_summary(self) -> TournamentSummary:
        identities = self.identities
        total_matches = self.dataset.match_count
        df = self.df_rows
        if total_matches == 0:
            return TournamentSummary(
                total_teams=len(identities.teams), total_players=len(identities.players)
            )
        return TournamentSummary(
            total_matches=total_matches,
            total_teams=len(identities.teams),
            total_players=len(identities.players),
            avg_kills=_round_half_up(int(df["kills"].sum()) / total_matches),
            avg_damage=_round_half_up(int(df["damage"].sum()) / total_matches),
            highest_kills=int(df["kills"].max()) if not df.empty else 0,
        )

    # Radar normalisation

    def team_radar(self, name: str, scope: Scope = ALL) -> RadarData:
        """Values on a 0-100 scale relative to the strongest team in scope.

        Participation is already a percentage and passes through unscaled;
        nothing is capped at 100.
        """
        population = [self.team_stats(team, scope) for team in self.team_names(scope)]
        stats = self.team_stats(name, scope)
        scale = _radar_scale(population, TEAM_RADAR_FLOORS)
        return RadarData(
            name=name,
            labels=list(TEAM_RADAR_LABELS),
            values=[
                stats.avg_kills / scale["kills"] * 100,
                stats.avg_damage / scale["damage"] * 100,
                stats.avg_gold / scale["gold"] * 100,
                stats.avg_participation,
                stats.avg_crowd_control / scale["crowd_control"] * 100,
            ],
        )

    def player_radar(self, name: str, scope: Scope = ALL) -> RadarData:
        population = [self.player_stats(player, scope) for player in self.player_names(scope)]
        stats = self.player_stats(name, scope)
        scale = _radar_scale(population, PLAYER_RADAR_FLOORS)
        return RadarData(
            name=name,
            labels=list(PLAYER_RADAR_LABELS),
            values=[
                stats.avg_kills / scale["kills"] * 100,
                stats.avg_damage / scale["damage"] * 100,
                stats.avg_gold / scale["gold"] * 100,
                stats.avg_participation,
                stats.avg_crowd_control / scale["crowd_control"] * 100,
                stats.avg_tower_damage / scale["tower_damage"] * 100,
            ],
        )

    # Bracket and tables

    def match_summaries(self, phase: Optional[str] = None) -> List[MatchSummary]:
        summaries: List[MatchSummary] = []
        for match in self.dataset.iter_matches(phase):
            teams = []
            for team in teams_in_match(match.records):
                in_match = team_stats_in_match(team, match.records)
                teams.append(
                    TeamInMatch(
                        name=team,
                        votes=in_match["wins"],
                        player_count=in_match["player_count"],
                        players=players_by_team_in_match(team, match.records),
                    )
                )
            summaries.append(
                MatchSummary(
                    match_id=match.match_id,
                    display_name=match.display_name,
                    phase=match.phase,
                    winner=self._winners.get((match.phase, match.match_id)),
                    row_count=len(match.records),
                    teams=teams,
                )
            )
        return summaries

    def team_table(self, scope: Scope = ALL) -> List[EntityStats]:
        return rankings.sort_by_wins(self.team_stats(team, scope) for team in self.team_names(scope))

    def player_table(self, scope: Scope = ALL, limit: Optional[int] = 20) -> List[EntityStats]:
        ranked = rankings.sort_by_kda(
            self.player_stats(player, scope) for player in self.player_names(scope)
        )
        return ranked[:limit] if limit is not None else ranked

    def top_players_by_phase(self, limit: int = 10) -> Dict[str, List[EntityStats]]:
        result: Dict[str, List[EntityStats]] = {}
        for phase in self.dataset.phase_names():
            scope = Scope(phase=phase)
            stats = [self.player_stats(player, scope) for player in self.player_names(scope)]
            result[phase] = rankings.rank_players_by_impact(stats, limit)
        return result

    def featured_players_by_phase(self) -> Dict[str, Optional[FeaturedPlayer]]:
        result: Dict[str, Optional[FeaturedPlayer]] = {}
        for phase in self.dataset.phase_names():
            scope = Scope(phase=phase)
            stats = [self.player_stats(player, scope) for player in self.player_names(scope)]
            best = rankings.pick_featured_player(stats)
            result[phase] = (
                FeaturedPlayer(phase=phase, score=rankings.featured_player_score(best), stats=best)
                if best is not None
                else None
            )
        return result

    def best_team(self, scope: Scope = ALL) -> Optional[EntityStats]:
        return rankings.pick_best_team(
            self.team_stats(team, scope) for team in self.team_names(scope)
        )

    def generate_dashboard(self) -> DashboardSnapshot:
        t0 = time.perf_counter()
        teams = self.team_names()
        players = self.player_names()
        snapshot = DashboardSnapshot(
            summary=self.tournament_summary(),
            teams=self.team_table(),
            players=self.player_table(limit=None),
            best_team=self.best_team(),
            matches={phase: self.match_summaries(phase) for phase in self.dataset.phase_names()},
            top_players_by_phase=self.top_players_by_phase(),
            featured_players=self.featured_players_by_phase(),
            team_radar={team: self.team_radar(team) for team in teams},
            player_radar={player: self.player_radar(player) for player in players},
            phase_progression={team: self.team_phase_progression(team) for team in teams},
            gold_efficiency={
                stats.name: round(rankings.gold_efficiency(stats), 2)
                for stats in rankings.sort_by_gold_efficiency(self.team_table())
            },
        )
        logger.info(f"[ANALYZER TIMING] generate_dashboard: {time.perf_counter() - t0:.2f}s")
        return snapshot


def _radar_scale(population: List[EntityStats], floors: Dict[str, float]) -> Dict[str, float]:
    attributes = {
        "kills": "avg_kills",
        "damage": "avg_damage",
        "gold": "avg_gold",
        "crowd_control": "avg_crowd_control",
        "tower_damage": "avg_tower_damage",
    }
    scale: Dict[str, float] = {}
    for key, floor in floors.items():
        values = [getattr(stats, attributes[key]) for stats in population]
        scale[key] = max(values + [floor])
    return scale

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class EntityStats(BaseModel):
    """Accumulated and average statistics for one team or player in a scope."""

    name: str
    team: Optional[str] = None
    matches: int = 0
    wins: int = 0
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    total_damage: int = 0
    total_gold: int = 0
    total_participation: float = 0.0
    total_crowd_control: float = 0.0
    total_tower_damage: float = 0.0
    avg_kills: float = 0.0
    avg_deaths: float = 0.0
    avg_assists: float = 0.0
    avg_damage: float = 0.0
    avg_gold: float = 0.0
    avg_participation: float = 0.0
    avg_crowd_control: float = 0.0
    avg_tower_damage: float = 0.0
    kda: float = 0.0


class TournamentSummary(BaseModel):
    total_matches: int = 0
    total_teams: int = 0
    total_players: int = 0
    avg_kills: int = 0
    avg_damage: int = 0
    highest_kills: int = 0


class RadarData(BaseModel):
    name: str
    labels: List[str]
    values: List[float]


class PhaseProgression(BaseModel):
    team: str
    phases: List[str]
    labels: List[str]
    total_damage: List[int]


class PlayerShare(BaseModel):
    player: str
    team: str
    kills_percent: float = 0.0
    assists_percent: float = 0.0
    damage_percent: float = 0.0


class TeamInMatch(BaseModel):
    name: str
    votes: int = 0
    player_count: int = 0
    players: List[str] = Field(default_factory=list)


class MatchSummary(BaseModel):
    match_id: str
    display_name: str
    phase: str
    winner: Optional[str] = None
    row_count: int = 0
    teams: List[TeamInMatch] = Field(default_factory=list)


class FeaturedPlayer(BaseModel):
    phase: str
    score: float
    stats: EntityStats


class DashboardSnapshot(BaseModel):
    """Everything the static dashboard pages read, computed in one pass."""

    summary: TournamentSummary
    teams: List[EntityStats]
    players: List[EntityStats]
    best_team: Optional[EntityStats] = None
    matches: Dict[str, List[MatchSummary]] = Field(default_factory=dict)
    top_players_by_phase: Dict[str, List[EntityStats]] = Field(default_factory=dict)
    featured_players: Dict[str, Optional[FeaturedPlayer]] = Field(default_factory=dict)
    team_radar: Dict[str, RadarData] = Field(default_factory=dict)
    player_radar: Dict[str, RadarData] = Field(default_factory=dict)
    phase_progression: Dict[str, PhaseProgression] = Field(default_factory=dict)
    gold_efficiency: Dict[str, float] = Field(default_factory=dict)

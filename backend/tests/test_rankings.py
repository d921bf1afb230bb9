from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.models import EntityStats
from app.rankings import (
    pick_best_team,
    pick_featured_player,
    rank_players_by_impact,
    sort_by_gold_efficiency,
    sort_by_kda,
    sort_by_total_damage,
    sort_by_wins,
)


def _build_stats(name: str, **values) -> EntityStats:
    return EntityStats(name=name, matches=1, **values)


def test_impact_ranking_breaks_ties_on_damage_then_assists() -> None:
    stats = [
        _build_stats("low", kills=2, avg_damage=9000, assists=9),
        _build_stats("assists", kills=5, avg_damage=1000, assists=4),
        _build_stats("damage", kills=5, avg_damage=2000, assists=0),
        _build_stats("top-assists", kills=5, avg_damage=1000, assists=8),
    ]

    ranked = rank_players_by_impact(stats)

    assert [entry.name for entry in ranked] == ["damage", "top-assists", "assists", "low"]
    assert [entry.name for entry in rank_players_by_impact(stats, limit=2)] == [
        "damage",
        "top-assists",
    ]


def test_best_team_keeps_first_on_equal_score() -> None:
    teams = [
        _build_stats("first", wins=1, avg_kills=5, avg_damage=2000),
        _build_stats("second", wins=1, avg_kills=6, avg_damage=1000),
        _build_stats("weak", wins=0, avg_kills=3, avg_damage=0),
    ]

    assert pick_best_team(teams).name == "first"


def test_best_team_and_featured_need_positive_score() -> None:
    assert pick_best_team([_build_stats("idle")]) is None
    assert pick_best_team([]) is None
    assert pick_featured_player([_build_stats("idle")]) is None


def test_featured_player_weights_kills_damage_and_participation() -> None:
    players = [
        _build_stats("killer", kills=10, avg_damage=0, avg_participation=0),
        _build_stats("support", kills=4, avg_damage=2000, avg_participation=30),
    ]

    # killer 20.0, support 8 + 2 + 15 = 25.0
    assert pick_featured_player(players).name == "support"


def test_descending_sorts_are_stable() -> None:
    stats = [
        _build_stats("a", kda=2.0, wins=1, total_damage=100, total_gold=100),
        _build_stats("b", kda=3.5, wins=2, total_damage=900, total_gold=100),
        _build_stats("c", kda=2.0, wins=1, total_damage=100, total_gold=0),
    ]

    assert [s.name for s in sort_by_kda(stats)] == ["b", "a", "c"]
    assert [s.name for s in sort_by_wins(stats)] == ["b", "a", "c"]
    assert [s.name for s in sort_by_total_damage(stats)] == ["b", "a", "c"]
    # c divides by a floor of 1 gold: 100.0 against b's 9.0
    assert [s.name for s in sort_by_gold_efficiency(stats)] == ["c", "b", "a"]

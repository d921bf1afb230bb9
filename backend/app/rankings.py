from __future__ import annotations

from typing import Iterable, List, Optional

from app.models import EntityStats


def rank_players_by_impact(
    stats: Iterable[EntityStats], limit: Optional[int] = None
) -> List[EntityStats]:
    """Kills, then average damage, then assists; all descending."""
    ranked = sorted(stats, key=lambda s: (-s.kills, -s.avg_damage, -s.assists))
    if limit is not None:
        return ranked[:limit]
    return ranked


def best_team_score(stats: EntityStats) -> float:
    return stats.wins * 10 + stats.avg_kills + stats.avg_damage / 1000


def featured_player_score(stats: EntityStats) -> float:
    return stats.kills * 2 + stats.avg_damage / 1000 + stats.avg_participation * 0.5


def _first_with_highest_score(stats: Iterable[EntityStats], score) -> Optional[EntityStats]:
    # Strict ">" from 0: earlier entries keep ties and a zero score never wins.
    best: Optional[EntityStats] = None
    best_score = 0.0
    for entry in stats:
        value = score(entry)
        if value > best_score:
            best = entry
            best_score = value
    return best


def pick_best_team(team_stats: Iterable[EntityStats]) -> Optional[EntityStats]:
    return _first_with_highest_score(team_stats, best_team_score)


def pick_featured_player(player_stats: Iterable[EntityStats]) -> Optional[EntityStats]:
    return _first_with_highest_score(player_stats, featured_player_score)


def sort_by_kda(stats: Iterable[EntityStats]) -> List[EntityStats]:
    return sorted(stats, key=lambda s: s.kda, reverse=True)


def sort_by_wins(stats: Iterable[EntityStats]) -> List[EntityStats]:
    return sorted(stats, key=lambda s: s.wins, reverse=True)


def sort_by_total_damage(stats: Iterable[EntityStats]) -> List[EntityStats]:
    return sorted(stats, key=lambda s: s.total_damage, reverse=True)


def gold_efficiency(stats: EntityStats) -> float:
    return stats.total_damage / max(stats.total_gold, 1)


def sort_by_gold_efficiency(stats: Iterable[EntityStats]) -> List[EntityStats]:
    return sorted(stats, key=gold_efficiency, reverse=True)

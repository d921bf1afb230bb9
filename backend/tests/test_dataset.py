from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.dataset import (
    TournamentDataset,
    file_names_for_phase,
    format_match_name,
    match_id_from_file,
    parse_match_id,
)


def test_phase_file_lists_follow_bracket_shape() -> None:
    assert len(file_names_for_phase("cuartos")) == 8
    assert len(file_names_for_phase("semifinal")) == 4
    assert file_names_for_phase("final") == ["FM1.csv", "FM2.csv", "FM3.csv", "FM4.csv", "FM5.csv"]
    assert file_names_for_phase("groups") == []


def test_match_ids_and_display_names() -> None:
    assert match_id_from_file("Q3M2.csv") == "Q3M2"
    assert parse_match_id("S2M1") == ("S", "2", 1)
    assert parse_match_id("FM4") == ("F", "", 4)
    assert parse_match_id("bonus") is None
    assert format_match_name("Q1M2") == "Cuartos 1 - Partido 2"
    assert format_match_name("FM3") == "Final - Partido 3"
    assert format_match_name("bonus") == "bonus"


def test_from_raw_orders_phases_and_copies_records() -> None:
    source = [{"EQUIPO": "A"}]
    dataset = TournamentDataset.from_raw(
        {
            "final": {"FM1.csv": source},
            "cuartos": {"Q1M1.csv": [], "Q1M2.csv": [{"EQUIPO": "B"}]},
        }
    )
    source[0]["EQUIPO"] = "changed"

    assert dataset.phase_names() == ["cuartos", "final"]
    assert dataset.match_ids() == ["Q1M1", "Q1M2", "FM1"]
    assert dataset.match_ids("final") == ["FM1"]
    assert dataset.match_count == 3
    assert dataset.get_match("FM1").records[0]["EQUIPO"] == "A"
    assert dataset.get_match("Q1M1").records == ()
    assert dataset.get_match("S1M1") is None
    assert [record["EQUIPO"] for record in dataset.iter_records()] == ["B", "A"]


def test_empty_dataset() -> None:
    dataset = TournamentDataset.from_raw({})

    assert dataset.is_empty
    assert list(dataset.iter_matches()) == []

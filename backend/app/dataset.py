from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from app.csv_parser import Record

PHASES: Tuple[str, ...] = ("cuartos", "semifinal", "final")

PHASE_FILES: Dict[str, Tuple[str, ...]] = {
    "cuartos": (
        "Q1M1.csv", "Q1M2.csv", "Q2M1.csv", "Q2M2.csv",
        "Q3M1.csv", "Q3M2.csv", "Q4M1.csv", "Q4M2.csv",
    ),
    "semifinal": ("S1M1.csv", "S1M2.csv", "S2M1.csv", "S2M2.csv"),
    "final": ("FM1.csv", "FM2.csv", "FM3.csv", "FM4.csv", "FM5.csv"),
}

PHASE_LABELS = {
    "cuartos": "Cuartos de Final",
    "semifinal": "Semifinal",
    "final": "Final",
}

PHASE_CODE_LABELS = {
    "Q": "Cuartos",
    "S": "Semifinal",
    "F": "Final",
}

# CSV headers as exported by the tournament organisers.
FIELD_TEAM = "EQUIPO"
FIELD_PLAYER = "JUGADOR"
FIELD_KILLS = "Eliminaciones"
FIELD_DEATHS = "Muertes"
FIELD_ASSISTS = "Asistencias"
FIELD_DAMAGE = "DÑO infligido"
FIELD_GOLD = "Oro total"
FIELD_PARTICIPATION = "Participación"
FIELD_CROWD_CONTROL = "Control de masas"
FIELD_TOWER_DAMAGE = "DÑO a las torres"
FIELD_WINNER = "GANADOR"

_MATCH_ID_PATTERN = re.compile(r"([QSF])(\d*)M(\d+)")


def file_names_for_phase(phase: str) -> List[str]:
    return list(PHASE_FILES.get(phase, ()))


def match_id_from_file(file_name: str) -> str:
    return file_name.rsplit(".", 1)[0] if file_name.lower().endswith(".csv") else file_name


def parse_match_id(match_id: str) -> Optional[Tuple[str, str, int]]:
    """Split ``Q1M2`` into (phase code, bracket number, game number).

    The final has no bracket number, so ``FM3`` yields ``("F", "", 3)``.
    """
    match = _MATCH_ID_PATTERN.search(match_id)
    if not match:
        return None
    return match.group(1), match.group(2), int(match.group(3))


def format_match_name(match_id: str) -> str:
    parsed = parse_match_id(match_id)
    if not parsed:
        return match_id
    phase_code, bracket, game = parsed
    label = PHASE_CODE_LABELS.get(phase_code, "Fase")
    prefix = f"{label} {bracket}" if bracket else label
    return f"{prefix} - Partido {game}"


@dataclass(frozen=True)
class Match:
    match_id: str
    phase: str
    file_name: str
    records: Tuple[Record, ...] = ()

    @property
    def display_name(self) -> str:
        return format_match_name(self.match_id)


@dataclass(frozen=True)
class TournamentDataset:
    """Phase -> match -> records, in bracket order. Read-only once built."""

    phases: Mapping[str, Tuple[Match, ...]] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Mapping[str, List[Record]]]) -> "TournamentDataset":
        """Build from ``{phase: {file_name: records}}`` as produced by the loader."""
        phases: Dict[str, Tuple[Match, ...]] = {}
        for phase in _ordered_phases(raw.keys()):
            matches = []
            for file_name, records in raw[phase].items():
                matches.append(
                    Match(
                        match_id=match_id_from_file(file_name),
                        phase=phase,
                        file_name=file_name,
                        records=tuple(dict(record) for record in records),
                    )
                )
            phases[phase] = tuple(matches)
        return cls(phases=phases)

    def phase_names(self) -> List[str]:
        return list(self.phases.keys())

    def iter_matches(self, phase: Optional[str] = None) -> Iterator[Match]:
        for phase_name, matches in self.phases.items():
            if phase is not None and phase_name != phase:
                continue
            yield from matches

    def iter_records(self, phase: Optional[str] = None) -> Iterator[Record]:
        for match in self.iter_matches(phase):
            yield from match.records

    def match_ids(self, phase: Optional[str] = None) -> List[str]:
        return [match.match_id for match in self.iter_matches(phase)]

    def get_match(self, match_id: str) -> Optional[Match]:
        for match in self.iter_matches():
            if match.match_id == match_id:
                return match
        return None

    @property
    def match_count(self) -> int:
        return sum(len(matches) for matches in self.phases.values())

    @property
    def is_empty(self) -> bool:
        return self.match_count == 0


def _ordered_phases(names) -> List[str]:
    known = [phase for phase in PHASES if phase in names]
    extra = [phase for phase in names if phase not in PHASES]
    return known + extra

from __future__ import annotations

import re
from typing import Dict, List, Optional

Record = Dict[str, str]

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def parse_csv(text: Optional[str]) -> List[Record]:
    """Parse comma-delimited text into header-keyed records.

    No quoting support: every comma is a delimiter. Short rows are padded with
    empty strings and cells beyond the header count are dropped.
    """
    # str.strip() keeps a byte-order mark, which would otherwise prefix the first header.
    lines = (text or "").lstrip("\ufeff").strip().split("\n")
    headers = [header.strip() for header in lines[0].split(",")]

    records: List[Record] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = [value.strip() for value in line.split(",")]
        entry: Record = {}
        for index, header in enumerate(headers):
            entry[header] = values[index] if index < len(values) else ""
        records.append(entry)
    return records


def parse_int(value: Optional[object]) -> int:
    if value is None:
        return 0
    match = _INT_PREFIX.match(str(value).strip())
    if not match:
        return 0
    return int(match.group(0))


def parse_float(value: Optional[object]) -> float:
    """Leading-decimal coercion, used for ``Participación`` only.

    Participation is a percentage that exports write with decimals ("45.5");
    every other numeric column goes through ``parse_int``.
    """
    if value is None:
        return 0.0
    match = _FLOAT_PREFIX.match(str(value).strip())
    if not match:
        return 0.0
    return float(match.group(0))

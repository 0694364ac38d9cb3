"""Persist and load rosters as JSON files for the CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from teamgen.errors import InvalidInputError
from teamgen.models import Player, PlayerStats, parse_stats


@dataclass
class RosterEntry:
    name: str
    stats: PlayerStats
    photo: Optional[str] = None


@dataclass
class RosterFile:
    entries: List[RosterEntry] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "RosterFile":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid roster JSON in {path}: {exc}") from exc
        rows = data.get("players", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise InvalidInputError(f"Roster file {path} must hold a list of players")
        entries = []
        for position, row in enumerate(rows, start=1):
            if not isinstance(row, dict):
                raise InvalidInputError(f"Roster entry {position} is not an object")
            name = str(row.get("name") or "").strip()
            if not name:
                raise InvalidInputError(f"Roster entry {position} has no name")
            entries.append(RosterEntry(name=name, stats=parse_stats(row.get("stats")), photo=row.get("photo")))
        return cls(entries=entries)

    @classmethod
    def from_players(cls, players: List[Player]) -> "RosterFile":
        return cls(entries=[RosterEntry(name=p.name, stats=p.stats, photo=p.photo) for p in players])

    def save(self, path: Path) -> None:
        payload: Dict[str, Any] = {
            "players": [
                {"name": entry.name, "stats": entry.stats.model_dump(), "photo": entry.photo}
                for entry in self.entries
            ]
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

"""Persistence layer for players and saved team sets."""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional
from uuid import uuid4

from teamgen.errors import RecordNotFound, StoreError, StoreUnavailable
from teamgen.models import Player, PlayerStats, parse_stats, require_name


logger = logging.getLogger("uvicorn.error")


@dataclass
class SavedTeamSet:
    set_id: str
    created_at: datetime
    teams: List[dict]


class RosterStore:
    """SQLite-backed store for the ``persons`` and ``savedTeams`` collections.

    One connection is opened lazily on first use and shared for the life of
    the store. Each insert, update and delete is a single statement, so rows
    are changed atomically and concurrent writers follow last-write-wins.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)
        self._use_uri = self.db_path.startswith("file:")
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        try:
            if not self._use_uri and self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, uri=self._use_uri, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._create_schema(conn)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Database connection failed for %s: %s", self.db_path, exc)
            raise StoreUnavailable("Database connection failed.") from exc
        self._conn = conn
        logger.info("Connected to database %s", self.db_path)
        return conn

    def ensure_connected(self) -> sqlite3.Connection:
        return self._conn if self._conn is not None else self.connect()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS persons (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                stats_json TEXT NOT NULL,
                photo TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS saved_teams (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                teams_json TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Cursor:
        conn = self.ensure_connected()
        try:
            with conn:
                return conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            logger.error("Database error: %s", exc, exc_info=True)
            raise StoreError(str(exc)) from exc

    # Players

    def list_players(self) -> List[Player]:
        rows = self._execute("SELECT * FROM persons ORDER BY rowid").fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_player(self, player_id: str) -> Player:
        row = self._execute("SELECT * FROM persons WHERE id = ?", (player_id,)).fetchone()
        if row is None:
            raise RecordNotFound("Person not found")
        return self._row_to_player(row)

    def create_player(
        self,
        *,
        name: str | None,
        stats: str | dict | PlayerStats | None,
        photo: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Player:
        clean_name = require_name(name)
        parsed = parse_stats(stats)
        player = Player(
            id=uuid4().hex,
            name=clean_name,
            stats=parsed,
            photo=photo,
            created_at=created_at or datetime.now(timezone.utc),
        )
        self._execute(
            """
            INSERT INTO persons (id, name, stats_json, photo, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, NULL)
            """,
            (
                player.id,
                player.name,
                json.dumps(parsed.model_dump()),
                player.photo,
                player.created_at.isoformat(),
            ),
        )
        logger.info("Created person %s (%s)", player.id, player.name)
        return player

    def update_player(
        self,
        player_id: str,
        *,
        name: str | None,
        stats: str | dict | PlayerStats | None,
        photo: Optional[str] = None,
    ) -> None:
        """Replace name and stats; the photo changes only when one is given."""

        clean_name = require_name(name)
        parsed = parse_stats(stats)
        now = datetime.now(timezone.utc).isoformat()
        cursor = self._execute(
            """
            UPDATE persons
            SET name = ?,
                stats_json = ?,
                updated_at = ?,
                photo = COALESCE(?, photo)
            WHERE id = ?
            """,
            (clean_name, json.dumps(parsed.model_dump()), now, photo, player_id),
        )
        if cursor.rowcount == 0:
            raise RecordNotFound("Person not found")
        logger.info("Updated person %s", player_id)

    def delete_player(self, player_id: str) -> None:
        cursor = self._execute("DELETE FROM persons WHERE id = ?", (player_id,))
        if cursor.rowcount == 0:
            raise RecordNotFound("Person not found")
        logger.info("Deleted person %s", player_id)

    # Saved team sets

    def list_saved_team_sets(self) -> List[SavedTeamSet]:
        rows = self._execute(
            "SELECT * FROM saved_teams ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [self._row_to_saved_set(row) for row in rows]

    def get_saved_team_set(self, set_id: str) -> SavedTeamSet:
        row = self._execute("SELECT * FROM saved_teams WHERE id = ?", (set_id,)).fetchone()
        if row is None:
            raise RecordNotFound("Saved team not found")
        return self._row_to_saved_set(row)

    def create_saved_team_set(
        self,
        teams: Iterable[dict],
        *,
        created_at: Optional[datetime] = None,
    ) -> SavedTeamSet:
        saved = SavedTeamSet(
            set_id=uuid4().hex,
            created_at=(created_at or datetime.now(timezone.utc)).astimezone(timezone.utc),
            teams=list(teams),
        )
        self._execute(
            "INSERT INTO saved_teams (id, created_at, teams_json) VALUES (?, ?, ?)",
            (saved.set_id, saved.created_at.isoformat(timespec="microseconds"), json.dumps(saved.teams)),
        )
        logger.info("Saved team set %s with %s teams", saved.set_id, len(saved.teams))
        return saved

    def delete_saved_team_set(self, set_id: str) -> None:
        cursor = self._execute("DELETE FROM saved_teams WHERE id = ?", (set_id,))
        if cursor.rowcount == 0:
            raise RecordNotFound("Saved team not found")
        logger.info("Deleted saved team set %s", set_id)

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            id=row["id"],
            name=row["name"],
            stats=PlayerStats.model_validate(json.loads(row["stats_json"])),
            photo=row["photo"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        )

    def _row_to_saved_set(self, row: sqlite3.Row) -> SavedTeamSet:
        return SavedTeamSet(
            set_id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            teams=json.loads(row["teams_json"]),
        )


__all__ = ["RosterStore", "SavedTeamSet"]

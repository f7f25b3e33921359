"""Persistence layer for the player roster, match history and rating ledger."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from pelada.models import MatchRecord, MatchStatus, PlayerRecord


# Columns accepted by ``update_player``; anything else in an update is ignored.
_PLAYER_COLUMNS = (
    "name",
    "position",
    "rating",
    "base_overall",
    "fin_rating",
    "vis_rating",
    "dec_rating",
    "def_rating",
    "vit_rating",
    "exp_rating",
    "goals",
    "assists",
    "matches",
    "wins",
)
_PLAYER_JSON_COLUMNS = ("fut_stats", "metadata")
_PLAYER_UPDATE_ALIASES = {
    "overall": "rating",
    "baseOverall": "base_overall",
    "finRating": "fin_rating",
    "visRating": "vis_rating",
    "decRating": "dec_rating",
    "defRating": "def_rating",
    "vitRating": "vit_rating",
    "expRating": "exp_rating",
    "futStats": "fut_stats",
}

_MATCH_COLUMNS = ("date", "status", "score_a", "score_b", "shootout_score_a", "shootout_score_b")
_MATCH_JSON_COLUMNS = ("team_a", "team_b", "events", "positions", "conceded_overrides")


@dataclass
class HistoryEntry:
    player_id: str
    recorded_at: datetime
    overall: float
    has_match: bool


class LeagueStore:
    """Simple SQLite-backed store for players, matches and rating history."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv("PELADA_DB_PATH")
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / "pelada-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / "pelada.sqlite"
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position TEXT,
                rating REAL,
                base_overall REAL,
                fin_rating INTEGER,
                vis_rating INTEGER,
                dec_rating INTEGER,
                def_rating INTEGER,
                vit_rating INTEGER,
                exp_rating INTEGER,
                goals INTEGER NOT NULL DEFAULT 0,
                assists INTEGER NOT NULL DEFAULT 0,
                matches INTEGER NOT NULL DEFAULT 0,
                wins INTEGER NOT NULL DEFAULT 0,
                fut_stats_json TEXT,
                metadata_json TEXT NOT NULL DEFAULT '{}',
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                status TEXT NOT NULL,
                score_a INTEGER NOT NULL,
                score_b INTEGER NOT NULL,
                shootout_score_a INTEGER,
                shootout_score_b INTEGER,
                team_a_json TEXT NOT NULL,
                team_b_json TEXT NOT NULL,
                events_json TEXT NOT NULL,
                positions_json TEXT NOT NULL,
                conceded_overrides_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS rating_history (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                player_id TEXT NOT NULL,
                recorded_at TEXT NOT NULL,
                overall REAL NOT NULL,
                has_match INTEGER NOT NULL
            )
            """
        )
        conn.commit()

    # -- players -------------------------------------------------------------

    def save_player(self, player: PlayerRecord) -> PlayerRecord:
        data = player.model_dump(mode="json", by_alias=True)
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO players (
                    id, name, position, rating, base_overall,
                    fin_rating, vis_rating, dec_rating, def_rating, vit_rating, exp_rating,
                    goals, assists, matches, wins, fut_stats_json, metadata_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    player.player_id,
                    *(data[column] for column in _PLAYER_COLUMNS),
                    json.dumps(data["fut_stats"]) if data["fut_stats"] is not None else None,
                    json.dumps(data["metadata"]),
                    now,
                ),
            )
            conn.commit()
        saved = self.get_player(player.player_id)
        if saved is None:  # pragma: no cover
            raise KeyError(f"Player {player.player_id} not found after insert")
        return saved

    def get_player(self, player_id: str) -> Optional[PlayerRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_player(row)

    def list_players(self) -> List[PlayerRecord]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY name, id").fetchall()
        return [self._row_to_player(row) for row in rows]

    def update_player(self, player_id: str, updates: Mapping[str, Any]) -> PlayerRecord:
        """Apply a partial update; unknown keys and ``None`` values are ignored.

        The merged record is validated before anything is written, so a
        rejected update leaves the stored row untouched.
        """

        mapped: dict[str, Any] = {}
        for raw_key, value in updates.items():
            if value is None:
                continue
            key = _PLAYER_UPDATE_ALIASES.get(raw_key, raw_key)
            if key in _PLAYER_COLUMNS or key in _PLAYER_JSON_COLUMNS:
                mapped[key] = value

        current = self.get_player(player_id)
        if current is None:
            raise KeyError(f"Player {player_id} not found")
        if not mapped:
            return current

        candidate = PlayerRecord.model_validate({**current.model_dump(), **mapped})
        data = candidate.model_dump(mode="json", by_alias=True)
        assignments: list[str] = []
        params: list[Any] = []
        for key in mapped:
            if key in _PLAYER_JSON_COLUMNS:
                assignments.append(f"{key}_json = ?")
                params.append(json.dumps(data[key]))
            else:
                assignments.append(f"{key} = ?")
                params.append(data[key])
        assignments.append("updated_at = ?")
        params.append(datetime.now(timezone.utc).isoformat())
        params.append(player_id)

        with self._connect() as conn:
            conn.execute(
                f"UPDATE players SET {', '.join(assignments)} WHERE id = ?",
                tuple(params),
            )
            conn.commit()
        updated = self.get_player(player_id)
        if updated is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after update")
        return updated

    def delete_player(self, player_id: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"Player {player_id} not found")

    # -- matches -------------------------------------------------------------

    def save_match(self, match: MatchRecord) -> MatchRecord:
        data = match.model_dump(mode="json")
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO matches (
                    id, date, status, score_a, score_b, shootout_score_a, shootout_score_b,
                    team_a_json, team_b_json, events_json, positions_json,
                    conceded_overrides_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    match.match_id,
                    *(data[column] for column in _MATCH_COLUMNS),
                    *(json.dumps(data[column]) for column in _MATCH_JSON_COLUMNS),
                    now,
                ),
            )
            conn.commit()
        saved = self.get_match(match.match_id)
        if saved is None:  # pragma: no cover
            raise KeyError(f"Match {match.match_id} not found after insert")
        return saved

    def get_match(self, match_id: str) -> Optional[MatchRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM matches WHERE id = ?", (match_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_match(row)

    def list_matches(self, *, status: MatchStatus | str | None = None) -> List[MatchRecord]:
        query = "SELECT * FROM matches"
        params: list[str] = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(MatchStatus(status).value)
        query += " ORDER BY date DESC, id"
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_match(row) for row in rows]

    def update_match(self, match_id: str, updates: Mapping[str, Any]) -> MatchRecord:
        match = self.get_match(match_id)
        if match is None:
            raise KeyError(f"Match {match_id} not found")
        merged = match.model_dump(mode="json")
        merged.update({key: value for key, value in updates.items() if value is not None and key in merged})
        return self.save_match(MatchRecord.model_validate(merged))

    def finish_match(self, match_id: str) -> MatchRecord:
        return self.update_match(match_id, {"status": MatchStatus.FINISHED.value})

    def delete_match(self, match_id: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM matches WHERE id = ?", (match_id,))
            conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"Match {match_id} not found")

    # -- rating history ------------------------------------------------------

    def append_history(
        self,
        player_id: str,
        *,
        overall: float,
        has_match: bool,
        recorded_at: Optional[datetime] = None,
    ) -> HistoryEntry:
        recorded_at = recorded_at or datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO rating_history (player_id, recorded_at, overall, has_match) VALUES (?, ?, ?, ?)",
                (player_id, recorded_at.isoformat(), overall, int(has_match)),
            )
            conn.commit()
        return HistoryEntry(player_id=player_id, recorded_at=recorded_at, overall=overall, has_match=has_match)

    def list_history(self, player_id: str, limit: int = 50) -> List[HistoryEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM rating_history WHERE player_id = ? ORDER BY seq DESC LIMIT ?",
                (player_id, limit),
            ).fetchall()
        return [
            HistoryEntry(
                player_id=row["player_id"],
                recorded_at=datetime.fromisoformat(row["recorded_at"]),
                overall=row["overall"],
                has_match=bool(row["has_match"]),
            )
            for row in rows
        ]

    def record_history(self, entries: Iterable[tuple[str, float, bool]]) -> int:
        count = 0
        now = datetime.now(timezone.utc)
        for player_id, overall, has_match in entries:
            self.append_history(player_id, overall=overall, has_match=has_match, recorded_at=now)
            count += 1
        return count

    # -- row mapping ---------------------------------------------------------

    def _row_to_player(self, row: sqlite3.Row) -> PlayerRecord:
        payload: dict[str, Any] = {"player_id": row["id"]}
        for column in _PLAYER_COLUMNS:
            payload[column] = row[column]
        payload["fut_stats"] = json.loads(row["fut_stats_json"]) if row["fut_stats_json"] else None
        payload["metadata"] = json.loads(row["metadata_json"]) if row["metadata_json"] else {}
        return PlayerRecord.model_validate(payload)

    def _row_to_match(self, row: sqlite3.Row) -> MatchRecord:
        payload: dict[str, Any] = {"match_id": row["id"]}
        for column in _MATCH_COLUMNS:
            payload[column] = row[column]
        for column in _MATCH_JSON_COLUMNS:
            payload[column] = json.loads(row[f"{column}_json"])
        return MatchRecord.model_validate(payload)

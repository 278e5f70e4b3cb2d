from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..models import Hunt
from .base import HuntStore, merge_fields

logger = logging.getLogger(__name__)

_LOCK = threading.Lock()


def _ensure_conn(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS hunts ("
            " user_id TEXT NOT NULL,"
            " pokemon_id INTEGER NOT NULL,"
            " encounters INTEGER NOT NULL DEFAULT 0,"
            " methods TEXT NOT NULL DEFAULT '[]',"
            " notes TEXT,"
            " location TEXT,"
            " ver INTEGER NOT NULL DEFAULT 0,"
            " PRIMARY KEY (user_id, pokemon_id))"
        )
    return conn


def _row_to_hunt(row: tuple) -> Hunt:
    pokemon_id, encounters, methods, notes, location = row
    return Hunt(
        pokemon_id=pokemon_id,
        encounters=encounters,
        methods=json.loads(methods or "[]"),
        notes=notes,
        location=location,
    )


class SqlHuntStore(HuntStore):
    """SQLite-backed hunts, one row per (user, Pokémon)."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def reset(self) -> None:
        """Delete the database file; the table is recreated on next use."""
        if self.path.exists():
            self.path.unlink()

    def read_hunts(self, user_id: str) -> Dict[int, Hunt]:
        if not user_id:
            return {}
        hunts: Dict[int, Hunt] = {}
        try:
            conn = _ensure_conn(self.path)
            try:
                rows = conn.execute(
                    "SELECT pokemon_id, encounters, methods, notes, location"
                    " FROM hunts WHERE user_id=?",
                    (user_id,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error getting hunts for %s: %s", user_id, exc)
            return {}
        for row in rows:
            try:
                hunt = _row_to_hunt(row)
            except (ValidationError, json.JSONDecodeError) as exc:
                logger.warning("Skipping malformed hunt %s for %s: %s", row[0], user_id, exc)
                continue
            hunts[hunt.pokemon_id] = hunt
        return hunts

    def write_hunt(
        self,
        user_id: str,
        pokemon_id: int,
        fields: Mapping[str, Any],
        ver: Optional[int] = None,
    ) -> bool:
        if not user_id:
            return False
        conn = _ensure_conn(self.path)
        try:
            with _LOCK:
                row = conn.execute(
                    "SELECT pokemon_id, encounters, methods, notes, location, ver"
                    " FROM hunts WHERE user_id=? AND pokemon_id=?",
                    (user_id, pokemon_id),
                ).fetchone()
                current, cur_ver = (None, 0) if row is None else (_row_to_hunt(row[:5]), row[5])
                if ver is not None and ver <= cur_ver:
                    logger.debug(
                        "Dropping stale write for %s/%s (ver %s <= %s)",
                        user_id,
                        pokemon_id,
                        ver,
                        cur_ver,
                    )
                    return False
                hunt = merge_fields(current, pokemon_id, fields)
                conn.execute(
                    "INSERT OR REPLACE INTO hunts"
                    " (user_id, pokemon_id, encounters, methods, notes, location, ver)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        user_id,
                        pokemon_id,
                        hunt.encounters,
                        json.dumps(hunt.methods),
                        hunt.notes,
                        hunt.location,
                        ver if ver is not None else cur_ver + 1,
                    ),
                )
                conn.commit()
        finally:
            conn.close()
        return True

    def delete_hunt(self, user_id: str, pokemon_id: int) -> None:
        conn = _ensure_conn(self.path)
        try:
            with _LOCK:
                conn.execute(
                    "DELETE FROM hunts WHERE user_id=? AND pokemon_id=?",
                    (user_id, pokemon_id),
                )
                conn.commit()
        finally:
            conn.close()

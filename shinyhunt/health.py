"""Health check utilities for the hunt store."""
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from fastapi import FastAPI

from .config import build_settings, load_config


def check_store(path: Path) -> dict:
    """Return whether the SQLite hunt store is readable and when it last changed."""
    if not path.exists():
        return {"store_ok": False, "last_updated": None}
    try:
        conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
        try:
            conn.execute("SELECT COUNT(*) FROM hunts").fetchone()
        finally:
            conn.close()
        ok = True
    except sqlite3.Error:
        ok = False
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return {"store_ok": ok, "last_updated": mtime.isoformat()}


app = FastAPI()


@app.get("/health")
def health() -> dict:
    """FastAPI endpoint exposing store status."""
    path = build_settings(load_config()).db_path
    return check_store(path)

"""Per-user hunt persistence."""

from .base import HUNT_FIELDS, HuntStore, merge_fields
from .memory_store import MemoryHuntStore
from .sql_store import SqlHuntStore

__all__ = ["HUNT_FIELDS", "HuntStore", "merge_fields", "MemoryHuntStore", "SqlHuntStore"]

from __future__ import annotations

import threading
from typing import Any, Dict, Mapping, Optional, Tuple

from ..models import Hunt
from .base import HuntStore, merge_fields


class MemoryHuntStore(HuntStore):
    """Process-local store, used for tests and read-only sessions."""

    def __init__(self) -> None:
        self._hunts: Dict[str, Dict[int, Tuple[Hunt, int]]] = {}
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Drop every user's hunts."""
        with self._lock:
            self._hunts = {}

    def read_hunts(self, user_id: str) -> Dict[int, Hunt]:
        if not user_id:
            return {}
        with self._lock:
            return {pid: hunt.model_copy() for pid, (hunt, _) in self._hunts.get(user_id, {}).items()}

    def write_hunt(
        self,
        user_id: str,
        pokemon_id: int,
        fields: Mapping[str, Any],
        ver: Optional[int] = None,
    ) -> bool:
        if not user_id:
            return False
        with self._lock:
            user_hunts = self._hunts.setdefault(user_id, {})
            current, cur_ver = user_hunts.get(pokemon_id, (None, 0))
            if ver is not None and ver <= cur_ver:
                return False
            hunt = merge_fields(current, pokemon_id, fields)
            user_hunts[pokemon_id] = (hunt, ver if ver is not None else cur_ver + 1)
            return True

    def delete_hunt(self, user_id: str, pokemon_id: int) -> None:
        with self._lock:
            self._hunts.get(user_id, {}).pop(pokemon_id, None)

"""Hunt mutations for a single user."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from .backend.base import HuntStore
from .config import Settings
from .models import Hunt, OddsResult
from .odds import compute_odds
from .writer import DebouncedWriter

logger = logging.getLogger(__name__)


class HuntTracker:
    """Apply edits to one user's hunts and persist them through a writer.

    The user identity and the store are passed in; with no ``user_id`` the
    tracker is read-only and every mutation returns the hunt unchanged.
    Local state is updated immediately while the store catches up through
    the debounced writer.
    """

    def __init__(
        self,
        store: HuntStore,
        settings: Settings,
        user_id: Optional[str],
        writer: Optional[DebouncedWriter] = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.user_id = user_id
        self.writer = writer or DebouncedWriter(store, delay=settings.debounce_seconds)
        self._hunts: Dict[int, Hunt] = store.read_hunts(user_id) if user_id else {}
        self._lock = threading.Lock()

    @property
    def hunts(self) -> Dict[int, Hunt]:
        with self._lock:
            return dict(self._hunts)

    def hunt(self, pokemon_id: int) -> Hunt:
        with self._lock:
            return self._hunts.get(pokemon_id) or Hunt(pokemon_id=pokemon_id)

    def _edit(self, pokemon_id: int, changes: Callable[[Hunt], Dict[str, Any]]) -> Hunt:
        """Apply the fields returned by *changes* to the current hunt.

        The read of the current hunt and the write of the new one happen
        under one lock, so concurrent edits never overwrite each other.
        """
        if not self.user_id:
            logger.debug("Ignoring edit to %s without a signed-in user", pokemon_id)
            return self.hunt(pokemon_id)
        with self._lock:
            current = self._hunts.get(pokemon_id) or Hunt(pokemon_id=pokemon_id)
            fields = changes(current)
            hunt = current.model_copy(update=fields)
            self._hunts[pokemon_id] = hunt
            self.writer.submit(self.user_id, pokemon_id, fields)
        return hunt

    def _update(self, pokemon_id: int, **fields: Any) -> Hunt:
        return self._edit(pokemon_id, lambda current: fields)

    def change_encounters(self, pokemon_id: int, delta: int) -> Hunt:
        """Add *delta* encounters, never going below zero."""
        return self._edit(
            pokemon_id, lambda current: {"encounters": max(0, current.encounters + delta)}
        )

    def toggle_method(self, pokemon_id: int, method_id: str, checked: bool) -> Hunt:
        if self.settings.method(method_id) is None:
            raise ValueError(f"Unknown shiny method: {method_id}")

        def _toggle(current: Hunt) -> Dict[str, Any]:
            methods = [m for m in current.methods if m != method_id]
            if checked:
                methods.append(method_id)
            return {"methods": methods}

        return self._edit(pokemon_id, _toggle)

    def set_notes(self, pokemon_id: int, notes: str) -> Hunt:
        return self._update(pokemon_id, notes=notes)

    def set_location(self, pokemon_id: int, location: str) -> Hunt:
        return self._update(pokemon_id, location=location)

    def clear(self, pokemon_id: int) -> None:
        if not self.user_id:
            return
        self.writer.flush()
        with self._lock:
            self._hunts.pop(pokemon_id, None)
        self.store.delete_hunt(self.user_id, pokemon_id)

    def odds(self, pokemon_id: int) -> OddsResult:
        hunt = self.hunt(pokemon_id)
        return compute_odds(
            self.settings.base_odds,
            self.settings.methods,
            hunt.methods,
            hunt.encounters,
        )

    def close(self) -> None:
        self.writer.close()

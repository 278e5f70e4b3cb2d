"""In-memory roster cache keyed by generation."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

from .models import Pokemon
from .sources import pokeapi

logger = logging.getLogger(__name__)

Fetcher = Callable[[Optional[int]], List[Pokemon]]


class RosterCache:
    """Fetch each generation's roster once and keep it for the process.

    Empty results are not cached, so a PokeAPI outage is retried on the next
    call instead of sticking for the lifetime of the cache.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None) -> None:
        self._fetcher = fetcher or (lambda gen: pokeapi.fetch_roster(gen))
        self._rosters: Dict[Optional[int], List[Pokemon]] = {}
        self._lock = threading.Lock()

    def get(self, generation: Optional[int] = None) -> List[Pokemon]:
        with self._lock:
            cached = self._rosters.get(generation)
            if cached is not None:
                return list(cached)
            roster = self._fetcher(generation)
            if roster:
                self._rosters[generation] = list(roster)
            else:
                logger.warning("Roster for generation %s is empty; not caching", generation)
            return list(roster)

    def clear(self) -> None:
        with self._lock:
            self._rosters.clear()

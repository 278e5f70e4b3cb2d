from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, Dict, Mapping, Optional

from ..models import Hunt

logger = logging.getLogger(__name__)

HUNT_FIELDS = ("encounters", "methods", "notes", "location")


def merge_fields(current: Optional[Hunt], pokemon_id: int, fields: Mapping[str, Any]) -> Hunt:
    """Overlay *fields* on *current* and validate the result.

    Only keys in :data:`HUNT_FIELDS` may be written; anything else raises
    ``ValueError``.
    """

    unknown = set(fields) - set(HUNT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown hunt fields: {sorted(unknown)}")
    base = current.model_dump() if current is not None else {"pokemon_id": pokemon_id}
    base.update(fields)
    base["pokemon_id"] = pokemon_id
    return Hunt.model_validate(base)


class HuntStore:
    """Storage boundary for hunts, one collection per user.

    Reads degrade to an empty mapping and background writes log their
    failures; neither raises to the caller.  Writes with an empty
    ``user_id`` are ignored.
    """

    def read_hunts(self, user_id: str) -> Dict[int, Hunt]:
        raise NotImplementedError

    def write_hunt(
        self,
        user_id: str,
        pokemon_id: int,
        fields: Mapping[str, Any],
        ver: Optional[int] = None,
    ) -> bool:
        """Merge *fields* into the stored hunt.

        Returns ``False`` when the write was dropped, either because there is
        no user or because *ver* is not newer than the stored version.
        """
        raise NotImplementedError

    def delete_hunt(self, user_id: str, pokemon_id: int) -> None:
        raise NotImplementedError

    def persist(
        self,
        user_id: str,
        pokemon_id: int,
        fields: Mapping[str, Any],
        ver: Optional[int] = None,
    ) -> threading.Thread:
        """Write in the background and return the started thread.

        Public helper for one-off writes from callers that do not batch
        edits.  :class:`~shinyhunt.writer.DebouncedWriter` calls
        :meth:`write_hunt` directly because it must hold its per-key lock
        for the duration of the write.
        """
        fields = dict(fields)

        def _commit() -> None:
            try:
                self.write_hunt(user_id, pokemon_id, fields, ver=ver)
            except (sqlite3.Error, OSError, ValueError) as exc:
                logger.error("Failed to save hunt %s for %s: %s", pokemon_id, user_id, exc)

        t = threading.Thread(target=_commit)
        t.start()
        return t

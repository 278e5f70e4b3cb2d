import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

from ..constants import (
    ALL_POKEMON_LIMIT,
    BATCH_SIZE,
    GENERATION_OFFSETS,
    POKEAPI_BASE_URL,
    SPRITE_URL_TEMPLATE,
)
from ..helpers import display_name, safe_request
from ..models import Pokemon

logger = logging.getLogger(__name__)


def list_url(generation: Optional[int] = None) -> str:
    """Return the PokeAPI list URL for *generation* (all of Gen 1-4 when omitted)."""
    if generation:
        bounds = GENERATION_OFFSETS.get(generation)
        if bounds is None:
            raise ValueError(f"Unknown generation: {generation}")
        limit, offset = bounds["limit"], bounds["offset"]
    else:
        limit, offset = ALL_POKEMON_LIMIT, 0
    return f"{POKEAPI_BASE_URL}/pokemon?limit={limit}&offset={offset}"


def _fetch_details(
    entry: Dict[str, Any],
    session: requests.Session,
    metrics: Optional[Dict[str, Any]],
) -> Optional[Pokemon]:
    name = entry.get("name", "?")
    try:
        response = safe_request(entry["url"], session=session, metrics=metrics)
        details = response.json()
        return Pokemon(
            id=details["id"],
            name=display_name(details["name"]),
            sprite=SPRITE_URL_TEMPLATE.format(name=details["name"]),
        )
    except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
        logger.error("Error processing %s: %s", name, exc)
        return None


def fetch_roster(
    generation: Optional[int] = None,
    session: Optional[requests.Session] = None,
    batch_size: int = BATCH_SIZE,
    metrics: Optional[Dict[str, Any]] = None,
) -> List[Pokemon]:
    """Fetch the Pokémon of *generation* from PokeAPI, sorted by id.

    Detail pages are requested *batch_size* at a time.  Entries whose detail
    request fails are skipped; any failure listing the generation yields an
    empty list rather than an exception.
    """

    sess = session or requests.Session()
    try:
        url = list_url(generation)
        results = safe_request(url, session=sess, metrics=metrics).json()["results"]
    except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
        logger.error("Failed to fetch Pokemon data. The PokeAPI might be down. %s", exc)
        return []

    roster: List[Pokemon] = []
    with ThreadPoolExecutor(max_workers=max(1, batch_size)) as pool:
        for i in range(0, len(results), batch_size):
            batch = results[i : i + batch_size]
            for pokemon in pool.map(lambda e: _fetch_details(e, sess, metrics), batch):
                if pokemon is not None:
                    roster.append(pokemon)
    logger.info("Fetched %d Pokemon for generation %s", len(roster), generation or "all")
    roster.sort(key=lambda p: p.id)
    return roster

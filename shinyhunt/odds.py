"""Shiny odds calculations.

The engine turns a hunt's encounter count and active methods into an
effective shiny rate and the cumulative chance of having seen at least one
shiny so far.  Every call is pure: no I/O, no shared state, safe to call
from any thread.

The cumulative chance applies the *current* method set to every logged
encounter; the hunt does not record which methods were active when.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Union

from .models import OddsResult, ShinyMethod

CatalogEntry = Union[ShinyMethod, Mapping[str, Any]]


def _rolls_by_id(catalog: Iterable[CatalogEntry]) -> Dict[str, int]:
    rolls: Dict[str, int] = {}
    for method in catalog:
        if isinstance(method, Mapping):
            rolls[str(method["id"])] = int(method.get("rolls", 0))
        else:
            rolls[method.id] = method.rolls
    return rolls


def total_rolls(catalog: Iterable[CatalogEntry], active_method_ids: Iterable[str]) -> int:
    """Return the number of shiny rolls per encounter.

    The player's own roll is always counted, so the result is at least 1
    even for an empty catalog.  Ids missing from *catalog* contribute 0.
    """

    rolls = _rolls_by_id(catalog)
    return 1 + sum(rolls.get(method_id, 0) for method_id in set(active_method_ids))


def compute_odds(
    base_odds: int,
    catalog: Iterable[CatalogEntry],
    active_method_ids: Iterable[str],
    encounters: int,
) -> OddsResult:
    """Compute the effective rate and cumulative shiny probability.

    Parameters
    ----------
    base_odds:
        Denominator of the unmodified 1-in-N shiny rate.
    catalog:
        Known methods, either :class:`ShinyMethod` instances or mappings with
        ``id`` and ``rolls`` keys.
    active_method_ids:
        Methods active on the hunt.  Unknown ids are ignored.
    encounters:
        Encounters logged so far.  Negative values are treated as 0.

    Returns
    -------
    OddsResult
        Unrounded values; round only for display.
    """

    rolls = total_rolls(catalog, active_method_ids)
    effective_rate = base_odds / rolls
    per_encounter = 1 / effective_rate
    if encounters <= 0:
        cumulative = 0.0
    else:
        try:
            cumulative = 1 - (1 - per_encounter) ** encounters
        except OverflowError:
            # encounters too large for a float; the formula tends to 1
            cumulative = 1.0 if per_encounter > 0 else 0.0
    return OddsResult(
        total_rolls=rolls,
        effective_rate=effective_rate,
        per_encounter_probability=per_encounter,
        cumulative_probability=cumulative,
    )

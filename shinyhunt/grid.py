"""Search, filter, sort and box grouping for the roster view."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .constants import GROUP_SIZE
from .helpers import generation_from_id
from .models import Hunt, Pokemon

SORT_KEYS = {"id": "Number", "name": "Name", "encounters": "Encounters"}

COLUMNS = ["Number", "Name", "Sprite", "Generation", "Encounters"]


def build_roster_frame(roster: Iterable[Pokemon], hunts: Dict[int, Hunt]) -> pd.DataFrame:
    """Join the roster with hunt encounter counts (0 where no hunt exists)."""

    rows = [
        {
            "Number": p.id,
            "Name": p.name,
            "Sprite": p.sprite,
            "Generation": generation_from_id(p.id),
            "Encounters": hunts[p.id].encounters if p.id in hunts else 0,
        }
        for p in roster
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def apply_filters(
    df: pd.DataFrame,
    search: Optional[str] = None,
    generation: Optional[int] = None,
) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    if generation:
        mask &= df["Generation"] == generation
    if search:
        mask &= df["Name"].str.lower().str.contains(search.lower(), regex=False)
    return df[mask]


def sort_roster(df: pd.DataFrame, option: str = "id-asc") -> pd.DataFrame:
    """Sort by an option such as ``name-desc`` or ``encounters-asc``.

    Ties keep their current relative order.
    """

    key, _, direction = option.partition("-")
    if key not in SORT_KEYS or direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort option: {option}")
    return df.sort_values(
        SORT_KEYS[key], ascending=direction == "asc", kind="stable"
    ).reset_index(drop=True)


def group_boxes(
    df: pd.DataFrame,
    search_active: bool = False,
    group_size: int = GROUP_SIZE,
) -> List[Tuple[str, pd.DataFrame]]:
    """Split *df* into titled boxes.

    While searching everything lands in a single "Search Results" group;
    otherwise rows are chunked into boxes titled ``Box #n (first-last)``.
    """

    if search_active:
        return [("Search Results", df)]
    groups: List[Tuple[str, pd.DataFrame]] = []
    for start in range(0, len(df), group_size):
        chunk = df.iloc[start : start + group_size]
        first, last = chunk["Number"].iloc[0], chunk["Number"].iloc[-1]
        groups.append((f"Box #{len(groups) + 1} ({first}-{last})", chunk))
    return groups


def search_pokemon(roster: Sequence[Pokemon], term: str, limit: int = 10) -> List[Pokemon]:
    """Quick lookup by name; a blank term matches nothing."""
    if not term.strip():
        return []
    needle = term.lower()
    return [p for p in roster if needle in p.name.lower()][:limit]

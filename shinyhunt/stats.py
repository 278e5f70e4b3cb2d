"""Aggregate statistics across a user's hunts."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List

import pandas as pd

from .constants import GENERATION_RANGES
from .helpers import generation_from_id
from .models import GenerationCount, Hunt, HuntStats, HuntSummary, Pokemon

TOP_HUNTS = 5


def compute_stats(hunts: Iterable[Hunt], roster: Iterable[Pokemon]) -> HuntStats:
    """Summarise *hunts*.

    Every hunt counts towards the totals and generation breakdowns, but
    only hunts for Pokémon present in *roster* can appear in the top list
    or as the luckiest hunt (the one with the fewest encounters).
    """

    hunts = list(hunts)
    generations = [gen for _, _, gen in GENERATION_RANGES]
    if not hunts:
        return HuntStats(
            encounters_by_generation=[GenerationCount(name=f"Gen {g}", value=0) for g in generations],
            hunts_by_generation=[GenerationCount(name=f"Gen {g}", value=0) for g in generations],
        )

    pokemon_by_id: Dict[int, Pokemon] = {p.id: p for p in roster}
    df = pd.DataFrame(
        {
            "pokemon_id": [h.pokemon_id for h in hunts],
            "encounters": [h.encounters for h in hunts],
        }
    )
    df["generation"] = df["pokemon_id"].apply(generation_from_id)

    total_encounters = int(df["encounters"].sum())
    total_hunts = len(df)
    average = math.floor(total_encounters / total_hunts + 0.5)

    ranked = df[df["pokemon_id"].isin(list(pokemon_by_id))].sort_values(
        "encounters", ascending=False, kind="stable"
    )
    top: List[HuntSummary] = [
        HuntSummary(pokemon=pokemon_by_id[int(row.pokemon_id)], encounters=int(row.encounters))
        for row in ranked.head(TOP_HUNTS).itertuples()
    ]
    luckiest = None
    if not ranked.empty:
        row = ranked.iloc[-1]
        luckiest = HuntSummary(
            pokemon=pokemon_by_id[int(row["pokemon_id"])], encounters=int(row["encounters"])
        )

    by_gen = df.groupby("generation")["encounters"].agg(["sum", "count"])
    encounters_by_gen = []
    hunts_by_gen = []
    for gen in generations:
        encounters = int(by_gen.loc[gen, "sum"]) if gen in by_gen.index else 0
        count = int(by_gen.loc[gen, "count"]) if gen in by_gen.index else 0
        encounters_by_gen.append(GenerationCount(name=f"Gen {gen}", value=encounters))
        hunts_by_gen.append(GenerationCount(name=f"Gen {gen}", value=count))

    return HuntStats(
        total_encounters=total_encounters,
        total_hunts=total_hunts,
        average_encounters=average,
        top_hunts=top,
        luckiest_hunt=luckiest,
        encounters_by_generation=encounters_by_gen,
        hunts_by_generation=hunts_by_gen,
    )

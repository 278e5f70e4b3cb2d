from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Pokemon(BaseModel):
    """A roster entry fetched from PokeAPI."""

    id: int
    name: str
    sprite: str


class ShinyMethod(BaseModel):
    """Static catalog entry for a shiny hunting method.

    ``rolls`` is the number of *additional* shiny rolls the method grants per
    encounter on top of the player's own base roll.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    rolls: int = Field(ge=0)
    description: str = ""


class Hunt(BaseModel):
    """Per-user progress towards a shiny Pokémon."""

    pokemon_id: int
    encounters: int = Field(default=0, ge=0)
    methods: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    location: Optional[str] = None

    @field_validator("methods", mode="before")
    @classmethod
    def _dedupe_methods(cls, value: object) -> object:
        """Collapse duplicate method ids while keeping first-seen order."""
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(dict.fromkeys(value))
        return value


class OddsResult(BaseModel):
    """Output of :func:`shinyhunt.odds.compute_odds`."""

    model_config = ConfigDict(frozen=True)

    total_rolls: int
    effective_rate: float
    per_encounter_probability: float
    cumulative_probability: float


class HuntSummary(BaseModel):
    pokemon: Pokemon
    encounters: int


class GenerationCount(BaseModel):
    name: str
    value: int


class HuntStats(BaseModel):
    """Aggregate figures across all of a user's hunts."""

    total_encounters: int = 0
    total_hunts: int = 0
    average_encounters: int = 0
    top_hunts: List[HuntSummary] = Field(default_factory=list)
    luckiest_hunt: Optional[HuntSummary] = None
    encounters_by_generation: List[GenerationCount] = Field(default_factory=list)
    hunts_by_generation: List[GenerationCount] = Field(default_factory=list)

    def as_rows(self) -> Dict[str, int]:
        return {
            "Total Encounters": self.total_encounters,
            "Active Hunts": self.total_hunts,
            "Avg. Encounters": self.average_encounters,
        }

"""Static shiny hunting data shared across the package."""

from typing import Dict, List, Tuple

from .models import ShinyMethod

# Base shiny rate (1 in BASE_ODDS) with no bonus methods active.
BASE_ODDS: int = 8192

SHINY_METHODS: List[ShinyMethod] = [
    ShinyMethod(
        id="masuda-method",
        name="Masuda Method",
        rolls=4,
        description="Breeding two Pokémon from different language games.",
    ),
]

# PokeAPI list parameters per generation.
GENERATION_OFFSETS: Dict[int, Dict[str, int]] = {
    1: {"limit": 151, "offset": 0},
    2: {"limit": 100, "offset": 151},
    3: {"limit": 135, "offset": 251},
    4: {"limit": 107, "offset": 386},
}

# Gen 1-4 combined.
ALL_POKEMON_LIMIT = 493

# Number of detail requests issued concurrently when building a roster.
BATCH_SIZE = 50

# Pokémon shown per box in the roster view.
GROUP_SIZE = 30

# (first id, last id, generation)
GENERATION_RANGES: List[Tuple[int, int, int]] = [
    (1, 151, 1),
    (152, 251, 2),
    (252, 386, 3),
    (387, 493, 4),
]

POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
SPRITE_URL_TEMPLATE = "https://img.pokemondb.net/sprites/diamond-pearl/shiny/{name}.png"
SEREBII_URL_TEMPLATE = "https://www.serebii.net/pokedex-dp/{number}.shtml"

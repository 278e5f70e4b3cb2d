"""shinyhunt package."""

from .config import Settings, build_settings, load_config
from .constants import BASE_ODDS, SHINY_METHODS
from .models import Hunt, HuntStats, OddsResult, Pokemon, ShinyMethod
from .odds import compute_odds, total_rolls
from .roster import RosterCache
from .sources.pokeapi import fetch_roster
from .stats import compute_stats
from .tracker import HuntTracker
from .writer import DebouncedWriter

__all__ = [
    "BASE_ODDS",
    "SHINY_METHODS",
    "Settings",
    "build_settings",
    "load_config",
    "Hunt",
    "HuntStats",
    "OddsResult",
    "Pokemon",
    "ShinyMethod",
    "compute_odds",
    "total_rolls",
    "RosterCache",
    "fetch_roster",
    "compute_stats",
    "HuntTracker",
    "DebouncedWriter",
]

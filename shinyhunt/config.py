"""Configuration loading.

Settings are read once and passed explicitly to the components that need
them; nothing in the package reads configuration from module globals.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .constants import BASE_ODDS, BATCH_SIZE, SHINY_METHODS
from .models import ShinyMethod

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"
DEFAULT_DB_PATH = Path.home() / ".shinyhunt" / "hunts.db"


class Settings(BaseModel):
    base_odds: int = Field(default=BASE_ODDS, gt=0)
    methods: List[ShinyMethod] = Field(default_factory=lambda: list(SHINY_METHODS))
    batch_size: int = Field(default=BATCH_SIZE, gt=0)
    debounce_seconds: float = Field(default=1.0, ge=0)
    db_path: Path = DEFAULT_DB_PATH
    user_id: Optional[str] = None

    def method(self, method_id: str) -> Optional[ShinyMethod]:
        for method in self.methods:
            if method.id == method_id:
                return method
        return None


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from *path* if it exists.

    Parameters
    ----------
    path:
        Optional path to a JSON configuration file. When omitted the function
        looks for ``config.json`` in the repository root.  A missing or
        unreadable file results in an empty config dictionary.
    """

    cfg_path = path or DEFAULT_CONFIG_PATH
    try:
        with open(cfg_path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", cfg_path)
        return {}
    return data


def build_settings(config: Dict[str, Any]) -> Settings:
    """Build :class:`Settings` from a config mapping.

    Supported keys in *config*:

    ``base_odds``: denominator of the unmodified shiny rate.
    ``methods``: extra catalog entries; an entry reusing a built-in id
    replaces it.
    ``batch_size``: concurrent PokeAPI detail requests.
    ``debounce_seconds``: quiet period before hunt edits are written.
    ``db_path``: SQLite file holding hunts.
    ``user_id``: default user for the command line.
    """

    values: Dict[str, Any] = {
        k: config[k]
        for k in ("base_odds", "batch_size", "debounce_seconds", "db_path", "user_id")
        if config.get(k) is not None
    }

    extra = config.get("methods")
    if isinstance(extra, list):
        catalog = {m.id: m for m in SHINY_METHODS}
        for entry in extra:
            method = ShinyMethod.model_validate(entry)
            catalog[method.id] = method
        values["methods"] = list(catalog.values())

    return Settings(**values)

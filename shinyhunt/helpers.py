import json
import logging
import math
import random
import time
import uuid
from typing import Any, Dict, Optional

import requests

from .constants import GENERATION_RANGES, SEREBII_URL_TEMPLATE

logger = logging.getLogger(__name__)


def generation_from_id(pokemon_id: int) -> int:
    """Return the generation a National Dex number belongs to, or 0."""
    for start, end, gen in GENERATION_RANGES:
        if start <= pokemon_id <= end:
            return gen
    return 0


def display_name(name: str) -> str:
    """Capitalise the first letter of a PokeAPI name (``mr-mime`` -> ``Mr-mime``)."""
    return name[:1].upper() + name[1:]


def format_rate(effective_rate: float) -> str:
    """Format an effective rate as ``1 / N`` rounding half up."""
    return f"1 / {math.floor(effective_rate + 0.5)}"


def format_probability(probability: float) -> str:
    """Format a probability as a percentage with two decimals."""
    return f"{probability * 100:.2f}%"


def format_dex_number(pokemon_id: int) -> str:
    return f"#{pokemon_id:04d}"


def serebii_url(pokemon_id: int) -> str:
    """Link to the Diamond/Pearl Serebii dex page for ``pokemon_id``."""
    return SEREBII_URL_TEMPLATE.format(number=f"{pokemon_id:03d}")


def _log_attempt(level: int, event: str, url: str, attempt: int, started: float, **extra: Any) -> None:
    entry = {
        "event": event,
        "url": url,
        "attempt": attempt,
        "latency": round(time.time() - started, 2),
        **extra,
    }
    logger.log(level, json.dumps(entry))


def _count(metrics: Optional[Dict[str, Any]], started: float, error: bool) -> None:
    if metrics is None:
        return
    metrics.setdefault("latencies", []).append(time.time() - started)
    metrics["requests"] = metrics.get("requests", 0) + 1
    if error:
        metrics["errors"] = metrics.get("errors", 0) + 1


def safe_request(
    url: str,
    retries: int = 3,
    session: Optional[requests.Session] = None,
    delay: float = 1.0,
    metrics: Optional[Dict[str, Any]] = None,
    timeout: float = 15.0,
) -> requests.Response:
    """GET a PokeAPI resource, retrying rate limits and transient failures.

    A roster build issues one list request and hundreds of detail requests,
    so HTTP 429 and :class:`requests.RequestException` are retried up to
    *retries* times with exponential backoff plus jitter.  The last error is
    re-raised for the roster fetcher to turn into an empty roster.  Each
    attempt is logged as one JSON line tagged with a short request id, and
    counted in *metrics* when given.
    """
    sess = session or requests.Session()
    backoff = delay
    for attempt in range(1, retries + 1):
        request_id = uuid.uuid4().hex[:8]
        started = time.time()
        try:
            response = sess.get(url, timeout=timeout)
            if response.status_code != 429:
                response.raise_for_status()
        except requests.RequestException as exc:
            _count(metrics, started, error=True)
            _log_attempt(
                logging.WARNING, "request_error", url, attempt, started,
                error=str(exc), request_id=request_id,
            )
            if attempt == retries:
                raise
        else:
            rate_limited = response.status_code == 429
            _count(metrics, started, error=rate_limited)
            _log_attempt(
                logging.INFO, "request", url, attempt, started,
                status=response.status_code, request_id=request_id,
            )
            if not rate_limited:
                return response
        time.sleep(backoff + random.uniform(0, delay))
        backoff *= 2
    raise requests.RequestException(f"Failed to fetch {url} after {retries} attempts")

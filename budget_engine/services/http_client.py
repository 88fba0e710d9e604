from __future__ import annotations

"""JSON-over-HTTP helper for the live FX source.

stdlib urllib only: one GET per cache miss, retried with exponential backoff.
A response that is not a JSON object counts as a failed fetch.
"""
import http.client
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("budget_engine.http")

USER_AGENT = "budget-engine/0.1"


class HttpError(Exception):
    """Every attempt to fetch a JSON document failed."""


def _build_request(
    url: str, headers: Optional[Mapping[str, str]]
) -> urllib.request.Request:
    merged = {"Accept": "application/json", "User-Agent": USER_AGENT}
    merged.update(headers or {})
    return urllib.request.Request(url, headers=merged)


def _read_object(resp, url: str) -> Dict[str, Any]:
    if resp.status >= 400:
        raise HttpError(f"HTTP {resp.status} for {url}")
    try:
        data = json.loads(resp.read().decode("utf-8"))
    except ValueError as e:
        raise HttpError(f"Invalid JSON from {url}") from e
    if not isinstance(data, dict):
        raise HttpError(f"Expected a JSON object from {url}")
    return data


def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
    headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    attempts = retries + 1
    last_err: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            request = _build_request(url, headers)
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                return _read_object(resp, url)
        except (OSError, http.client.HTTPException, HttpError) as e:
            last_err = e
            logger.debug("GET %s failed (attempt %d/%d): %s", url, attempt, attempts, e)
            if attempt < attempts:
                time.sleep(backoff * 2 ** (attempt - 1))
    raise HttpError(f"GET {url} failed after {attempts} attempt(s): {last_err}")

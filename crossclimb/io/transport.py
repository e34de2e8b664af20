"""HTTP transport with exponential backoff for transient upstream failures."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from ..core.exceptions import UpstreamUnavailableError
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


@dataclass
class TransportConfig:
    timeout_seconds: float = 30.0
    max_attempts: int = 3
    base_delay_seconds: float = 0.2


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    config: Optional[TransportConfig] = None,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """POST ``payload`` and return the decoded JSON body.

    Connection errors, timeouts, 429 and 5xx responses are retried with
    ``base_delay * 2**attempt`` backoff. Anything else, or running out of
    attempts, raises :class:`UpstreamUnavailableError`.
    """

    config = config or TransportConfig()
    poster = session.post if session is not None else requests.post
    last_error = "no attempt made"
    last_status: Optional[int] = None

    for attempt in range(1, config.max_attempts + 1):
        try:
            response = poster(
                url,
                json=payload,
                headers=headers,
                params=params,
                timeout=config.timeout_seconds,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            last_error = f"request failed: {exc}"
            LOGGER.warning("Upstream attempt %d/%d %s", attempt, config.max_attempts, last_error)
        else:
            if response.ok:
                try:
                    return response.json()
                except ValueError as exc:
                    raise UpstreamUnavailableError(
                        f"Upstream returned a non-JSON body: {exc}", response.status_code
                    ) from exc
            last_status = response.status_code
            last_error = f"HTTP {response.status_code}: {response.text[:200]}"
            if response.status_code not in RETRYABLE_STATUS:
                raise UpstreamUnavailableError(f"Upstream error {last_error}", last_status)
            LOGGER.warning("Upstream attempt %d/%d got %s", attempt, config.max_attempts, last_error)

        if attempt < config.max_attempts:
            sleep(config.base_delay_seconds * (2 ** attempt))

    raise UpstreamUnavailableError(
        f"Upstream unavailable after {config.max_attempts} attempts ({last_error})", last_status
    )

"""Shared HTTP helpers used by the API catalog.

Encapsulates request/timeout handling, bounded retries and a short-lived
response memo so callers only deal with ``(status, headers, body)`` tuples.
"""
from __future__ import annotations

import logging
import time
import json
from typing import Any, Optional, Dict, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


# Simple in-memory cache for HTTP responses
_http_cache: Dict[str, Tuple[Any, float]] = {}


def _get_cache_key(method: str, url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """Generate cache key from request parameters."""
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{method}:{url}:{headers_str}"


def _is_cache_valid(cache_entry: Tuple[Any, float]) -> bool:
    """Check if cache entry is still valid."""
    _, cached_time = cache_entry
    return time.time() - cached_time < Constants.HTTP_CACHE_TTL_SEC


def clear_cache() -> None:
    """Drop every memoised response."""
    _http_cache.clear()


def _backoff(attempt: int) -> None:
    """Sleep before the next attempt; nothing after the last one."""
    if attempt + 1 < Constants.HTTP_RETRY_MAX:
        time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** attempt))


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """GET with timeout, retries on 5xx and network errors, and a TTL memo.

    Returns:
        Tuple of (status_code, headers_dict, text). A status code of 0 means
        every attempt failed; the text then carries the last failure reason.
    """
    cache_key = _get_cache_key('GET', url, headers)
    safe_target = safe_url(url)

    if cache_key in _http_cache and _is_cache_valid(_http_cache[cache_key]):
        cached_data, _ = _http_cache[cache_key]
        logger.debug("HTTP cache hit for %s", safe_target)
        return cached_data

    last_failure = None
    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as t:
            try:
                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=headers,
                    **kwargs
                )
            except requests.Timeout:
                last_failure = "timeout"
            except requests.RequestException as exc:
                last_failure = str(exc)
            else:
                # Server errors are retried and never memoised
                if response.status_code < 500:
                    cache_data = (response.status_code, dict(response.headers), response.text)
                    _http_cache[cache_key] = (cache_data, time.time())
                    if is_debug_enabled(logger):
                        logger.debug(
                            "HTTP response",
                            extra=extra_context(
                                event="http_response",
                                component="http_client",
                                action="GET",
                                outcome="success",
                                status_code=response.status_code,
                                duration_ms=t.duration_ms(),
                                target=safe_target
                            )
                        )
                    return cache_data
                last_failure = f"HTTP {response.status_code}"

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP attempt failed",
                extra=extra_context(
                    event="http_retry",
                    component="http_client",
                    action="GET",
                    outcome=last_failure,
                    attempt=attempt + 1,
                    target=safe_target
                )
            )
        _backoff(attempt)

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_failure}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET ``url`` and decode a 200 JSON body.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)

    if status_code == 200 and text:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Response from %s is not valid JSON", safe_url(url))
            return status_code, response_headers, None
        return status_code, response_headers, parsed

    return status_code, response_headers, None

# src/services/changedetection_client.py

"""HTTP client for the changedetection.io REST API (v1)."""

import json
import logging
import time
from typing import Any
from urllib.parse import quote

from curl_cffi import requests as curl_requests

from src.config.settings import Settings

logger = logging.getLogger("watch_signal.changedetection")

_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})
_BODY_PREVIEW_CHARS = 300


class ChangeDetectionError(Exception):
    """A changedetection.io request failed or returned an unusable body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body[:_BODY_PREVIEW_CHARS]


class ChangeDetectionConfigError(ChangeDetectionError):
    """CHANGEDETECTION_URL is not configured."""


def _parse_json(text: str) -> Any:
    """Parse *text* as JSON, returning ``None`` when it is not JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return None


def _is_timestamp_key(key: Any) -> bool:
    return isinstance(key, str) and key.strip().isdigit()


def normalise_history(payload: Any) -> list[dict[str, Any]]:
    """Coerce a history response into a most-recent-first entry list.

    Accepts a bare list, a ``{"history": [...]}`` wrapper, or the
    native ``{"<epoch>": "<snapshot url>"}`` mapping.  Anything else
    is treated as no history.
    """
    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict) and isinstance(
        payload.get("history"), list
    ):
        entries = payload["history"]
    elif (
        isinstance(payload, dict)
        and payload
        and all(_is_timestamp_key(k) for k in payload)
    ):
        ordered = sorted(
            payload.items(), key=lambda kv: int(kv[0]), reverse=True
        )
        return [
            {"timestamp": int(ts), "url": url} for ts, url in ordered
        ]
    else:
        return []

    return [entry for entry in entries if isinstance(entry, dict)]


class ChangeDetectionClient:
    """Thin synchronous wrapper around the changedetection.io API.

    Transient failures (connection errors, 429 and 5xx) are retried up
    to ``Settings.MAX_RETRIES`` times with a linear back-off; any other
    non-2xx status fails immediately.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        raw_url = (
            base_url
            if base_url is not None
            else self.settings.CHANGEDETECTION_URL
        )
        self.base_url = raw_url.strip().rstrip("/")
        self.api_key = (
            api_key
            if api_key is not None
            else self.settings.CHANGEDETECTION_API_KEY
        )
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        if not self.base_url:
            logger.warning(
                "CHANGEDETECTION_URL is not configured; "
                "requests will fail until it is set"
            )

    # ── Private helpers ──────────────────────────────────

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _watch_url(self, uuid: str, suffix: str = "") -> str:
        if not self.base_url:
            msg = "CHANGEDETECTION_URL not configured"
            raise ChangeDetectionConfigError(msg)
        return (
            f"{self.base_url}/api/v1/watch/"
            f"{quote(uuid, safe='')}{suffix}"
        )

    def _get(self, url: str) -> Any:
        """GET *url* with retries; returns the final response.

        Raises ``ChangeDetectionError`` once retries are exhausted on
        connection errors.  Non-retryable statuses are returned to the
        caller untouched.
        """
        last_exc: Exception | None = None
        resp: Any = None
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=self._headers(),
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            except Exception as exc:
                last_exc = exc
                logger.warning(
                    "Request error on attempt %d for %s: %s",
                    attempt + 1,
                    url,
                    exc,
                    exc_info=True,
                )
                time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
                continue

            if resp.status_code not in _RETRYABLE_STATUSES:
                return resp
            logger.warning(
                "HTTP %d on attempt %d for %s",
                resp.status_code,
                attempt + 1,
                url,
            )
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))

        if resp is not None:
            return resp
        msg = f"Request to {url} failed: {last_exc}"
        raise ChangeDetectionError(msg) from last_exc

    # ── Public API ───────────────────────────────────────

    def get_watch_details(self, uuid: str) -> dict[str, Any]:
        """Fetch the current details object for watch *uuid*."""
        resp = self._get(self._watch_url(uuid))
        text = resp.text or ""
        if not 200 <= resp.status_code < 300:
            logger.error(
                "Failed to fetch watch details for %s (HTTP %d): %s",
                uuid,
                resp.status_code,
                text[:_BODY_PREVIEW_CHARS],
            )
            msg = (
                "Failed to fetch watch details: "
                f"{text.strip() or f'HTTP {resp.status_code}'}"
            )
            raise ChangeDetectionError(msg, resp.status_code, text)

        payload = _parse_json(text)
        if not isinstance(payload, dict):
            msg = "Unexpected response payload when fetching watch details"
            raise ChangeDetectionError(msg, resp.status_code, text)
        return payload

    def get_watch_history(self, uuid: str) -> list[dict[str, Any]]:
        """Fetch the history entries for watch *uuid*, newest first.

        A 404 means the watch has no history yet and yields ``[]``.
        """
        resp = self._get(self._watch_url(uuid, "/history"))
        text = resp.text or ""
        if resp.status_code == 404:
            logger.warning("Watch history not found (404) for %s", uuid)
            return []
        if not 200 <= resp.status_code < 300:
            logger.error(
                "Failed to fetch watch history for %s (HTTP %d): %s",
                uuid,
                resp.status_code,
                text[:_BODY_PREVIEW_CHARS],
            )
            msg = (
                "Failed to fetch watch history: "
                f"{text.strip() or f'HTTP {resp.status_code}'}"
            )
            raise ChangeDetectionError(msg, resp.status_code, text)

        return normalise_history(_parse_json(text))

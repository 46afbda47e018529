# src/services/watch_report.py

"""Builds the "latest price/stock" report for a single watch."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote, unquote, urlparse

from src.config.settings import Settings
from src.extraction.aggregator import extract_price_snapshot
from src.models.price_snapshot import PriceSnapshot
from src.models.watch import as_object, first_defined, get_path

logger = logging.getLogger("watch_signal.report")

_HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


class WatchSource(Protocol):
    """Anything that can fetch a watch's details and history."""

    def get_watch_details(self, uuid: str) -> dict[str, Any]: ...

    def get_watch_history(self, uuid: str) -> list[dict[str, Any]]: ...


@dataclass
class WatchReport:
    """Everything the presentation layer needs about one watch."""

    uuid: str
    watch_url: str = ""
    page_title: str = ""
    details: dict[str, Any] | None = None
    history: list[dict[str, Any]] = field(default_factory=list)
    snapshot: PriceSnapshot | None = None
    image_url: str | None = None
    notification_title: str | None = None
    notification_body: str | None = None
    error_message: str | None = None

    @property
    def has_price_data(self) -> bool:
        return self.snapshot is not None


def truncate(text: str, max_len: int) -> str:
    """Cut *text* to *max_len* characters, ending with an ellipsis."""
    if len(text) <= max_len:
        return text
    return f"{text[: max_len - 1]}…"


def infer_title_from_url(url: str) -> str:
    """Derive a human-readable title from a product URL.

    Uses the last path segment (``gaming-gpu-rtx-4090`` becomes
    ``Gaming Gpu Rtx 4090``), falling back to the host words.  Input
    that is not an absolute URL is returned unchanged.
    """
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname or ""
    except ValueError:
        return url
    if not parsed.scheme or not host:
        return url

    host = re.sub(r"^www\.", "", host, flags=re.IGNORECASE)
    segments = [s.strip() for s in parsed.path.split("/") if s.strip()]
    slug = unquote(segments[-1]) if segments else ""
    candidate = re.sub(r"\s+", " ", re.sub(r"[-_]+", " ", slug)).strip()

    def capitalise(text: str) -> str:
        return " ".join(
            word[0].upper() + word[1:] for word in text.split(" ") if word
        )

    pretty = (
        capitalise(candidate)
        if candidate
        else capitalise(host.replace(".", " "))
    )
    return pretty or host or url


def get_site_icon_url(url: str, size: int | None = None) -> str:
    """Return a favicon URL for the site hosting *url* ("" if invalid)."""
    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    icon_size = size if size is not None else Settings.SITE_ICON_SIZE
    return (
        f"{Settings.SITE_ICON_ENDPOINT}"
        f"?sz={icon_size}&domain={quote(host, safe='')}"
    )


def resolve_image_url(
    watch_url: str,
    details: Any = None,
    snapshot: PriceSnapshot | None = None,
) -> str | None:
    """Pick a representative image, falling back to the site icon."""
    latest_snapshot = get_path(details, "latest_snapshot")
    latest_data = get_path(details, "latest_data")
    candidate = first_defined(
        snapshot.image_url if snapshot else None,
        get_path(latest_snapshot, "image_url"),
        get_path(latest_snapshot, "image"),
        get_path(latest_data, "image_url"),
        get_path(latest_data, "image"),
        get_path(details, "image_url"),
        get_path(details, "image"),
        get_path(details, "screenshot_url"),
        get_path(details, "screenshot"),
        get_path(details, "last_notification.image"),
    )
    if isinstance(candidate, str):
        trimmed = candidate.strip()
        if _HTTP_URL_RE.match(trimmed):
            return trimmed
    return get_site_icon_url(watch_url) or None


def _short_error(exc: Exception) -> str:
    return str(exc)[: Settings.ERROR_MESSAGE_MAX]


def report_from_payloads(
    uuid: str,
    details: Any,
    history: list[dict[str, Any]] | None,
    watch_url: str | None = None,
    error_message: str | None = None,
) -> WatchReport:
    """Run the extraction engine on already-fetched payloads."""
    details_obj = as_object(details)
    report = WatchReport(
        uuid=uuid,
        details=dict(details_obj) if details_obj is not None else None,
        history=list(history or []),
        error_message=error_message,
    )

    report.snapshot = extract_price_snapshot(report.details, report.history)
    if report.snapshot is None:
        logger.info("No price/stock data found for %s", uuid)

    detail_url = get_path(details_obj, "url")
    report.watch_url = watch_url or (
        detail_url if isinstance(detail_url, str) else ""
    )

    title = get_path(details_obj, "title")
    if isinstance(title, str) and title.strip():
        report.page_title = title.strip()
    elif report.watch_url:
        report.page_title = infer_title_from_url(report.watch_url)
    else:
        report.page_title = uuid

    report.image_url = resolve_image_url(
        report.watch_url, details_obj, report.snapshot
    )

    notification = as_object(get_path(details_obj, "last_notification"))
    if notification is not None:
        body = notification.get("body")
        if body is not None and str(body):
            notif_title = notification.get("title")
            report.notification_title = (
                notif_title
                if isinstance(notif_title, str) and notif_title
                else "Last notification"
            )
            report.notification_body = truncate(
                str(body), Settings.NOTIFICATION_BODY_MAX
            )

    return report


def build_watch_report(
    client: WatchSource,
    uuid: str,
    watch_url: str | None = None,
    history_limit: int | None = None,
) -> WatchReport:
    """Fetch a watch's payloads and extract its latest commerce signal.

    Fetch failures never abort the report: a failed details fetch is
    recorded as the error message, a failed history fetch is logged and
    treated as empty history.
    """
    limit = (
        history_limit
        if history_limit is not None
        else Settings.HISTORY_LIMIT
    )
    details: dict[str, Any] | None = None
    history: list[dict[str, Any]] = []
    error_message: str | None = None

    try:
        details = client.get_watch_details(uuid)
    except Exception as exc:
        error_message = _short_error(exc)
        logger.error(
            "Failed to fetch watch details for %s", uuid, exc_info=True
        )

    try:
        history = client.get_watch_history(uuid)[: max(limit, 0)]
    except Exception as exc:
        logger.warning(
            "Failed to fetch watch history for %s; continuing without history",
            uuid,
            exc_info=True,
        )
        if error_message is None:
            error_message = _short_error(exc)

    return report_from_payloads(
        uuid, details, history, watch_url, error_message
    )

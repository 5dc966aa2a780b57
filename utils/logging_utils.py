"""
Logging configuration shared by the gateway service.

Usage
-----
In the process entrypoint:

    from utils.logging_utils import setup_logging

    setup_logging(level="INFO", job_name="weather_gateway")

In a module:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="cache_store/redis")
    logger.info("Cache hit", extra={"cache_key": key})

Every record carries `job_name` and `tag` fields so cache, upstream and API
lines can be told apart in a shared log stream.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


# Records emitted before setup_logging() still get timestamps and levels.
BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=logging.INFO,
    format=BOOTSTRAP_FORMAT,
    datefmt=BOOTSTRAP_DATEFMT,
)

DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SENSITIVE_QUERY_TOKENS = ("pass", "pwd", "secret", "token", "key")

_CONFIGURED: bool = False


class MaxLevelFilter(logging.Filter):
    """Pass only records at or below `max_level` (keeps WARNING+ off stdout)."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Guarantee a `tag` attribute on every record.

    Records from a tagged adapter keep their tag; anything else (uvicorn,
    redis, urllib3) falls back to the last segment of its logger name.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            logger_name = getattr(record, "name", "")
            record.tag = logger_name.split(".")[-1] if logger_name else "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp a fixed `job_name` (the service name) on every record."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self._job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self._job_name
        return True


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Build a dictConfig mapping with a stdout/stderr split.

    Parameters
    ----------
    level:
        Root logger level (e.g. "DEBUG", "INFO", logging.INFO).
    log_format:
        Formatter pattern for log messages.
    date_format:
        Formatter pattern for timestamps.
    job_name:
        Logical service name written into the `job_name` field.

    Returns
    -------
    dict suitable for logging.config.dictConfig().
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "stdout_max_info": {
                "()": MaxLevelFilter,
                "max_level": logging.INFO,
            },
        },
        "formatters": {
            "standard": {
                "format": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name", "stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name"],
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        # urllib3 logs full request lines, query string (API key) included
        "loggers": {
            "urllib3": {"level": "WARNING"},
        },
        "root": {
            "level": level,
            "handlers": ["stdout", "stderr"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Configure process-wide logging once.

    Repeated calls are no-ops unless `override_existing` is True.
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    config_dict = build_logging_config(
        level=level,
        log_format=log_format,
        date_format=date_format,
        job_name=job_name,
    )
    logging.config.dictConfig(config_dict)
    _CONFIGURED = True


def get_tagged_logger(
    name: str,
    *,
    tag: Optional[str] = None,
) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that always carries a `tag` field.

    When `tag` is omitted it defaults to the last segment of `name`,
    e.g. "app.lookup_service" -> "lookup_service".
    """
    base_logger = logging.getLogger(name)
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(base_logger, {"tag": tag})


def mask_url_secrets(url: str) -> str:
    """Return a copy of a connection or request URL with credentials masked.

    Examples
    --------
    - redis://:secret@cache:6379/0 -> redis://:***@cache:6379/0
    - https://host/timeline/paris?key=abc&unitGroup=metric
      -> https://host/timeline/paris?key=%2A%2A%2A&unitGroup=metric
    - redis://localhost:6379 -> unchanged
    """
    try:
        parsed = urlparse(url)
    except Exception:
        return url

    masked_query_pairs = []
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if any(token in key.lower() for token in _SENSITIVE_QUERY_TOKENS):
            masked_query_pairs.append((key, "***"))
        else:
            masked_query_pairs.append((key, value))
    masked_query = urlencode(masked_query_pairs)

    netloc = ""
    if parsed.username:
        netloc += "***"
    if parsed.password is not None:
        netloc += ":***"
    if netloc:
        netloc += "@"

    if parsed.hostname:
        netloc += parsed.hostname
    if parsed.port:
        netloc += f":{parsed.port}"

    # unix socket URLs (unix:///tmp/redis.sock) have no netloc
    if not netloc and parsed.netloc == "" and (parsed.path or "").startswith("/"):
        base = f"{parsed.scheme}:///{(parsed.path or '').lstrip('/')}"
        if masked_query:
            base = f"{base}?{masked_query}"
        return base

    return urlunparse(
        (parsed.scheme, netloc, parsed.path or "", parsed.params or "", masked_query, parsed.fragment or "")
    )

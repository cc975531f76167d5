# app/config.py
# Env-driven runtime settings (.env is honoured via python-dotenv).
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("jobsync.config")


@dataclass(frozen=True)
class Settings:
    database_url: str
    http_timeout: int
    http_retries: int
    http_backoff: float
    max_pages: int
    render_js: bool
    reactivate_only_removed: bool
    extract_after_sync: bool
    scheduler_enabled: bool
    scheduler_tz: str
    scheduler_time: str
    log_dir: str
    cors_origins: tuple


def _parse_int_with_floor(env_name: str, *, default_value: int, minimum_floor: int) -> int:
    raw = os.getenv(env_name)
    if raw is None or not str(raw).strip():
        value = int(default_value)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            logger.warning("[config] %s=%r is invalid. Using default %s.", env_name, raw, default_value)
            value = int(default_value)

    if value < minimum_floor:
        logger.warning(
            "[config] %s=%s below minimum (%s). Using %s.", env_name, value, minimum_floor, minimum_floor
        )
        value = minimum_floor
    return value


def _parse_float(env_name: str, *, default_value: float) -> float:
    raw = os.getenv(env_name)
    if raw is None or not str(raw).strip():
        return float(default_value)
    try:
        value = float(str(raw).strip())
    except ValueError:
        logger.warning("[config] %s=%r is invalid. Using default %s.", env_name, raw, default_value)
        return float(default_value)
    return max(value, 0.0)


def _parse_bool(env_name: str, *, default_value: bool) -> bool:
    raw = os.getenv(env_name)
    if raw is None or not str(raw).strip():
        return bool(default_value)

    normalized = str(raw).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False

    logger.warning("[config] %s=%r is invalid boolean. Using default %s.", env_name, raw, default_value)
    return bool(default_value)


def _parse_hhmm(env_name: str, *, default_value: str) -> str:
    raw = (os.getenv(env_name) or "").strip() or default_value
    try:
        hour, minute = [int(x) for x in raw.split(":")]
        if 0 <= hour < 24 and 0 <= minute < 60:
            return f"{hour:02d}:{minute:02d}"
    except ValueError:
        pass
    logger.warning("[config] %s=%r is not HH:MM. Using %s.", env_name, raw, default_value)
    return default_value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    cfg = Settings(
        database_url=os.getenv("DATABASE_URL") or "sqlite:///./data/jobs.db",
        http_timeout=_parse_int_with_floor("HTTP_TIMEOUT", default_value=20, minimum_floor=1),
        http_retries=_parse_int_with_floor("HTTP_RETRIES", default_value=2, minimum_floor=0),
        http_backoff=_parse_float("HTTP_BACKOFF", default_value=0.8),
        max_pages=_parse_int_with_floor("MAX_PAGES", default_value=50, minimum_floor=1),
        render_js=_parse_bool("SCRAPE_RENDER_JS", default_value=False),
        reactivate_only_removed=_parse_bool("REACTIVATE_ONLY_REMOVED", default_value=False),
        extract_after_sync=_parse_bool("EXTRACT_AFTER_SYNC", default_value=True),
        scheduler_enabled=_parse_bool("SCHEDULER_ENABLED", default_value=True),
        scheduler_tz=(os.getenv("SCHEDULER_TZ") or "UTC").strip(),
        scheduler_time=_parse_hhmm("SCHEDULER_TIME", default_value="06:00"),
        log_dir=os.getenv("LOG_DIR") or "data",
        cors_origins=tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip()) or ("*",),
    )
    logger.debug(
        "[config] effective HTTP_TIMEOUT=%s HTTP_RETRIES=%s MAX_PAGES=%s SCRAPE_RENDER_JS=%s REACTIVATE_ONLY_REMOVED=%s",
        cfg.http_timeout,
        cfg.http_retries,
        cfg.max_pages,
        cfg.render_js,
        cfg.reactivate_only_removed,
    )
    return cfg

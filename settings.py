from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache


_LOG_PATH_ENV = "CAMPTRIP_LOG_PATH"
_MARGIN_ENV = "CAMPTRIP_MARGIN"
_TABLE_WIDTH_ENV = "CAMPTRIP_TABLE_WIDTH"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_LOG_PATH = "7_14_2019.txt"
DEFAULT_MARGIN = 5
DEFAULT_TABLE_WIDTH = 30


@dataclass(frozen=True)
class Settings:
    log_path: str
    margin: int
    table_width: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_int_env(name: str, default: int, minimum: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def is_known_log_level(name: str) -> bool:
    return isinstance(logging.getLevelName(name.upper()), int)


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    level = candidate.upper()
    return level if is_known_log_level(level) else default


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_path=_read_str_env(_LOG_PATH_ENV, DEFAULT_LOG_PATH),
        margin=_read_int_env(_MARGIN_ENV, DEFAULT_MARGIN, minimum=0),
        table_width=_read_int_env(_TABLE_WIDTH_ENV, DEFAULT_TABLE_WIDTH, minimum=1),
        log_level=_read_log_level("WARNING"),
    )

"""Filesystem locations for the Cordkeeper database and log files.

The per-user data directory is resolved via ``platformdirs``. Setting
``CORDKEEPER_DATA_DIR`` overrides it, and a local ``data`` directory is used
if the platform directory cannot be created.
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir, user_log_dir

APP_NAME = "cordkeeper"
DATA_DIR_ENV = "CORDKEEPER_DATA_DIR"
DATABASE_FILENAME = "cordkeeper.db"
LOG_FILENAME = "cordkeeper.log"


def data_dir() -> Path:
    """Return the directory holding the database, creating it if needed."""

    override = os.environ.get(DATA_DIR_ENV)
    if override:
        path = Path(override).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    try:
        path = Path(user_data_dir(APP_NAME, appauthor=False))
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        fallback = Path("data")
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def database_path() -> Path:
    return data_dir() / DATABASE_FILENAME


def log_path() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser() / LOG_FILENAME
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


__all__ = [
    "APP_NAME",
    "DATABASE_FILENAME",
    "DATA_DIR_ENV",
    "LOG_FILENAME",
    "data_dir",
    "database_path",
    "log_path",
]

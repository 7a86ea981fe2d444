"""Timezone helpers.

Season boundaries are local midnights, so they have to be built in a zone
with daylight saving rules rather than in the fixed UTC offset that
``datetime.astimezone()`` produces.
"""

from __future__ import annotations

import os
from datetime import datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

_LOCALTIME_LINK = "/etc/localtime"


def zone_from_name(name: str) -> ZoneInfo:
    """Create a zone from an IANA name such as ``"America/New_York"``."""

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone {name!r}") from exc


def _candidate_names() -> list[str]:
    names: list[str] = []
    env_name = os.environ.get("TZ")
    if env_name:
        names.append(env_name.lstrip(":"))
    try:
        target = os.path.realpath(_LOCALTIME_LINK)
    except OSError:
        target = ""
    marker = "zoneinfo" + os.sep
    if marker in target:
        names.append(target.split(marker, 1)[1])
    return names


@lru_cache(maxsize=1)
def system_zone() -> tzinfo:
    """The system local zone, with its daylight saving rules when resolvable."""

    for name in _candidate_names():
        try:
            return zone_from_name(name)
        except ValueError:
            continue
    fallback = datetime.now().astimezone().tzinfo
    logger.warning(f"Could not resolve the local timezone name; using fixed offset {fallback}")
    return fallback


__all__ = ["system_zone", "zone_from_name"]

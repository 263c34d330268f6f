# -*- coding: utf-8 -*-
from __future__ import annotations
import sys
from zoneinfo import ZoneInfo
from loguru import logger
from .settings import settings


def timezone_filter(record):
    record["time"] = record["time"].astimezone(ZoneInfo(settings.LOG_TIMEZONE))
    return record


def init_log(level: str | None = None):
    log_level = (level or settings.LOG_LEVEL).upper()
    logger.remove()
    logger.add(sink=sys.stdout, level=log_level, filter=timezone_filter)
    return logger

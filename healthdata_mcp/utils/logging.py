# healthdata_mcp/utils/logging.py
"""JSON line logging.

In stdio mode stdout carries the MCP protocol, so logs must go to stderr.
"""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def setup_logging(level: str = "info", use_stdout: bool = False) -> logging.Logger:
    logger = logging.getLogger("healthdata_mcp")
    logger.setLevel(LEVELS.get(level, logging.INFO))
    logger.handlers = []
    logger.propagate = False

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler = logging.StreamHandler(sys.stdout if use_stdout else sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logger

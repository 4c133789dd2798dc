"""Logging setup shared by the heightmesh CLI and MCP server."""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """Route the 'heightmesh' namespace to a single stream handler.

    The CLI logs to stdout. The MCP server passes sys.stderr because its
    stdout carries the protocol. Calling again replaces the handler
    instead of adding a second one.
    """
    logger = logging.getLogger("heightmesh")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    return logger

"""
Logging setup for the MCP Elasticsearch server.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None) -> None:
    """
    Configure root logging for the server process.

    Logs go to stderr because stdout carries the MCP stdio protocol.

    Args:
        level: Log level name (defaults to ELASTIC_MCP_LOG_LEVEL or INFO)
    """
    level_name = (level or os.getenv("ELASTIC_MCP_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

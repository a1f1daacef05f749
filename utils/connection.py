"""
Elasticsearch connection management.

One AsyncElasticsearch client is shared by all tool calls for the lifetime
of the server process. The client pools and routes requests across the
configured endpoints itself, so access to it is not serialized here.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from elasticsearch import AsyncElasticsearch

from config.environments import get_elasticsearch_config
from mcp_types.primitives import ConnectionTarget
from utils.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

_es_client: Optional[AsyncElasticsearch] = None


def build_connection_target(config: Optional[Dict[str, Any]] = None) -> ConnectionTarget:
    """
    Build the connection target from configuration.

    Args:
        config: Elasticsearch configuration (read from the environment if omitted)

    Returns:
        Immutable ConnectionTarget

    Raises:
        ValidationError: If no endpoint is configured
    """
    if config is None:
        config = get_elasticsearch_config()

    hosts = tuple(config.get("hosts") or ())
    if not hosts:
        raise ValidationError("At least one Elasticsearch endpoint is required")

    return ConnectionTarget(
        hosts=hosts,
        api_key=config.get("api_key"),
        username=config.get("username"),
        password=config.get("password"),
        ca_certs=config.get("ca_certs"),
        verify_certs=config.get("verify_certs", True),
        request_timeout=config.get("timeout_ms", 30000) / 1000.0,
    )


def create_elasticsearch_client(target: Optional[ConnectionTarget] = None) -> AsyncElasticsearch:
    """
    Create a new AsyncElasticsearch client.

    Args:
        target: Connection target (built from the environment if omitted)

    Returns:
        Configured client
    """
    if target is None:
        target = build_connection_target()
    return AsyncElasticsearch(**target.to_client_params())


def open_client(target: Optional[ConnectionTarget] = None) -> AsyncElasticsearch:
    """Create the shared client, replacing nothing if one is already open."""
    global _es_client

    if _es_client is None:
        if target is None:
            target = build_connection_target()
        _es_client = create_elasticsearch_client(target)
        logger.info("Elasticsearch client created for %s", ", ".join(target.hosts))
    return _es_client


async def close_client() -> None:
    """Close the shared client and release its connections."""
    global _es_client

    client, _es_client = _es_client, None
    if client is not None:
        await client.close()
        logger.info("Elasticsearch client closed")


def get_elasticsearch_client() -> AsyncElasticsearch:
    """
    Get the shared Elasticsearch client, opening it on first use.

    Returns:
        Shared AsyncElasticsearch client
    """
    return open_client()


@asynccontextmanager
async def client_lifespan(server: Any = None) -> AsyncIterator[AsyncElasticsearch]:
    """Server lifespan: open the shared client on start, close it on shutdown."""
    client = open_client()
    try:
        yield client
    finally:
        await close_client()

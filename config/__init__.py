"""
Configuration management for MCP Elasticsearch server.
"""

from .environments import get_elasticsearch_config, parse_hosts

__all__ = [
    "get_elasticsearch_config",
    "parse_hosts",
]

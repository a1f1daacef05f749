"""
Environment configuration management.
"""

import os
from typing import Any, Dict, List, Optional


DEFAULT_URL = "http://localhost:9200"
DEFAULT_TIMEOUT_MS = 30000


def _getenv(*names: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-empty value among several variable names."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return default


def _parse_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def parse_hosts(value: Optional[str]) -> List[str]:
    """Split a comma-separated endpoint list, dropping blanks."""
    if not value:
        return []
    return [host.strip() for host in value.split(",") if host.strip()]


def get_elasticsearch_config() -> Dict[str, Any]:
    """
    Read Elasticsearch connection settings from the environment.

    Read at call time so a `.env` loaded at server start is honoured.

    Returns:
        Elasticsearch configuration dictionary
    """
    return {
        "hosts": parse_hosts(_getenv("ELASTIC_URL", "ELASTICSEARCH_URL", "ES_URL", default=DEFAULT_URL)),
        "api_key": _getenv("ELASTIC_API_KEY", "ELASTICSEARCH_API_KEY", "ES_API_KEY"),
        "username": _getenv("ELASTIC_USERNAME", "ELASTICSEARCH_USERNAME", "ES_USERNAME"),
        "password": _getenv("ELASTIC_PASSWORD", "ELASTICSEARCH_PASSWORD", "ES_PASSWORD"),
        "ca_certs": _getenv("ELASTIC_CA_CERTS", "ES_CA_CERT"),
        "timeout_ms": int(_getenv("ELASTIC_TIMEOUT", "ELASTICSEARCH_TIMEOUT", default=str(DEFAULT_TIMEOUT_MS))),
        "verify_certs": _parse_bool(_getenv("ELASTIC_VERIFY_CERTS")),
    }

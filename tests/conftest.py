"""
Pytest configuration and fixtures for MCP Elasticsearch tests.
"""

import pytest
import os
import sys
from unittest.mock import AsyncMock, Mock, patch
from typing import Any, Dict

from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def make_api_error(error_class, status: int, error_type: str, reason: str):
    """Build a real elasticsearch ApiError subclass instance with an error body."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    body = {"error": {"type": error_type, "reason": reason}, "status": status}
    return error_class(message=error_type, meta=meta, body=body)


def texts(result) -> list:
    """Text of every fragment in a tool result."""
    return [fragment.text for fragment in result]


@pytest.fixture
def logs_mapping() -> Dict[str, Any]:
    """Mapping of a log index with one free-text field."""
    return {
        "properties": {
            "msg": {"type": "text"},
            "level": {"type": "keyword"},
            "took_ms": {"type": "long"},
        }
    }


@pytest.fixture
def mock_elasticsearch(logs_mapping):
    """Mock AsyncElasticsearch client with canned 8.x responses."""
    mock_es = Mock()

    mock_es.info = AsyncMock(return_value={
        "name": "node-1",
        "cluster_name": "test-cluster",
        "version": {"number": "8.11.1"},
    })

    # Search response
    mock_es.search = AsyncMock(return_value={
        "took": 5,
        "timed_out": False,
        "hits": {
            "total": {"value": 1, "relation": "eq"},
            "hits": [
                {
                    "_index": "logs",
                    "_id": "1",
                    "_score": 1.3,
                    "_source": {"msg": "connection timeout", "level": "ERROR", "took_ms": 30000},
                    "highlight": {"msg": ["connection <em>timeout</em>"]},
                }
            ],
        },
    })

    mock_es.count = AsyncMock(return_value={"count": 2})
    mock_es.msearch = AsyncMock(return_value={"took": 3, "responses": []})
    mock_es.bulk = AsyncMock(return_value={"took": 12, "errors": False, "items": []})
    mock_es.reindex = AsyncMock(return_value={"task": "node-1:42"})

    # Index APIs
    mock_es.indices.exists = AsyncMock(return_value=True)
    mock_es.indices.get_mapping = AsyncMock(return_value={"logs": {"mappings": logs_mapping}})
    mock_es.indices.create = AsyncMock(return_value={
        "acknowledged": True,
        "shards_acknowledged": True,
        "index": "logs",
    })
    mock_es.indices.put_mapping = AsyncMock(return_value={"acknowledged": True})
    mock_es.indices.put_index_template = AsyncMock(return_value={"acknowledged": True})
    mock_es.indices.get_index_template = AsyncMock(return_value={"index_templates": []})
    mock_es.indices.delete_index_template = AsyncMock(return_value={"acknowledged": True})
    mock_es.indices.put_template = AsyncMock(return_value={"acknowledged": True})
    mock_es.indices.get_template = AsyncMock(return_value={})
    mock_es.indices.delete_template = AsyncMock(return_value={"acknowledged": True})

    # Cat and cluster APIs
    mock_es.cat.indices = AsyncMock(return_value=[
        {"health": "green", "status": "open", "index": "logs", "docs.count": "120"},
        {"health": "yellow", "status": "open", "index": "orders", "docs.count": "2"},
    ])
    mock_es.cluster.health = AsyncMock(return_value={
        "cluster_name": "test-cluster",
        "status": "green",
        "number_of_nodes": 3,
        "number_of_data_nodes": 2,
        "active_primary_shards": 5,
        "active_shards": 10,
        "relocating_shards": 0,
        "initializing_shards": 0,
        "unassigned_shards": 0,
        "number_of_pending_tasks": 0,
    })

    mock_es.close = AsyncMock()

    return mock_es


@pytest.fixture
def legacy_elasticsearch(mock_elasticsearch):
    """The same mock client reporting a 7.x engine."""
    mock_elasticsearch.info.return_value = {"version": {"number": "7.17.9"}}
    return mock_elasticsearch


@pytest.fixture
def mock_es_client(mock_elasticsearch):
    """Patch the shared client getter used by the server tools."""
    with patch('server.get_elasticsearch_client', return_value=mock_elasticsearch):
        yield mock_elasticsearch


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove every Elasticsearch connection variable from the environment."""
    for prefix in ("ELASTIC", "ELASTICSEARCH", "ES"):
        for suffix in ("URL", "API_KEY", "USERNAME", "PASSWORD", "TIMEOUT", "VERIFY_CERTS", "CA_CERTS", "CA_CERT"):
            monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
    return monkeypatch

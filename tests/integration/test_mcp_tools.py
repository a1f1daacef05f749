"""
Integration tests for MCP tools, called through an in-memory FastMCP client.
"""

import pytest
from unittest.mock import patch

from elasticsearch import NotFoundError as ESNotFoundError
from fastmcp import Client

import utils.connection as connection
from conftest import make_api_error

EXPECTED_TOOLS = {
    "list_collections",
    "get_mapping",
    "search",
    "cluster_health",
    "create_collection",
    "upsert_mapping",
    "bulk_write",
    "reindex",
    "create_template",
    "get_template",
    "delete_template",
    "count",
    "multi_search",
}


@pytest.fixture
def mcp_server(mock_es_client):
    """The FastMCP app with every Elasticsearch call going to the mock client."""
    connection._es_client = None
    with patch("utils.connection.create_elasticsearch_client", return_value=mock_es_client):
        from server import mcp
        yield mcp
    connection._es_client = None


async def call(server, name, arguments):
    async with Client(server) as client:
        result = await client.call_tool(name, arguments)
    return [block.text for block in result.content]


class TestToolRegistration:
    """Test the registered tool surface."""

    @pytest.mark.asyncio
    async def test_all_tools_listed(self, mcp_server):
        async with Client(mcp_server) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_search_schema_requires_index_and_query(self, mcp_server):
        async with Client(mcp_server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        assert set(tools["search"].inputSchema["required"]) == {"index", "query_body"}


class TestToolScenarios:
    """End-to-end scenarios through the MCP tool layer."""

    @pytest.mark.asyncio
    async def test_bulk_write_then_count(self, mcp_server, mock_es_client):
        mock_es_client.bulk.return_value = {
            "took": 4,
            "errors": False,
            "items": [{"index": {"_id": "a", "status": 201}}, {"index": {"_id": "b", "status": 201}}],
        }

        bulk_output = await call(mcp_server, "bulk_write", {
            "index": "orders",
            "documents": [{"id": "a", "v": 1}, {"id": "b", "v": 2}],
            "id_field": "id",
        })
        count_output = await call(mcp_server, "count", {"index": "orders"})

        assert "Successfully imported: 2" in bulk_output[0]
        assert "Failed: 0" in bulk_output[0]
        assert count_output == ["Document count: 2"]

    @pytest.mark.asyncio
    async def test_search_highlights_match(self, mcp_server, mock_es_client):
        output = await call(mcp_server, "search", {
            "index": "logs",
            "query_body": {"query": {"match": {"msg": "timeout"}}},
        })

        assert output[0].startswith("Total search results: 1,")
        assert "<em>timeout</em>" in output[1]
        body = mock_es_client.search.call_args[1]["body"]
        assert body["highlight"]["pre_tags"] == ["<em>"]

    @pytest.mark.asyncio
    async def test_multi_search_with_missing_index(self, mcp_server, mock_es_client):
        mock_es_client.msearch.return_value = {
            "responses": [
                {"hits": {"total": {"value": 1}, "hits": [{"_id": "1", "_score": 1.0, "_source": {"v": 1}}]}},
                {"error": {"type": "index_not_found_exception", "reason": "no such index [ghost]"}, "status": 404},
            ]
        }

        output = await call(mcp_server, "multi_search", {"searches": [
            {"index": "orders", "query_body": {"query": {"match_all": {}}}},
            {"index": "ghost", "query_body": {"query": {"match_all": {}}}},
        ]})

        assert len(output) == 3
        assert output[1].startswith("Search 1 (Index: orders):\nTotal hits: 1")
        assert output[2].startswith("Search 2 (Index: ghost):\nError:")
        assert "ghost" in output[2]

    @pytest.mark.asyncio
    async def test_reindex_returns_task_handle(self, mcp_server, mock_es_client):
        output = await call(mcp_server, "reindex", {"source_index": "a", "dest_index": "b"})

        assert output[0].startswith("Reindex operation started. Task ID: node-1:42")
        assert mock_es_client.reindex.call_args[1]["wait_for_completion"] is False

    @pytest.mark.asyncio
    async def test_create_collection_then_get_mapping(self, mcp_server, mock_es_client):
        mappings = {"properties": {"msg": {"type": "text"}}}
        mock_es_client.indices.get_mapping.return_value = {
            "logs": {"mappings": {"properties": {"msg": {"type": "text"}, "_internal": {"type": "keyword"}}}}
        }

        create_output = await call(mcp_server, "create_collection", {"index": "logs", "mappings": mappings})
        mapping_output = await call(mcp_server, "get_mapping", {"index": "logs"})

        assert create_output[0].startswith('Index "logs" created successfully!')
        assert '"msg"' in mapping_output[1]

    @pytest.mark.asyncio
    async def test_engine_errors_become_error_fragments(self, mcp_server, mock_es_client):
        mock_es_client.indices.get_mapping.side_effect = make_api_error(
            ESNotFoundError, 404, "index_not_found_exception", "no such index [ghost]"
        )

        output = await call(mcp_server, "get_mapping", {"index": "ghost"})

        assert len(output) == 1
        assert output[0].startswith('Error: No mapping found for index "ghost"')

    @pytest.mark.asyncio
    async def test_cluster_health_with_indices(self, mcp_server, mock_es_client):
        output = await call(mcp_server, "cluster_health", {"include_indices": True})

        mock_es_client.cluster.health.assert_awaited_once_with(level="indices")
        assert output[0].startswith("Cluster Name: test-cluster")

    @pytest.mark.asyncio
    async def test_template_round_trip(self, mcp_server, mock_es_client):
        mock_es_client.indices.get_index_template.return_value = {
            "index_templates": [{"name": "logs", "index_template": {"index_patterns": ["logs-*"]}}]
        }

        create_output = await call(mcp_server, "create_template", {
            "name": "logs",
            "index_patterns": ["logs-*"],
            "template": {"settings": {"number_of_shards": 1}},
        })
        get_output = await call(mcp_server, "get_template", {"name": "logs"})
        delete_output = await call(mcp_server, "delete_template", {"name": "logs"})

        assert create_output[0].startswith('Index template "logs" created successfully.')
        assert get_output[1].startswith("Template: logs")
        assert delete_output == ['Index template "logs" deleted successfully.']

    @pytest.mark.asyncio
    async def test_list_collections_and_upsert(self, mcp_server, mock_es_client):
        list_output = await call(mcp_server, "list_collections", {})
        upsert_output = await call(mcp_server, "upsert_mapping", {
            "index": "logs",
            "mappings": {"properties": {"level": {"type": "keyword"}}},
        })

        assert list_output[0] == "Found 2 indices"
        assert upsert_output[0] == 'Updated mapping for index "logs".'

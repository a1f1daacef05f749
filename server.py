"""
FastMCP Elasticsearch Server.

This server exposes Elasticsearch index operations as MCP tools:
- list_collections, get_mapping, cluster_health: inspection
- search, count, multi_search: querying, with automatic highlighting
- create_collection, upsert_mapping, reindex: index management
- bulk_write: batched document import
- create_template, get_template, delete_template: index templates

Every tool returns a list of text fragments. Failures are returned as a
single fragment starting with "Error:".
"""

from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from fastmcp import FastMCP

from tools.flows.mapping_upsert import upsert_index_mapping
from tools.primitives import (
    bulk_index_documents,
    count_documents,
    create_index,
    create_index_template,
    delete_index_template,
    get_cluster_health,
    get_index_mapping,
    get_index_template,
    list_indices,
    multi_search as multi_search_primitive,
    search_index,
    start_reindex,
)
from utils import client_lifespan, get_elasticsearch_client
from utils.logger import configure_logging

# Load environment variables
load_dotenv()
configure_logging()

# Initialize MCP server
mcp = FastMCP("elasticsearch-mcp-server", lifespan=client_lifespan)


# ========== INSPECTION TOOLS ==========

@mcp.tool()
async def list_collections(pattern: Optional[str] = None):
    """
    List all available Elasticsearch indices with health, status and document count.

    Args:
        pattern: Optional filter. Index globs such as "logs-*" are resolved by
            Elasticsearch; anything else is used as a regular expression on
            index names.
    """
    return await list_indices(get_elasticsearch_client(), pattern=pattern)


@mcp.tool()
async def get_mapping(index: str):
    """
    Get the field mappings of an Elasticsearch index.

    Args:
        index: Name of the index
    """
    return await get_index_mapping(get_elasticsearch_client(), index=index)


@mcp.tool()
async def cluster_health(include_indices: bool = False):
    """
    Get Elasticsearch cluster health: status, nodes and shard allocation.

    Args:
        include_indices: Also report health for every index
    """
    return await get_cluster_health(get_elasticsearch_client(), include_indices=include_indices)


# ========== QUERY TOOLS ==========

@mcp.tool()
async def search(index: str, query_body: Dict[str, Any]):
    """
    Perform an Elasticsearch search with the provided query DSL.

    Text and dense-vector fields are highlighted automatically.

    Args:
        index: Name of the index to search
        query_body: Complete Elasticsearch query DSL object; may include
            query, size, from, sort, aggs and any other search parameter
    """
    return await search_index(get_elasticsearch_client(), index=index, query_body=query_body)


@mcp.tool()
async def count(index: str, query: Optional[Dict[str, Any]] = None):
    """
    Count documents in an index, optionally matching a query.

    Args:
        index: Name of the index
        query: Optional query clause, e.g. {"term": {"status": "active"}}
    """
    return await count_documents(get_elasticsearch_client(), index=index, query=query)


@mcp.tool()
async def multi_search(searches: List[Dict[str, Any]]):
    """
    Execute several searches in one request. Results keep the request order.

    Args:
        searches: List of {"index": str, "query_body": object} entries
    """
    return await multi_search_primitive(get_elasticsearch_client(), searches=searches)


# ========== INDEX MANAGEMENT TOOLS ==========

@mcp.tool()
async def create_collection(
    index: str,
    settings: Optional[Dict[str, Any]] = None,
    mappings: Optional[Dict[str, Any]] = None,
):
    """
    Create a new Elasticsearch index.

    Args:
        index: Name of the new index
        settings: Optional index settings, e.g. {"number_of_shards": 1}
        mappings: Optional field mappings, e.g. {"properties": {...}}
    """
    return await create_index(get_elasticsearch_client(), index=index, settings=settings, mappings=mappings)


@mcp.tool()
async def upsert_mapping(index: str, mappings: Dict[str, Any]):
    """
    Create an index with a mapping, or merge a mapping into an existing index.

    The resulting mapping is returned so the change can be checked.

    Args:
        index: Name of the index
        mappings: Mapping object, with or without a top-level "properties" key
    """
    return await upsert_index_mapping(get_elasticsearch_client(), index=index, mappings=mappings)


@mcp.tool()
async def reindex(
    source_index: str,
    dest_index: str,
    query: Optional[Dict[str, Any]] = None,
    script: Optional[Union[str, Dict[str, Any]]] = None,
):
    """
    Start copying documents from one index to another. Returns a task id
    immediately; poll the Task API for progress.

    Args:
        source_index: Index to copy from
        dest_index: Index to copy into
        query: Optional query clause selecting the documents to copy
        script: Optional painless script applied to each document
    """
    return await start_reindex(
        get_elasticsearch_client(),
        source_index=source_index,
        dest_index=dest_index,
        query=query,
        script=script,
    )


# ========== DOCUMENT TOOLS ==========

@mcp.tool()
async def bulk_write(
    index: str,
    documents: List[Dict[str, Any]],
    id_field: Optional[str] = None,
):
    """
    Import documents into an index in a single bulk request.

    Writes are refreshed before returning, so they are immediately searchable.

    Args:
        index: Target index
        documents: Documents to import
        id_field: Optional document field whose value becomes the document id
    """
    return await bulk_index_documents(
        get_elasticsearch_client(),
        index=index,
        documents=documents,
        id_field=id_field,
    )


# ========== TEMPLATE TOOLS ==========

@mcp.tool()
async def create_template(
    name: str,
    index_patterns: List[str],
    template: Optional[Dict[str, Any]] = None,
    priority: Optional[int] = None,
    version: Optional[int] = None,
):
    """
    Create or replace an index template.

    Args:
        name: Template name
        index_patterns: Index name patterns the template applies to
        template: Settings, mappings and aliases for matching indices
        priority: Precedence among overlapping templates
        version: Optional version number for your own bookkeeping
    """
    return await create_index_template(
        get_elasticsearch_client(),
        name=name,
        index_patterns=index_patterns,
        template=template,
        priority=priority,
        version=version,
    )


@mcp.tool()
async def get_template(name: Optional[str] = None):
    """
    Get an index template by name, or list all index templates.

    Args:
        name: Optional template name
    """
    return await get_index_template(get_elasticsearch_client(), name=name)


@mcp.tool()
async def delete_template(name: str):
    """
    Delete an index template.

    Args:
        name: Template name
    """
    return await delete_index_template(get_elasticsearch_client(), name=name)


if __name__ == "__main__":
    mcp.run()

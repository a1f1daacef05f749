"""
Primitive search operations for Elasticsearch.
"""

from typing import Any, Dict, List, Optional

from mcp.types import TextContent

from mcp_types.primitives import SearchResponse
from utils.batch import aggregate_msearch, build_msearch_body
from utils.envelope import build_result, text_result, tool_boundary
from utils.query_builder import normalize_query, query_clause, query_offset
from utils.response_parser import render_hit, response_body
from utils.validation import validate_index_name, validate_json_object, validate_searches


@tool_boundary("Search")
async def search_index(
    es,
    index: str,
    query_body: Dict[str, Any],
) -> List[TextContent]:
    """
    Execute an Elasticsearch search with automatic highlighting.

    The mapping of the index is fetched first and every text or
    dense-vector field is added to a highlight clause. All other parts of
    the caller's query are sent unchanged.

    Args:
        es: AsyncElasticsearch client
        index: Index to search
        query_body: Complete query DSL object (query, size, from, sort, aggs...)

    Returns:
        Metadata fragment followed by one fragment per hit
    """
    index = validate_index_name(index)
    query_body = validate_json_object(query_body, label="query_body")

    augmented = await normalize_query(es, index, query_body)
    response = SearchResponse.from_dict(response_body(await es.search(index=index, body=augmented)))

    metadata = (
        f"Total search results: {response.total}, "
        f"Displaying {len(response.hits)} records starting from position {query_offset(query_body)}"
    )
    return build_result([metadata] + [render_hit(hit) for hit in response.hits])


@tool_boundary("Count")
async def count_documents(
    es,
    index: str,
    query: Optional[Dict[str, Any]] = None,
) -> List[TextContent]:
    """
    Count documents matching an optional query.

    Args:
        es: AsyncElasticsearch client
        index: Index to count in
        query: Optional query clause

    Returns:
        Single "Document count" fragment
    """
    index = validate_index_name(index)
    query = query_clause(validate_json_object(query, label="query", required=False))

    params: Dict[str, Any] = {"index": index}
    if query:
        params["query"] = query

    response = response_body(await es.count(**params))
    return text_result(f"Document count: {response.get('count', 0)}")


@tool_boundary("Multi-search")
async def multi_search(
    es,
    searches: List[Dict[str, Any]],
) -> List[TextContent]:
    """
    Execute multiple searches in a single request.

    A failing sub-search does not fail the others; its fragment carries the
    engine error instead of hits.

    Args:
        es: AsyncElasticsearch client
        searches: Entries of {"index", "query_body"}

    Returns:
        Summary fragment followed by one fragment per search, in request order
    """
    requests = validate_searches(searches)

    response = response_body(await es.msearch(searches=build_msearch_body(requests)))
    return build_result(aggregate_msearch(response.get("responses", []), requests))

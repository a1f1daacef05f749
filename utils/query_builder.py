"""
Query building utilities for Elasticsearch.

Search requests are augmented with a highlight clause derived from the
target index mapping: every free-text or dense-vector field is highlighted.
"""

from typing import Any, Dict, Optional

from elasticsearch import NotFoundError as ESNotFoundError

from utils.errors import MappingNotFound, describe_error
from utils.response_parser import extract_mappings, response_body

HIGHLIGHT_FIELD_TYPES = frozenset({"text", "match_only_text", "dense_vector"})
HIGHLIGHT_PRE_TAGS = ["<em>"]
HIGHLIGHT_POST_TAGS = ["</em>"]


def collect_highlight_fields(mappings: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Pick the top-level fields eligible for highlighting.

    Args:
        mappings: Index mapping ({"properties": {...}})

    Returns:
        Field name -> empty per-field highlight options, in mapping order
    """
    fields = {}
    for name, declaration in (mappings.get("properties") or {}).items():
        if isinstance(declaration, dict) and declaration.get("type") in HIGHLIGHT_FIELD_TYPES:
            fields[name] = {}
    return fields


def build_highlight_clause(fields: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "fields": fields,
        "pre_tags": list(HIGHLIGHT_PRE_TAGS),
        "post_tags": list(HIGHLIGHT_POST_TAGS),
    }


def augment_query(query_body: Dict[str, Any], mappings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Attach the highlight clause to a caller query.

    All caller keys are preserved; only `highlight` is set, and only when the
    mapping has at least one eligible field. Otherwise the input is returned
    unchanged.

    Args:
        query_body: Caller query DSL object
        mappings: Mapping of the target index

    Returns:
        Query to send to the engine
    """
    fields = collect_highlight_fields(mappings)
    if not fields:
        return query_body

    augmented = dict(query_body)
    augmented["highlight"] = build_highlight_clause(fields)
    return augmented


async def fetch_mappings(es, index: str) -> Dict[str, Any]:
    """
    Fetch the current mapping of an index. Never cached.

    Raises:
        MappingNotFound: If the index does not exist
    """
    try:
        response = response_body(await es.indices.get_mapping(index=index))
    except ESNotFoundError as e:
        raise MappingNotFound(index, describe_error(e)) from e
    return extract_mappings(response, index)


async def normalize_query(es, index: str, query_body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fetch the mapping of `index` and return the highlight-augmented query.

    Args:
        es: AsyncElasticsearch client
        index: Target index name
        query_body: Validated caller query

    Returns:
        Augmented query
    """
    mappings = await fetch_mappings(es, index)
    return augment_query(query_body, mappings)


def query_offset(query_body: Dict[str, Any]) -> Optional[Any]:
    """Starting position requested by the caller (`from`, default 0)."""
    return query_body.get("from") or 0


def query_clause(query: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Accept either a bare query clause or a body wrapping one.

    {"query": {"match_all": {}}} and {"match_all": {}} both yield
    {"match_all": {}}.
    """
    if query and set(query) == {"query"} and isinstance(query["query"], dict):
        return query["query"]
    return query

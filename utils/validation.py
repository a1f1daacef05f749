"""
Input validation utilities.
"""

import json
import math
from typing import Any, Dict, List, Optional

from mcp_types.primitives import SubSearch
from utils.errors import ValidationError


def validate_index_name(name: Optional[str], label: str = "Index name") -> str:
    """
    Validate an index name or pattern.

    Args:
        name: Index name supplied by the caller
        label: Name of the argument, used in error messages

    Returns:
        The trimmed name

    Raises:
        ValidationError: If the name is missing or blank
    """
    if name is None or not isinstance(name, str):
        raise ValidationError(f"{label} is required")

    name = name.strip()
    if not name:
        raise ValidationError(f"{label} cannot be empty")

    return name


def _check_finite(value: Any, path: str) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"Non-finite number at {path}")
    if isinstance(value, dict):
        for key, item in value.items():
            _check_finite(item, f"{path}.{key}")
    elif isinstance(value, (list, tuple)):
        for position, item in enumerate(value):
            _check_finite(item, f"{path}[{position}]")


def validate_json_object(
    value: Any,
    label: str = "query_body",
    required: bool = True,
) -> Optional[Dict[str, Any]]:
    """
    Check that a caller payload is a finite, JSON-serializable object.

    The payload is round-tripped through JSON so what reaches the engine is
    exactly what the caller could have written by hand.

    Args:
        value: Payload to check
        label: Name of the argument, used in error messages
        required: Whether None is rejected

    Returns:
        The round-tripped object, or None when optional and absent

    Raises:
        ValidationError: If the payload is missing, not an object or not serializable
    """
    if value is None:
        if required:
            raise ValidationError(f"{label} is required")
        return None

    if not isinstance(value, dict):
        raise ValidationError(f"{label} must be a JSON object")

    _check_finite(value, label)
    try:
        return json.loads(json.dumps(value, allow_nan=False))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{label} must be a valid Elasticsearch query DSL object: {e}") from e


def validate_documents(documents: Any) -> List[Dict[str, Any]]:
    """
    Validate the document list of a bulk write.

    Raises:
        ValidationError: If no documents are supplied or one is not an object
    """
    if not documents:
        raise ValidationError("No documents provided for import")
    if not isinstance(documents, list):
        raise ValidationError("documents must be a list of JSON objects")

    validated = []
    for position, document in enumerate(documents):
        validated.append(validate_json_object(document, label=f"documents[{position}]"))
    return validated


# Top-level keys of a search request body; a bare `query` alias without any
# of these is a query clause and gets wrapped.
SEARCH_BODY_KEYS = frozenset({
    "query", "size", "from", "sort", "aggs", "aggregations", "_source",
    "highlight", "track_total_hits", "post_filter", "knn", "search_after",
    "fields", "min_score", "timeout", "collapse", "suggest", "rescore",
    "stored_fields", "docvalue_fields", "script_fields", "runtime_mappings",
})


def _as_search_body(query: Any) -> Any:
    if query is None:
        return {}
    if isinstance(query, dict) and query and not SEARCH_BODY_KEYS.intersection(query):
        return {"query": query}
    return query


def validate_searches(searches: Any) -> List[SubSearch]:
    """
    Validate multi-search entries.

    Each entry needs an `index` and a `query_body` object. `query` is
    accepted instead of `query_body`; a bare query clause given that way is
    wrapped as {"query": ...}.

    Raises:
        ValidationError: If the list is empty or an entry is malformed
    """
    if not searches:
        raise ValidationError("No search requests provided")

    validated = []
    for position, entry in enumerate(searches):
        if not isinstance(entry, dict):
            raise ValidationError(f"searches[{position}] must be an object")

        index = validate_index_name(entry.get("index"), label=f"searches[{position}].index")
        if "query_body" in entry:
            body = entry["query_body"]
        else:
            body = _as_search_body(entry.get("query"))
        query_body = validate_json_object(body, label=f"searches[{position}].query_body")
        validated.append(SubSearch(index=index, query_body=query_body))

    return validated


"""
Response parsing utilities for Elasticsearch.
"""

import json
from typing import Any, Dict, List

from mcp_types.primitives import normalize_total

HIGHLIGHT_SEPARATOR = " ... "


def response_body(response: Any) -> Any:
    """
    Unwrap a client response to its plain body.

    The client returns ObjectApiResponse/ListApiResponse wrappers; test
    doubles return plain dicts and lists.
    """
    return getattr(response, "body", response)


def parse_hits(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Extract hits from search response.

    Args:
        response: Elasticsearch response

    Returns:
        List of hit documents
    """
    return (response.get("hits") or {}).get("hits", [])


def parse_total(response: Dict[str, Any]) -> int:
    """Total hit count of a search response, whatever its shape."""
    return normalize_total((response.get("hits") or {}).get("total"))


def extract_mappings(response: Dict[str, Any], index: str) -> Dict[str, Any]:
    """
    Pick the mapping of `index` out of a get-mapping response.

    The response is keyed by concrete index name. When `index` is an alias
    or pattern the key differs, so a single entry is taken as-is and several
    entries have their top-level properties merged (first declaration wins).

    Args:
        response: Body of `indices.get_mapping`
        index: Requested index name

    Returns:
        Mapping dict, possibly empty
    """
    if index in response:
        return (response[index] or {}).get("mappings") or {}

    entries = [entry.get("mappings") or {} for entry in response.values() if isinstance(entry, dict)]
    if not entries:
        return {}
    if len(entries) == 1:
        return entries[0]

    properties: Dict[str, Any] = {}
    for mappings in entries:
        for name, declaration in (mappings.get("properties") or {}).items():
            properties.setdefault(name, declaration)
    return {"properties": properties}


def render_value(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def render_hit(hit: Dict[str, Any]) -> str:
    """
    Render one search hit as text.

    Highlighted fields come first, their snippets joined with " ... ";
    remaining source fields follow as `field: json-value`.

    Args:
        hit: Hit from a search response

    Returns:
        Multi-line text
    """
    highlighted = hit.get("highlight") or {}
    source = hit.get("_source") or {}

    lines = []
    for field, snippets in highlighted.items():
        if snippets:
            lines.append(f"{field} (Highlight): {HIGHLIGHT_SEPARATOR.join(snippets)}")

    for field, value in source.items():
        if field not in highlighted:
            lines.append(f"{field}: {render_value(value)}")

    return "\n".join(lines)

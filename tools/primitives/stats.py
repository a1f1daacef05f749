"""
Primitive index listing, mapping and cluster health operations.
"""

import re
from typing import List, Optional

from mcp.types import TextContent

from mcp_types.primitives import ClusterHealth, IndexSummary
from utils.envelope import Fragment, build_result, tool_boundary
from utils.errors import ValidationError
from utils.query_builder import fetch_mappings
from utils.response_parser import response_body
from utils.validation import validate_index_name

# Patterns made only of these characters are index globs the engine resolves;
# anything else, including any pattern with a ".", is a regular expression
# matched locally.
GLOB_PATTERN = re.compile(r"^[A-Za-z0-9_*,\-]+$")


def _compile_filter(pattern: Optional[str]):
    """Split a name filter into (engine index expression, local regex or None)."""
    pattern = pattern.strip() if pattern else ""
    if not pattern:
        return "*", None
    if GLOB_PATTERN.match(pattern):
        return pattern, None
    try:
        return "*", re.compile(pattern)
    except re.error as e:
        raise ValidationError(f"Invalid index pattern {pattern!r}: {e}") from e


@tool_boundary("List indices")
async def list_indices(
    es,
    pattern: Optional[str] = None,
) -> List[TextContent]:
    """
    List indices with health, status and document count.

    Args:
        es: AsyncElasticsearch client
        pattern: Optional glob (e.g. "logs-*") or regular expression

    Returns:
        Count fragment followed by a JSON array of indices
    """
    index_expression, regex = _compile_filter(pattern)

    rows = response_body(await es.cat.indices(index=index_expression, format="json"))
    indices = [IndexSummary.from_cat(row) for row in rows or []]
    if regex is not None:
        indices = [summary for summary in indices if regex.search(summary.index)]

    return build_result([
        f"Found {len(indices)} indices",
        Fragment([summary.to_dict() for summary in indices]),
    ])


@tool_boundary("Get mapping")
async def get_index_mapping(
    es,
    index: str,
) -> List[TextContent]:
    """
    Get the field mapping of an index.

    Args:
        es: AsyncElasticsearch client
        index: Index name

    Returns:
        Header fragment followed by the mapping as indented JSON
    """
    index = validate_index_name(index)
    mappings = await fetch_mappings(es, index)

    return build_result([
        f'Mappings for index "{index}":',
        Fragment(mappings),
    ])


def _render_index_health(name: str, health: dict) -> str:
    return (
        f"Index: {name}\n"
        f"  Status: {health.get('status')}\n"
        f"  Primary Shards: {health.get('number_of_shards')}\n"
        f"  Replicas: {health.get('number_of_replicas')}\n"
        f"  Active Shards: {health.get('active_shards')}\n"
        f"  Active Primary Shards: {health.get('active_primary_shards')}\n"
        f"  Unassigned Shards: {health.get('unassigned_shards')}"
    )


@tool_boundary("Cluster health")
async def get_cluster_health(
    es,
    include_indices: bool = False,
) -> List[TextContent]:
    """
    Get cluster health, optionally with per-index detail.

    Args:
        es: AsyncElasticsearch client
        include_indices: Whether to add index-level health

    Returns:
        Cluster summary fragment, plus an index detail fragment when requested
    """
    response = response_body(await es.cluster.health(level="indices" if include_indices else "cluster"))
    health = ClusterHealth.from_dict(response)

    fragments = [
        f"Cluster Name: {health.cluster_name}\n"
        f"Status: {health.status}\n"
        f"Nodes: {health.number_of_nodes}\n"
        f"Data Nodes: {health.number_of_data_nodes}\n"
        f"Active Shards: {health.active_shards}\n"
        f"Active Primary Shards: {health.active_primary_shards}\n"
        f"Relocating Shards: {health.relocating_shards}\n"
        f"Initializing Shards: {health.initializing_shards}\n"
        f"Unassigned Shards: {health.unassigned_shards}\n"
        f"Pending Tasks: {health.number_of_pending_tasks}"
    ]

    if include_indices and health.indices:
        details = [_render_index_health(name, data) for name, data in health.indices.items()]
        fragments.append(Fragment("\n\n".join(details), label="Indices Health Status:"))

    return build_result(fragments)

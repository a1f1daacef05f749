"""
Flow tool for creating or updating an index mapping in one call.
"""
from typing import Any, Dict, List

from mcp.types import TextContent

from mcp_types.primitives import OperationKind
from utils.envelope import Fragment, build_result, tool_boundary
from utils.logger import get_logger
from utils.query_builder import fetch_mappings
from utils.response_parser import response_body
from utils.validation import validate_index_name, validate_json_object
from utils.version import detect_version, execute, normalize_mapping

logger = get_logger(__name__)


@tool_boundary("Upsert mapping")
async def upsert_index_mapping(
    es,
    index: str,
    mappings: Dict[str, Any],
) -> List[TextContent]:
    """
    Apply a mapping to an index, creating the index when it is absent.

    This flow:
    - detects the engine version once
    - checks whether the index exists
    - creates it with the mapping, or merges the mapping into the existing one
    - reads the resulting mapping back

    A mapping without a `properties` key is taken as a bare properties map.

    Args:
        es: AsyncElasticsearch client
        index: Target index
        mappings: Mapping to apply

    Returns:
        Outcome fragment followed by the current mapping
    """
    index = validate_index_name(index)
    mappings = normalize_mapping(validate_json_object(mappings, label="mappings"))

    version = await detect_version(es)
    exists = bool(response_body(await es.indices.exists(index=index)))

    if exists:
        await execute(es, OperationKind.PUT_MAPPING, engine_version=version, index=index, mappings=mappings)
        outcome = f'Updated mapping for index "{index}".'
    else:
        logger.info("Index %s does not exist, creating it with the supplied mapping", index)
        await execute(es, OperationKind.CREATE_INDEX, engine_version=version, index=index, mappings=mappings)
        outcome = f'Index "{index}" does not exist. Created new index and applied mapping.'

    current = await fetch_mappings(es, index)
    return build_result([
        outcome,
        Fragment(current, label="Current mapping structure:"),
    ])

"""
Primitive index creation and reindex operations.

Both go through the version shim: request shapes differ between 7.x and
8.x engines.
"""

from typing import Any, Dict, List, Optional, Union

from mcp.types import TextContent

from mcp_types.primitives import OperationKind
from utils.envelope import text_result, tool_boundary
from utils.errors import ToolError, ValidationError
from utils.query_builder import query_clause
from utils.validation import validate_index_name, validate_json_object
from utils.version import execute


def _describe_acknowledgement(index: str, response: Dict[str, Any]) -> str:
    if not response.get("acknowledged"):
        return f'Index "{index}" creation was not acknowledged by the cluster'

    shards = "Confirmed" if response.get("shards_acknowledged") else "Pending confirmation"
    return f'Index "{index}" created successfully!\nShards acknowledged: {shards}'


@tool_boundary("Create index")
async def create_index(
    es,
    index: str,
    settings: Optional[Dict[str, Any]] = None,
    mappings: Optional[Dict[str, Any]] = None,
) -> List[TextContent]:
    """
    Create an index with optional settings and mappings.

    Args:
        es: AsyncElasticsearch client
        index: Name of the new index
        settings: Optional index settings (shards, replicas, analysis...)
        mappings: Optional field mappings

    Returns:
        Single fragment reporting acknowledgement
    """
    index = validate_index_name(index)
    settings = validate_json_object(settings, label="settings", required=False)
    mappings = validate_json_object(mappings, label="mappings", required=False)

    response = await execute(
        es,
        OperationKind.CREATE_INDEX,
        index=index,
        settings=settings,
        mappings=mappings,
    )
    return text_result(_describe_acknowledgement(index, response))


def _normalize_script(script: Union[str, Dict[str, Any], None]) -> Optional[Dict[str, Any]]:
    if script is None:
        return None
    if isinstance(script, str):
        if not script.strip():
            return None
        return {"source": script}
    return validate_json_object(script, label="script")


@tool_boundary("Reindex")
async def start_reindex(
    es,
    source_index: str,
    dest_index: str,
    query: Optional[Dict[str, Any]] = None,
    script: Union[str, Dict[str, Any], None] = None,
) -> List[TextContent]:
    """
    Start an asynchronous copy of documents from one index to another.

    The call returns as soon as the engine accepts the task; progress is
    polled through the task API.

    Args:
        es: AsyncElasticsearch client
        source_index: Index to copy from
        dest_index: Index to copy into
        query: Optional query clause restricting the copied documents
        script: Optional painless script (source string or script object)

    Returns:
        Single fragment with the task handle and polling hint
    """
    source_index = validate_index_name(source_index, label="Source index")
    dest_index = validate_index_name(dest_index, label="Destination index")
    if source_index == dest_index:
        raise ValidationError("Source and destination indices must differ")

    query = query_clause(validate_json_object(query, label="query", required=False))

    response = await execute(
        es,
        OperationKind.REINDEX,
        source_index=source_index,
        dest_index=dest_index,
        query=query,
        script=_normalize_script(script),
    )

    task = response.get("task") if isinstance(response, dict) else None
    if not task:
        raise ToolError("Reindex was accepted but no task id was returned")

    return text_result(
        f"Reindex operation started. Task ID: {task}\n"
        f"Source index: {source_index} -> Destination index: {dest_index}\n"
        f"Use Task API to monitor progress: GET _tasks/{task}"
    )

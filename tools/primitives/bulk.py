"""
Primitive bulk write operation.
"""

from typing import Any, Dict, List, Optional

from mcp.types import TextContent

from utils.batch import aggregate_bulk, build_bulk_operations, render_bulk_summary, resolve_document_id
from utils.envelope import build_result, tool_boundary
from utils.response_parser import response_body
from utils.validation import validate_documents, validate_index_name


@tool_boundary("Bulk import")
async def bulk_index_documents(
    es,
    index: str,
    documents: List[Dict[str, Any]],
    id_field: Optional[str] = None,
) -> List[TextContent]:
    """
    Index many documents in one request.

    A rejected document does not stop the others. The summary counts every
    submitted document and failures are itemized with their id and cause.

    Args:
        es: AsyncElasticsearch client
        index: Target index
        documents: Documents to index
        id_field: Optional document field to use as the document id

    Returns:
        Summary fragment, plus a failure fragment when any document failed
    """
    index = validate_index_name(index)
    documents = validate_documents(documents)
    id_field = id_field.strip() if id_field else None

    operations = build_bulk_operations(index, documents, id_field)
    response = response_body(await es.bulk(operations=operations, refresh=True))

    summary = aggregate_bulk(
        response.get("items", []),
        requested=len(documents),
        took_ms=response.get("took", 0),
        submitted_ids=[resolve_document_id(document, id_field) for document in documents],
    )
    return build_result(render_bulk_summary(summary))

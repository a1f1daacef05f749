"""
Batch request building and result aggregation.

Bulk writes and multi-searches report one outcome per item. Nothing here
aborts on a failed item: every item is counted and failures are listed
with their identity and cause, in submission order.
"""

from typing import Any, Dict, List, Optional

from mcp_types.primitives import BatchSummary, BulkItemOutcome, SubSearch
from utils.envelope import Fragment, format_json
from utils.response_parser import parse_hits, parse_total

UNKNOWN_ID = "unknown"


def resolve_document_id(document: Dict[str, Any], id_field: Optional[str]) -> Optional[Any]:
    """
    Identity to index a document under.

    The caller's id field is used when given and truthy in this document;
    otherwise None, and the engine assigns an id. Decided per document.
    """
    if id_field and document.get(id_field):
        return document[id_field]
    return None


def build_bulk_operations(
    index: str,
    documents: List[Dict[str, Any]],
    id_field: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build the action/source line pairs of a bulk index request.

    Args:
        index: Target index
        documents: Documents to index
        id_field: Optional document field holding the id

    Returns:
        Flat list of bulk operations
    """
    operations = []
    for document in documents:
        action: Dict[str, Any] = {"_index": index}
        doc_id = resolve_document_id(document, id_field)
        if doc_id is not None:
            action["_id"] = str(doc_id)
        operations.append({"index": action})
        operations.append(document)
    return operations


def _item_result(item: Dict[str, Any]) -> Dict[str, Any]:
    # Each item is keyed by its action name: {"index": {...}}, {"create": {...}}
    if not item:
        return {}
    if "index" in item:
        return item["index"] or {}
    return next(iter(item.values())) or {}


def parse_bulk_item(
    position: int,
    item: Dict[str, Any],
    submitted_id: Optional[Any] = None,
) -> BulkItemOutcome:
    """
    Classify one bulk response item.

    Identity is the id the engine reports, else the id submitted for this
    position, else "unknown".
    """
    result = _item_result(item)
    doc_id = result.get("_id") or submitted_id or UNKNOWN_ID
    error = result.get("error")

    if not error:
        return BulkItemOutcome(position=position, doc_id=str(doc_id), succeeded=True)

    if isinstance(error, dict):
        error_type, reason = error.get("type"), error.get("reason")
    else:
        error_type, reason = None, str(error)

    return BulkItemOutcome(
        position=position,
        doc_id=str(doc_id),
        succeeded=False,
        error_type=error_type,
        reason=reason,
    )


def aggregate_bulk(
    items: List[Dict[str, Any]],
    requested: int,
    took_ms: int = 0,
    submitted_ids: Optional[List[Optional[Any]]] = None,
) -> BatchSummary:
    """
    Aggregate the per-item outcomes of a bulk write.

    success_count + failure_count always equals len(items).

    Args:
        items: `items` array of the bulk response
        requested: Number of documents submitted
        took_ms: Engine processing time
        submitted_ids: Ids resolved for each document before submission

    Returns:
        BatchSummary
    """
    submitted_ids = submitted_ids or []
    outcomes = []
    for position, item in enumerate(items):
        submitted = submitted_ids[position] if position < len(submitted_ids) else None
        outcomes.append(parse_bulk_item(position, item, submitted))
    return BatchSummary(requested=requested, outcomes=outcomes, took_ms=took_ms)


def render_bulk_summary(summary: BatchSummary) -> List[Fragment]:
    """Summary fragment, plus an itemized failure fragment when anything failed."""
    fragments = [
        Fragment(
            "Bulk import completed:\n"
            f"Total documents: {summary.requested}\n"
            f"Successfully imported: {summary.success_count}\n"
            f"Failed: {summary.failure_count}\n"
            f"Processing time: {summary.took_ms}ms"
        )
    ]

    if summary.failure_count:
        lines = [outcome.describe_failure() for outcome in summary.failures]
        fragments.append(Fragment("\n".join(lines), label="Failed details:"))

    return fragments


def build_msearch_body(searches: List[SubSearch]) -> List[Dict[str, Any]]:
    """Build header/body line pairs of a multi-search request."""
    body = []
    for search in searches:
        body.append({"index": search.index})
        body.append(search.query_body)
    return body


def _describe_search_error(error: Any) -> str:
    if isinstance(error, dict):
        error_type = error.get("type")
        reason = error.get("reason")
        if error_type and reason:
            return f"{error_type}: {reason}"
        return format_json(error)
    return str(error)


def render_search_result(position: int, search: SubSearch, result: Dict[str, Any]) -> str:
    """
    Render one multi-search result.

    Args:
        position: Zero-based position in the original request
        search: The request entry this result answers
        result: Entry of the `responses` array

    Returns:
        Text fragment tagged with the 1-based position and index name
    """
    header = f"Search {position + 1} (Index: {search.index}):"

    if "error" in result:
        return f"{header}\nError: {_describe_search_error(result['error'])}"

    hits = parse_hits(result)
    total = parse_total(result)
    lines = [header, f"Total hits: {total}", f"Results: {len(hits)}"]
    for hit in hits:
        lines.append(f"  ID: {hit.get('_id')}, Score: {hit.get('_score')}")
        lines.append("  Source: " + format_json(hit.get("_source")).replace("\n", "\n  "))
    return "\n".join(lines)


def aggregate_msearch(responses: List[Dict[str, Any]], searches: List[SubSearch]) -> List[Fragment]:
    """
    Aggregate multi-search responses in original request order.

    Produces a summary fragment and exactly one fragment per request.
    A request with no matching response renders as an error line.

    Args:
        responses: `responses` array of the multi-search response
        searches: Validated requests, in submission order

    Returns:
        Fragments to build the envelope from
    """
    fragments = [Fragment(f"Multi-search completed with {len(searches)} results")]
    for position, search in enumerate(searches):
        if position < len(responses):
            result = responses[position] or {}
        else:
            result = {"error": "No response returned for this search"}
        fragments.append(Fragment(render_search_result(position, search, result)))
    return fragments

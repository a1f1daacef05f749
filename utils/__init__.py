"""
Utility functions for the MCP Elasticsearch server.
"""

from .connection import (
    build_connection_target,
    client_lifespan,
    close_client,
    create_elasticsearch_client,
    get_elasticsearch_client,
    open_client,
)
from .envelope import (
    Fragment,
    build_result,
    error_result,
    format_json,
    text_result,
    tool_boundary,
)
from .errors import (
    EngineConnectionError,
    MappingNotFound,
    NotFoundError,
    ToolError,
    ValidationError,
    VersionDetectionFailure,
    describe_error,
    translate_exception,
)
from .validation import (
    validate_documents,
    validate_index_name,
    validate_json_object,
    validate_searches,
)
from .query_builder import (
    augment_query,
    build_highlight_clause,
    collect_highlight_fields,
    fetch_mappings,
    normalize_query,
    query_clause,
    query_offset,
)
from .response_parser import (
    extract_mappings,
    parse_hits,
    parse_total,
    render_hit,
    response_body,
)
from .version import (
    EngineRequest,
    adapt,
    detect_version,
    dispatch,
    execute,
    parse_templates,
)
from .batch import (
    aggregate_bulk,
    aggregate_msearch,
    build_bulk_operations,
    build_msearch_body,
    render_bulk_summary,
    resolve_document_id,
)

__all__ = [
    # Connection
    "build_connection_target",
    "client_lifespan",
    "close_client",
    "create_elasticsearch_client",
    "get_elasticsearch_client",
    "open_client",
    # Result envelope
    "Fragment",
    "build_result",
    "error_result",
    "format_json",
    "text_result",
    "tool_boundary",
    # Errors
    "EngineConnectionError",
    "MappingNotFound",
    "NotFoundError",
    "ToolError",
    "ValidationError",
    "VersionDetectionFailure",
    "describe_error",
    "translate_exception",
    # Validation
    "validate_documents",
    "validate_index_name",
    "validate_json_object",
    "validate_searches",
    # Query building
    "augment_query",
    "build_highlight_clause",
    "collect_highlight_fields",
    "fetch_mappings",
    "normalize_query",
    "query_clause",
    "query_offset",
    # Response parsing
    "extract_mappings",
    "parse_hits",
    "parse_total",
    "render_hit",
    "response_body",
    # Version compatibility
    "EngineRequest",
    "adapt",
    "detect_version",
    "dispatch",
    "execute",
    "parse_templates",
    # Batch aggregation
    "aggregate_bulk",
    "aggregate_msearch",
    "build_bulk_operations",
    "build_msearch_body",
    "render_bulk_summary",
    "resolve_document_id",
]

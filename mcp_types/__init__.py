"""
Type definitions for the MCP Elasticsearch server.
"""

from .primitives import (
    ApiGeneration,
    BatchSummary,
    BulkItemOutcome,
    ClusterHealth,
    ConnectionTarget,
    EngineVersion,
    IndexSummary,
    OperationKind,
    SearchResponse,
    SubSearch,
    TemplateSummary,
    normalize_total,
)

__all__ = [
    "ApiGeneration",
    "BatchSummary",
    "BulkItemOutcome",
    "ClusterHealth",
    "ConnectionTarget",
    "EngineVersion",
    "IndexSummary",
    "OperationKind",
    "SearchResponse",
    "SubSearch",
    "TemplateSummary",
    "normalize_total",
]

"""
Primitive tools for low-level Elasticsearch operations.
"""

from .search import search_index, count_documents, multi_search
from .stats import list_indices, get_index_mapping, get_cluster_health
from .indices import create_index, start_reindex
from .bulk import bulk_index_documents
from .templates import create_index_template, get_index_template, delete_index_template

__all__ = [
    # Search operations
    "search_index",
    "count_documents",
    "multi_search",
    # Stats operations
    "list_indices",
    "get_index_mapping",
    "get_cluster_health",
    # Index operations
    "create_index",
    "start_reindex",
    # Bulk operations
    "bulk_index_documents",
    # Template operations
    "create_index_template",
    "get_index_template",
    "delete_index_template",
]

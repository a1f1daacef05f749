"""
Primitive layer type definitions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class ApiGeneration(str, Enum):
    """Request-construction convention of the connected engine."""
    LEGACY = "legacy"  # 7.x and older: payloads travel in `body`
    CURRENT = "current"  # 8.x and newer: flattened keyword parameters


class OperationKind(str, Enum):
    """Engine operations whose request shape differs between generations."""
    CREATE_INDEX = "create_index"
    PUT_MAPPING = "put_mapping"
    PUT_TEMPLATE = "put_template"
    GET_TEMPLATE = "get_template"
    DELETE_TEMPLATE = "delete_template"
    REINDEX = "reindex"


@dataclass(frozen=True)
class EngineVersion:
    """Major version of the engine, and whether it was detected or assumed."""
    major: int
    detected: bool = True

    @property
    def generation(self) -> ApiGeneration:
        return ApiGeneration.CURRENT if self.major >= 8 else ApiGeneration.LEGACY


@dataclass(frozen=True)
class ConnectionTarget:
    """Endpoints and credentials used to build the shared client."""
    hosts: Tuple[str, ...]
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    ca_certs: Optional[str] = None
    verify_certs: bool = True
    request_timeout: float = 30.0

    def to_client_params(self) -> Dict[str, Any]:
        """Convert to AsyncElasticsearch keyword arguments."""
        params: Dict[str, Any] = {
            "hosts": list(self.hosts),
            "request_timeout": self.request_timeout,
            "verify_certs": self.verify_certs,
            # Failed calls are reported to the caller, never retried
            "max_retries": 0,
        }

        if self.ca_certs:
            params["ca_certs"] = self.ca_certs

        # API key takes precedence over basic auth
        if self.api_key:
            params["api_key"] = self.api_key
        elif self.username and self.password:
            params["basic_auth"] = (self.username, self.password)

        return params


def normalize_total(total: Any) -> int:
    """
    Normalize a hit total to an integer.

    Engines report either a bare count or a {"value", "relation"} object.
    """
    if isinstance(total, dict):
        total = total.get("value", 0)
    if isinstance(total, bool) or not isinstance(total, (int, float)):
        return 0
    return int(total)


@dataclass
class SearchResponse:
    """Elasticsearch search response."""
    took: int
    timed_out: bool
    total: int
    hits: List[Dict[str, Any]]
    aggregations: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResponse":
        """Create from Elasticsearch response dict."""
        hits_data = data.get("hits") or {}

        return cls(
            took=data.get("took", 0),
            timed_out=data.get("timed_out", False),
            total=normalize_total(hits_data.get("total")),
            hits=[hit for hit in hits_data.get("hits", [])],
            aggregations=data.get("aggregations"),
        )


@dataclass
class IndexSummary:
    """One row of the index listing."""
    index: str
    health: Optional[str]
    status: Optional[str]
    docs_count: Optional[str]

    @classmethod
    def from_cat(cls, row: Dict[str, Any]) -> "IndexSummary":
        """Create from a `_cat/indices?format=json` row."""
        return cls(
            index=row.get("index", ""),
            health=row.get("health"),
            status=row.get("status"),
            docs_count=row.get("docs.count", row.get("docsCount")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "health": self.health,
            "status": self.status,
            "docsCount": self.docs_count,
        }


@dataclass
class ClusterHealth:
    """Cluster health summary with optional per-index detail."""
    cluster_name: str
    status: str
    number_of_nodes: int
    number_of_data_nodes: int
    active_shards: int
    active_primary_shards: int
    relocating_shards: int
    initializing_shards: int
    unassigned_shards: int
    number_of_pending_tasks: int
    indices: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusterHealth":
        """Create from `_cluster/health` response."""
        return cls(
            cluster_name=data.get("cluster_name", ""),
            status=data.get("status", "unknown"),
            number_of_nodes=data.get("number_of_nodes", 0),
            number_of_data_nodes=data.get("number_of_data_nodes", 0),
            active_shards=data.get("active_shards", 0),
            active_primary_shards=data.get("active_primary_shards", 0),
            relocating_shards=data.get("relocating_shards", 0),
            initializing_shards=data.get("initializing_shards", 0),
            unassigned_shards=data.get("unassigned_shards", 0),
            number_of_pending_tasks=data.get("number_of_pending_tasks", 0),
            indices=data.get("indices") or {},
        )


@dataclass
class TemplateSummary:
    """Index template listing entry, independent of template API generation."""
    name: str
    index_patterns: List[str]
    version: Optional[int] = None
    priority: Optional[int] = None

    @staticmethod
    def _patterns(value: Union[str, List[str], None]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    @classmethod
    def from_composable(cls, entry: Dict[str, Any]) -> "TemplateSummary":
        """Create from a `_index_template` entry ({"name", "index_template"})."""
        body = entry.get("index_template") or {}
        return cls(
            name=entry.get("name", ""),
            index_patterns=cls._patterns(body.get("index_patterns")),
            version=body.get("version"),
            priority=body.get("priority"),
        )

    @classmethod
    def from_legacy(cls, name: str, body: Dict[str, Any]) -> "TemplateSummary":
        """Create from a legacy `_template` entry; `order` plays the role of priority."""
        return cls(
            name=name,
            index_patterns=cls._patterns(body.get("index_patterns")),
            version=body.get("version"),
            priority=body.get("order"),
        )


@dataclass
class SubSearch:
    """One entry of a multi-search request."""
    index: str
    query_body: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BulkItemOutcome:
    """Outcome of one document in a bulk write."""
    position: int
    doc_id: str
    succeeded: bool
    error_type: Optional[str] = None
    reason: Optional[str] = None

    def describe_failure(self) -> str:
        return f"ID: {self.doc_id} - Error type: {self.error_type}, Reason: {self.reason}"


@dataclass
class BatchSummary:
    """Aggregated outcome of a bulk write."""
    requested: int
    outcomes: List[BulkItemOutcome]
    took_ms: int = 0

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count

    @property
    def failures(self) -> List[BulkItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

"""
Version compatibility between Elasticsearch API generations.

Some operations changed request shape at 8.x: the current client takes
flattened keyword parameters where 7.x took a single `body`, and index
templates moved from `_template` to composable `_index_template`. Tool
operations describe what they want logically and this module picks the
wire shape for the connected engine.
"""

import functools
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from mcp_types.primitives import ApiGeneration, EngineVersion, OperationKind, TemplateSummary
from utils.errors import VersionDetectionFailure, describe_error
from utils.logger import get_logger
from utils.response_parser import response_body

logger = get_logger(__name__)

# Assumed when detection fails
DEFAULT_MAJOR_VERSION = 8

TEMPLATE_BLOCK_KEYS = ("settings", "mappings", "aliases")
TEMPLATE_RESERVED_KEYS = ("template", "index_patterns", "priority", "version", "order")

# Top-level mapping parameters; a mapping using any of them is never a bare properties map
MAPPING_LEVEL_KEYS = frozenset({
    "properties",
    "dynamic",
    "dynamic_templates",
    "dynamic_date_formats",
    "date_detection",
    "numeric_detection",
    "runtime",
    "subobjects",
    "_source",
    "_meta",
    "_routing",
    "_field_names",
    "_data_stream_timestamp",
    "_size",
})


@dataclass(frozen=True)
class EngineRequest:
    """A client API path (e.g. "indices.create") plus the keyword arguments to call it with."""
    api: str
    params: Dict[str, Any] = field(default_factory=dict)


def parse_major_version(number: Any) -> int:
    """
    Parse the leading integer of a version string such as "8.11.1".

    Raises:
        VersionDetectionFailure: If the string has no leading integer
    """
    match = re.match(r"\s*(\d+)", str(number or ""))
    if not match:
        raise VersionDetectionFailure(f"Unrecognized version string: {number!r}")
    return int(match.group(1))


async def detect_version(es) -> EngineVersion:
    """
    Detect the major version of the connected engine.

    Never fails: when the engine is unreachable or reports a malformed
    version, the default generation is assumed and a warning is logged.
    Not cached, so an engine upgraded between calls is picked up.

    Args:
        es: AsyncElasticsearch client

    Returns:
        EngineVersion, with detected=False when the default was assumed
    """
    try:
        info = response_body(await es.info())
        number = (info.get("version") or {}).get("number")
        major = parse_major_version(number)
    except Exception as e:
        logger.warning(
            "Could not detect Elasticsearch version, assuming %s.x: %s",
            DEFAULT_MAJOR_VERSION,
            describe_error(e),
        )
        return EngineVersion(DEFAULT_MAJOR_VERSION, detected=False)

    logger.debug("Detected Elasticsearch %s (major %s)", number, major)
    return EngineVersion(major)


def normalize_mapping(mappings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Wrap a bare properties map ({field: declaration}) as {"properties": ...}.

    Mappings that use any mapping-level parameter, or whose values are not
    all field declarations, are passed through unchanged.
    """
    if any(key in MAPPING_LEVEL_KEYS for key in mappings):
        return mappings
    if not all(isinstance(value, dict) for value in mappings.values()):
        return mappings
    return {"properties": mappings}


def split_template(template: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split a caller template into its settings/mappings/aliases block and
    the remaining top-level template options (composed_of, _meta, ...).
    """
    block = dict(template.get("template") or {})
    extras = {}
    for key, value in template.items():
        if key in TEMPLATE_BLOCK_KEYS:
            block[key] = value
        elif key not in TEMPLATE_RESERVED_KEYS:
            extras[key] = value
    return block, extras


# ---- request builders -------------------------------------------------------

def _index_body(settings: Optional[Dict[str, Any]], mappings: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    body = {}
    if settings:
        body["settings"] = settings
    if mappings:
        body["mappings"] = mappings
    return body


def _create_index_current(index: str, settings=None, mappings=None) -> EngineRequest:
    return EngineRequest("indices.create", {"index": index, **_index_body(settings, mappings)})


def _create_index_legacy(index: str, settings=None, mappings=None) -> EngineRequest:
    params: Dict[str, Any] = {"index": index}
    body = _index_body(settings, mappings)
    if body:
        params["body"] = body
    return EngineRequest("indices.create", params)


def _put_mapping_current(index: str, mappings: Dict[str, Any]) -> EngineRequest:
    return EngineRequest("indices.put_mapping", {"index": index, **normalize_mapping(mappings)})


def _put_mapping_legacy(index: str, mappings: Dict[str, Any]) -> EngineRequest:
    return EngineRequest("indices.put_mapping", {"index": index, "body": normalize_mapping(mappings)})


def _put_template_current(name, index_patterns, template, priority=None, version=None) -> EngineRequest:
    block, extras = split_template(template)
    params: Dict[str, Any] = {"name": name, "index_patterns": index_patterns, **extras}
    if block:
        params["template"] = block
    if priority is not None:
        params["priority"] = priority
    if version is not None:
        params["version"] = version
    return EngineRequest("indices.put_index_template", params)


def _put_template_legacy(name, index_patterns, template, priority=None, version=None) -> EngineRequest:
    block, _ = split_template(template)
    body: Dict[str, Any] = {"index_patterns": index_patterns, **block}
    if priority is not None:
        body["order"] = priority
    if version is not None:
        body["version"] = version
    return EngineRequest("indices.put_template", {"name": name, "body": body})


def _name_params(name: Optional[str]) -> Dict[str, Any]:
    return {"name": name} if name else {}


def _get_template_current(name: Optional[str] = None) -> EngineRequest:
    return EngineRequest("indices.get_index_template", _name_params(name))


def _get_template_legacy(name: Optional[str] = None) -> EngineRequest:
    return EngineRequest("indices.get_template", _name_params(name))


def _delete_template_current(name: str) -> EngineRequest:
    return EngineRequest("indices.delete_index_template", {"name": name})


def _delete_template_legacy(name: str) -> EngineRequest:
    return EngineRequest("indices.delete_template", {"name": name})


def _reindex_parts(source_index, dest_index, query, script) -> Dict[str, Any]:
    source: Dict[str, Any] = {"index": source_index}
    if query:
        source["query"] = query
    parts: Dict[str, Any] = {"source": source, "dest": {"index": dest_index}}
    if script:
        parts["script"] = script
    return parts


def _reindex_current(source_index, dest_index, query=None, script=None) -> EngineRequest:
    params = _reindex_parts(source_index, dest_index, query, script)
    params["wait_for_completion"] = False
    return EngineRequest("reindex", params)


def _reindex_legacy(source_index, dest_index, query=None, script=None) -> EngineRequest:
    return EngineRequest(
        "reindex",
        {"body": _reindex_parts(source_index, dest_index, query, script), "wait_for_completion": False},
    )


_REQUEST_BUILDERS: Dict[Tuple[OperationKind, ApiGeneration], Callable[..., EngineRequest]] = {
    (OperationKind.CREATE_INDEX, ApiGeneration.CURRENT): _create_index_current,
    (OperationKind.CREATE_INDEX, ApiGeneration.LEGACY): _create_index_legacy,
    (OperationKind.PUT_MAPPING, ApiGeneration.CURRENT): _put_mapping_current,
    (OperationKind.PUT_MAPPING, ApiGeneration.LEGACY): _put_mapping_legacy,
    (OperationKind.PUT_TEMPLATE, ApiGeneration.CURRENT): _put_template_current,
    (OperationKind.PUT_TEMPLATE, ApiGeneration.LEGACY): _put_template_legacy,
    (OperationKind.GET_TEMPLATE, ApiGeneration.CURRENT): _get_template_current,
    (OperationKind.GET_TEMPLATE, ApiGeneration.LEGACY): _get_template_legacy,
    (OperationKind.DELETE_TEMPLATE, ApiGeneration.CURRENT): _delete_template_current,
    (OperationKind.DELETE_TEMPLATE, ApiGeneration.LEGACY): _delete_template_legacy,
    (OperationKind.REINDEX, ApiGeneration.CURRENT): _reindex_current,
    (OperationKind.REINDEX, ApiGeneration.LEGACY): _reindex_legacy,
}


def adapt(kind: OperationKind, generation: ApiGeneration, **params) -> EngineRequest:
    """
    Build the engine request for a logical operation.

    Pure lookup on (kind, generation); no network access.

    Args:
        kind: Version-sensitive operation
        generation: API generation of the target engine
        **params: Logical parameters of the operation

    Returns:
        EngineRequest to pass to dispatch()

    Raises:
        ValueError: If no request shape is registered for the pair
    """
    try:
        builder = _REQUEST_BUILDERS[(kind, generation)]
    except KeyError:
        raise ValueError(f"No request shape registered for {kind.value} on {generation.value} engines") from None
    return builder(**params)


async def dispatch(es, request: EngineRequest) -> Any:
    """Call the client API named by the request and return the response body."""
    method = functools.reduce(getattr, request.api.split("."), es)
    return response_body(await method(**request.params))


async def execute(es, kind: OperationKind, engine_version: Optional[EngineVersion] = None, **params) -> Any:
    """
    Detect the engine version (unless given), adapt and dispatch in one step.

    Returns:
        Response body of the engine call
    """
    if engine_version is None:
        engine_version = await detect_version(es)
    return await dispatch(es, adapt(kind, engine_version.generation, **params))


def parse_templates(response: Dict[str, Any], generation: ApiGeneration) -> List[TemplateSummary]:
    """
    Normalize a template listing from either template API.

    Current engines answer {"index_templates": [{"name", "index_template"}]};
    legacy engines answer {name: template_body}.
    """
    if generation is ApiGeneration.CURRENT:
        return [TemplateSummary.from_composable(entry) for entry in response.get("index_templates", [])]
    return [
        TemplateSummary.from_legacy(name, body or {})
        for name, body in response.items()
        if isinstance(body, dict)
    ]

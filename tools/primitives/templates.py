"""
Primitive index template operations.

8.x engines use composable index templates; 7.x engines use the legacy
template API. The version shim picks the right one.
"""

from typing import Any, Dict, List, Optional, Union

from elasticsearch import NotFoundError as ESNotFoundError
from mcp.types import TextContent

from mcp_types.primitives import OperationKind, TemplateSummary
from utils.envelope import build_result, text_result, tool_boundary
from utils.errors import NotFoundError, ValidationError
from utils.validation import validate_index_name, validate_json_object
from utils.version import detect_version, execute, parse_templates

NOT_SPECIFIED = "Not specified"


def _validate_patterns(index_patterns: Union[str, List[str], None]) -> List[str]:
    if isinstance(index_patterns, str):
        index_patterns = [index_patterns]
    patterns = [p.strip() for p in index_patterns or [] if isinstance(p, str) and p.strip()]
    if not patterns:
        raise ValidationError("At least one index pattern is required")
    return patterns


def _render_template(summary: TemplateSummary) -> str:
    version = summary.version if summary.version is not None else NOT_SPECIFIED
    priority = summary.priority if summary.priority is not None else NOT_SPECIFIED
    return (
        f"Template: {summary.name}\n"
        f"Index patterns: {', '.join(summary.index_patterns)}\n"
        f"Version: {version}\n"
        f"Priority: {priority}"
    )


@tool_boundary("Create index template")
async def create_index_template(
    es,
    name: str,
    index_patterns: Union[str, List[str]],
    template: Optional[Dict[str, Any]] = None,
    priority: Optional[int] = None,
    version: Optional[int] = None,
) -> List[TextContent]:
    """
    Create or replace an index template.

    Args:
        es: AsyncElasticsearch client
        name: Template name
        index_patterns: Index patterns the template applies to
        template: Settings, mappings and aliases applied to matching indices
        priority: Precedence among overlapping templates (`order` on 7.x)
        version: Optional caller-managed version number

    Returns:
        Single fragment confirming the template
    """
    name = validate_index_name(name, label="Template name")
    patterns = _validate_patterns(index_patterns)
    template = validate_json_object(template, label="template", required=False) or {}

    response = await execute(
        es,
        OperationKind.PUT_TEMPLATE,
        name=name,
        index_patterns=patterns,
        template=template,
        priority=priority,
        version=version,
    )

    acknowledged = "Yes" if response.get("acknowledged") else "No"
    return text_result(
        f'Index template "{name}" created successfully.\n'
        f"Index patterns: {', '.join(patterns)}\n"
        f"Acknowledged: {acknowledged}"
    )


@tool_boundary("Get index template")
async def get_index_template(
    es,
    name: Optional[str] = None,
) -> List[TextContent]:
    """
    Get one index template, or list all of them.

    Args:
        es: AsyncElasticsearch client
        name: Optional template name; all templates when omitted

    Returns:
        Summary fragment followed by one fragment per template
    """
    name = name.strip() if name else None
    version = await detect_version(es)

    try:
        response = await execute(es, OperationKind.GET_TEMPLATE, engine_version=version, name=name)
    except ESNotFoundError as e:
        if name:
            raise NotFoundError(f'No template found with name "{name}"') from e
        return text_result("No index templates found")

    templates = parse_templates(response or {}, version.generation)
    if not templates:
        if name:
            raise NotFoundError(f'No template found with name "{name}"')
        return text_result("No index templates found")

    return build_result(
        [f"Found {len(templates)} index templates"] + [_render_template(t) for t in templates]
    )


@tool_boundary("Delete index template")
async def delete_index_template(
    es,
    name: str,
) -> List[TextContent]:
    """
    Delete an index template.

    Args:
        es: AsyncElasticsearch client
        name: Template name

    Returns:
        Single confirmation fragment
    """
    name = validate_index_name(name, label="Template name")

    try:
        await execute(es, OperationKind.DELETE_TEMPLATE, name=name)
    except ESNotFoundError as e:
        raise NotFoundError(f'No template found with name "{name}"') from e

    return text_result(f'Index template "{name}" deleted successfully.')

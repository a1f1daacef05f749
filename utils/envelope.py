"""
Result envelope construction.

Every tool returns an ordered list of text fragments. The first fragment is
always a human-readable summary; failures collapse to a single fragment that
starts with "Error:".
"""

import functools
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from mcp.types import TextContent

from utils.errors import translate_exception
from utils.logger import get_logger

logger = get_logger(__name__)

ERROR_PREFIX = "Error:"


def format_json(value: Any) -> str:
    """Serialize a structured value with stable two-space indentation."""
    try:
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)


@dataclass(frozen=True)
class Fragment:
    """A labelled piece of tool output; structured bodies are serialized as JSON."""
    body: Any
    label: Optional[str] = None

    def render(self) -> str:
        text = self.body if isinstance(self.body, str) else format_json(self.body)
        if self.label:
            return f"{self.label}\n{text}"
        return text


def build_result(fragments: Iterable[Union[str, Fragment]]) -> List[TextContent]:
    """
    Render fragments into MCP text content, preserving order.

    Args:
        fragments: Plain strings or Fragment instances

    Returns:
        List of TextContent blocks
    """
    content = []
    for fragment in fragments:
        if not isinstance(fragment, Fragment):
            fragment = Fragment(fragment)
        content.append(TextContent(type="text", text=fragment.render()))
    return content


def text_result(*texts: str) -> List[TextContent]:
    return build_result(texts)


def error_result(cause: Union[BaseException, str]) -> List[TextContent]:
    """
    Build the single-fragment error envelope.

    Args:
        cause: Exception or message describing the failure

    Returns:
        One TextContent whose text starts with "Error:"
    """
    if isinstance(cause, BaseException):
        message = str(translate_exception(cause))
    else:
        message = cause
    return text_result(f"{ERROR_PREFIX} {message}")


def tool_boundary(operation: str) -> Callable:
    """
    Decorate an async tool operation so no exception escapes it.

    Failures are translated, logged and returned as an error envelope.

    Args:
        operation: Human-readable operation name used in log lines
    """
    def decorator(func: Callable[..., Awaitable[List[TextContent]]]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> List[TextContent]:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                error = translate_exception(e)
                logger.error("%s failed: %s", operation, error)
                return error_result(error)
        return wrapper
    return decorator

"""
Error taxonomy for tool operations.

Engine exceptions are translated into these types at each tool boundary
so every failure reaches the caller as a readable "Error:" fragment.
"""

from typing import Any

from elasticsearch import (
    ApiError,
    AuthenticationException,
    AuthorizationException,
    ConnectionError as ESConnectionError,
    NotFoundError as ESNotFoundError,
    TransportError,
)


class ToolError(Exception):
    """Base class for failures surfaced by a tool operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(ToolError, ValueError):
    """Raised when caller input is rejected before any engine call."""


class NotFoundError(ToolError):
    """Raised when a referenced index, template or document does not exist."""


class MappingNotFound(NotFoundError):
    """Raised when the mapping of an index cannot be fetched because the index is absent."""

    def __init__(self, index: str, reason: str = None):
        message = f'No mapping found for index "{index}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.index = index


class EngineConnectionError(ToolError):
    """Raised when Elasticsearch is unreachable or rejects the credentials."""


class VersionDetectionFailure(ToolError):
    """Raised while parsing the engine version; always recovered with a default."""


def _error_body(exc: ApiError) -> Any:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        return body.get("error", body)
    return body


def describe_error(exc: BaseException) -> str:
    """
    Produce a human-readable message for an exception.

    For engine API errors the "type: reason" pair from the response body
    is preferred over the exception repr.

    Args:
        exc: Any exception

    Returns:
        Message text without the "Error:" prefix
    """
    if isinstance(exc, ToolError):
        return exc.message

    if isinstance(exc, ApiError):
        error = _error_body(exc)
        if isinstance(error, dict):
            error_type = error.get("type")
            reason = error.get("reason")
            if error_type and reason:
                return f"{error_type}: {reason}"
            if reason:
                return str(reason)
        elif isinstance(error, str) and error:
            return error
        return str(exc.message)

    if isinstance(exc, TransportError):
        return str(exc.message) if exc.message else exc.__class__.__name__

    text = str(exc)
    return text if text else exc.__class__.__name__


def translate_exception(exc: BaseException) -> ToolError:
    """
    Map an arbitrary exception onto the tool error taxonomy.

    Args:
        exc: Exception raised inside a tool operation

    Returns:
        Matching ToolError instance
    """
    if isinstance(exc, ToolError):
        return exc

    message = describe_error(exc)

    if isinstance(exc, ESNotFoundError):
        return NotFoundError(message)
    if isinstance(exc, (AuthenticationException, AuthorizationException)):
        return EngineConnectionError(f"Elasticsearch rejected the credentials: {message}")
    if isinstance(exc, (ESConnectionError, TransportError)):
        return EngineConnectionError(f"Unable to reach Elasticsearch: {message}")

    return ToolError(message)

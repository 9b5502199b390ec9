"""
Uniform result envelope for MCP tools.

Every tool returns a ToolResponse: JSON text on success, "Error: ..." text
with is_error set on failure. Exceptions never leave a tool.
"""

import inspect
import json
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable


logger = logging.getLogger(__name__)


@dataclass
class ToolResponse:
    """Text payload plus success/failure flag."""

    text: str
    is_error: bool = False

    def to_dict(self) -> dict:
        """Convert to MCP CallToolResult shape."""
        result: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            result["isError"] = True
        return result


def success(data: Any) -> ToolResponse:
    """Render data as pretty-printed JSON."""
    return ToolResponse(text=json.dumps(data, indent=2, ensure_ascii=False))


def failure(error: BaseException) -> ToolResponse:
    """Render an exception as an error response."""
    message = str(error) or "An unknown error occurred"
    return ToolResponse(text=f"Error: {message}", is_error=True)


def tool_response(func: Callable) -> Callable:
    """
    Decorator turning a tool coroutine into one that returns ToolResponse.

    - Plain return values are rendered with success()
    - A returned ToolResponse is passed through untouched
    - Any exception is logged and rendered with failure()
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{func.__name__} must be a coroutine function")

    @wraps(func)
    async def wrapper(*args, **kwargs) -> ToolResponse:
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.warning(f"Tool {func.__name__} failed: {e}")
            return failure(e)

        if isinstance(result, ToolResponse):
            return result
        return success(result)

    return wrapper

"""JSON output formatter for CLI."""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from pathlib import Path
from typing import Any


def _default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


class JsonFormatter:
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any) -> str:
        """Format data as JSON.

        Args:
            data: Dataclass instance, collection or primitive

        Returns:
            JSON string
        """
        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            data = dataclasses.asdict(data)
        if isinstance(data, dict | list | tuple):
            return json.dumps(data, default=_default, indent=2)
        return json.dumps({"value": data}, default=_default, indent=2)

    def format_success(self, message: str, data: Any = None) -> str:
        """Format a success response."""
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return json.dumps(response, default=_default, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response."""
        error_msg = error.message if hasattr(error, "message") else str(error)
        response = {"success": False, "error": error_msg, "code": code}
        return json.dumps(response, indent=2)

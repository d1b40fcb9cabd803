"""JSON output formatter for CLI."""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any


class JsonFormatter:
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any) -> str:
        """Format data as JSON.

        Dataclasses, including lists of them, are converted field by field.
        Enums are written as their values.

        Args:
            data: Data to format

        Returns:
            JSON string
        """
        return json.dumps(self._plain(data), default=str, indent=2)

    def _plain(self, data: Any) -> Any:
        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            return {
                f.name: self._plain(getattr(data, f.name))
                for f in dataclasses.fields(data)
                if f.repr
            }
        if isinstance(data, Enum):
            return data.value
        if isinstance(data, dict):
            return {str(k): self._plain(v) for k, v in data.items()}
        if isinstance(data, list | tuple):
            return [self._plain(item) for item in data]
        return data

from __future__ import annotations

from typing import Any, Iterable

from slacklite.errors import UnknownTool
from slacklite.tools.base import Tool


class ToolRegistry:
    """Name -> tool mapping. Iteration and ``schema()`` keep registration order."""

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def resolve(self, name: str) -> Tool:
        tool = self.get(name)
        if tool is None:
            raise UnknownTool(name)
        return tool

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def schema(self) -> list[dict[str, Any]]:
        return [tool.export_schema() for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Generic, TypeVar

from slacklite.errors import MissingRequiredFields


def is_present(value: Any) -> bool:
    """Presence check used for required fields: ``None``, ``""``, ``0`` and empties are missing."""
    return bool(value)


@dataclass(frozen=True, slots=True)
class ToolArgs:
    """Typed projection of a tool call's argument bag."""

    required: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_arguments(cls, tool: str, arguments: dict[str, Any]):
        missing = [name for name in cls.required if not is_present(arguments.get(name))]
        if missing:
            raise MissingRequiredFields(tool, cls.required, missing)
        return cls(**{item.name: arguments.get(item.name) for item in fields(cls)})


ArgsT = TypeVar("ArgsT", bound=ToolArgs)


class Tool(ABC, Generic[ArgsT]):
    """Tool contract exported to MCP clients as ``{name, description, inputSchema}``."""

    name: str
    description: str
    args_type: type[ArgsT]

    @abstractmethod
    def args_schema(self) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def invoke(self, args: ArgsT) -> Any:
        raise NotImplementedError

    @property
    def required(self) -> tuple[str, ...]:
        return self.args_type.required

    def parse(self, arguments: dict[str, Any]) -> ArgsT:
        return self.args_type.from_arguments(self.name, arguments)

    async def run(self, arguments: dict[str, Any]) -> Any:
        return await self.invoke(self.parse(arguments))

    def export_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.args_schema()),
        }

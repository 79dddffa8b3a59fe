from __future__ import annotations

from typing import Sequence


class SlackLiteError(Exception):
    """Base class for every failure the dispatch layer knows how to envelope."""


class MissingArguments(SlackLiteError):
    def __init__(self) -> None:
        super().__init__("No arguments provided")


class UnknownTool(SlackLiteError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


def _join_fields(fields: Sequence[str]) -> str:
    if len(fields) == 1:
        return fields[0]
    if len(fields) == 2:
        return f"{fields[0]} and {fields[1]}"
    return ", ".join(fields[:-1]) + f", and {fields[-1]}"


class MissingRequiredFields(SlackLiteError):
    """Raised when a tool call omits any of the tool's required fields.

    The message always names the full required set, not only the missing ones.
    """

    def __init__(self, tool: str, required: Sequence[str], missing: Sequence[str]) -> None:
        self.tool = tool
        self.required = tuple(required)
        self.missing = tuple(missing)
        noun = "argument" if len(self.required) == 1 else "arguments"
        super().__init__(f"Missing required {noun}: {_join_fields(self.required)}")


class UpstreamOperationFailed(SlackLiteError):
    """Any failure raised by the upstream Slack client."""

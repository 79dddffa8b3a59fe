from __future__ import annotations

import json
from typing import Any

from loguru import logger

from slacklite.errors import MissingArguments
from slacklite.tools.registry import ToolRegistry


def text_envelope(payload: Any) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(payload, ensure_ascii=False, separators=(",", ":"))}]}


def error_envelope(message: str) -> dict[str, Any]:
    return text_envelope({"error": message})


class Dispatcher:
    """Route one tool call to one upstream operation and envelope the outcome.

    ``dispatch`` never raises: validation failures, unknown tools and upstream
    errors all come back as ``{"error": ...}`` inside the same text envelope a
    successful call uses.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        logger.info("tool call received name={} arguments={}", name, arguments)
        try:
            if arguments is None:
                raise MissingArguments()
            tool = self.registry.resolve(name)
            result = await tool.run(arguments)
            return text_envelope(result)
        except Exception as exc:
            logger.error("tool call failed name={} error={}", name, exc)
            return error_envelope(str(exc))

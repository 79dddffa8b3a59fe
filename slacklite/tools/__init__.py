from __future__ import annotations

from slacklite.tools.base import Tool, ToolArgs
from slacklite.tools.registry import ToolRegistry
from slacklite.tools.slack import SLACK_TOOLS, build_slack_registry

__all__ = ["SLACK_TOOLS", "Tool", "ToolArgs", "ToolRegistry", "build_slack_registry"]

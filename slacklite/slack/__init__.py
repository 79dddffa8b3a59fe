from __future__ import annotations

from slacklite.slack.client import SlackAPIError, SlackClient

__all__ = ["SlackAPIError", "SlackClient"]

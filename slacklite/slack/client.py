from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from slacklite.config.schema import DEFAULT_SLACK_API_BASE_URL
from slacklite.errors import UpstreamOperationFailed

MAX_PAGE_SIZE = 200


class SlackAPIError(UpstreamOperationFailed):
    """Slack answered with ``ok: false`` or a non-2xx status.

    ``str(exc)`` is the bare Slack error code (``rate_limited``,
    ``channel_not_found``...) so it can be surfaced to callers unchanged.
    """

    def __init__(self, method: str, error: str, *, status_code: int | None = None) -> None:
        self.method = method
        self.error = error
        self.status_code = status_code
        super().__init__(error)


class SlackClient:
    """Thin async wrapper around the Slack Web API, one method per operation."""

    def __init__(
        self,
        bot_token: str,
        team_id: str,
        *,
        base_url: str = DEFAULT_SLACK_API_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self.bot_token = bot_token
        self.team_id = team_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    async def connect(
        cls,
        bot_token: str,
        *,
        team_id: str = "",
        base_url: str = DEFAULT_SLACK_API_BASE_URL,
        timeout: float = 30.0,
    ) -> SlackClient:
        """Build a client, resolving the workspace id with ``auth.test`` when not given."""
        if not team_id:
            probe = cls(bot_token, "", base_url=base_url, timeout=timeout)
            auth = await probe.auth_test()
            team_id = str(auth.get("team_id") or "")
            logger.info("slack auth ok team={} user={}", team_id, auth.get("user", ""))
        return cls(bot_token, team_id, base_url=base_url, timeout=timeout)

    @staticmethod
    def _clean(params: dict[str, Any]) -> dict[str, str]:
        out: dict[str, str] = {}
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                out[key] = "true" if value else "false"
            else:
                out[key] = str(value)
        return out

    async def _call(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}/{method}"
        headers = {"authorization": f"Bearer {self.bot_token}"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, data=self._clean(params or {}), headers=headers)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                error = "rate_limited" if status == 429 else f"http_error_{status}"
                raise SlackAPIError(method, error, status_code=status) from exc
            data = response.json()

        if not isinstance(data, dict):
            raise SlackAPIError(method, "invalid_response")
        if not data.get("ok", False):
            raise SlackAPIError(method, str(data.get("error") or "unknown_error"))
        return data

    async def auth_test(self) -> dict[str, Any]:
        return await self._call("auth.test")

    async def get_channels(self, limit: int | None = 100, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "types": "public_channel",
            "exclude_archived": True,
            "limit": min(100 if limit is None else int(limit), MAX_PAGE_SIZE),
            "team_id": self.team_id or None,
        }
        if cursor:
            params["cursor"] = cursor
        return await self._call("conversations.list", params)

    async def post_message(self, channel_id: str, text: str) -> dict[str, Any]:
        return await self._call("chat.postMessage", {"channel": channel_id, "text": text})

    async def post_reply(self, channel_id: str, thread_ts: str, text: str) -> dict[str, Any]:
        return await self._call(
            "chat.postMessage",
            {"channel": channel_id, "thread_ts": thread_ts, "text": text},
        )

    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> dict[str, Any]:
        return await self._call(
            "reactions.add",
            {"channel": channel_id, "timestamp": timestamp, "name": reaction},
        )

    async def get_channel_history(self, channel_id: str, limit: int | None = 10) -> dict[str, Any]:
        params = {"channel": channel_id, "limit": 10 if limit is None else int(limit)}
        return await self._call("conversations.history", params)

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> dict[str, Any]:
        return await self._call("conversations.replies", {"channel": channel_id, "ts": thread_ts})

    async def get_users(self, limit: int | None = 100, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "limit": min(100 if limit is None else int(limit), MAX_PAGE_SIZE),
            "team_id": self.team_id or None,
        }
        if cursor:
            params["cursor"] = cursor
        return await self._call("users.list", params)

    async def get_user_profile(self, user_id: str) -> dict[str, Any]:
        return await self._call("users.profile.get", {"user": user_id, "include_labels": True})

from __future__ import annotations

from typing import Any

import pytest


class FakeSlack:
    """Records every upstream call and answers with a canned Slack-style body."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, Exception] = {}

    async def _record(self, method: str, *args: Any) -> dict[str, Any]:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]
        return {"ok": True, "method": method, "args": list(args), "call": len(self.calls)}

    async def get_channels(self, limit=None, cursor=None):
        return await self._record("get_channels", limit, cursor)

    async def post_message(self, channel_id, text):
        return await self._record("post_message", channel_id, text)

    async def post_reply(self, channel_id, thread_ts, text):
        return await self._record("post_reply", channel_id, thread_ts, text)

    async def add_reaction(self, channel_id, timestamp, reaction):
        return await self._record("add_reaction", channel_id, timestamp, reaction)

    async def get_channel_history(self, channel_id, limit=None):
        return await self._record("get_channel_history", channel_id, limit)

    async def get_thread_replies(self, channel_id, thread_ts):
        return await self._record("get_thread_replies", channel_id, thread_ts)

    async def get_users(self, limit=None, cursor=None):
        return await self._record("get_users", limit, cursor)

    async def get_user_profile(self, user_id):
        return await self._record("get_user_profile", user_id)


@pytest.fixture
def fake_slack() -> FakeSlack:
    return FakeSlack()

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from slacklite.errors import UpstreamOperationFailed
from slacklite.slack.client import SlackAPIError, SlackClient


class _FakeResponse:
    def __init__(self, status_code: int, payload: dict) -> None:
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("POST", "https://slack.test/api/x")
            response = httpx.Response(self.status_code, request=request)
            raise httpx.HTTPStatusError("err", request=request, response=response)

    def json(self) -> dict:
        return self._payload


def _client() -> SlackClient:
    return SlackClient("xoxb-test", "T1", base_url="https://slack.test/api/")


def test_get_channels_request_shape() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": True, "channels": []}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            out = await _client().get_channels(500, "next")

        assert out == {"ok": True, "channels": []}
        url = post_mock.call_args.args[0]
        assert url == "https://slack.test/api/conversations.list"
        assert post_mock.call_args.kwargs["data"] == {
            "types": "public_channel",
            "exclude_archived": "true",
            "limit": "200",
            "team_id": "T1",
            "cursor": "next",
        }
        assert post_mock.call_args.kwargs["headers"]["authorization"] == "Bearer xoxb-test"

    asyncio.run(_scenario())


def test_defaults_for_optional_fields() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": True}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            client = _client()
            await client.get_channel_history("C1")
            assert post_mock.call_args.kwargs["data"] == {"channel": "C1", "limit": "10"}
            await client.get_users(None, None)
            assert post_mock.call_args.kwargs["data"] == {"limit": "100", "team_id": "T1"}

    asyncio.run(_scenario())


@pytest.mark.parametrize(
    ("call", "method", "data"),
    [
        (lambda c: c.post_message("C1", "hi"), "chat.postMessage", {"channel": "C1", "text": "hi"}),
        (
            lambda c: c.post_reply("C1", "1.2", "re"),
            "chat.postMessage",
            {"channel": "C1", "thread_ts": "1.2", "text": "re"},
        ),
        (
            lambda c: c.add_reaction("C1", "1.2", "eyes"),
            "reactions.add",
            {"channel": "C1", "timestamp": "1.2", "name": "eyes"},
        ),
        (lambda c: c.get_thread_replies("C1", "1.2"), "conversations.replies", {"channel": "C1", "ts": "1.2"}),
        (
            lambda c: c.get_user_profile("U1"),
            "users.profile.get",
            {"user": "U1", "include_labels": "true"},
        ),
    ],
)
def test_operation_request_shapes(call, method, data) -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": True}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            await call(_client())
        assert post_mock.call_args.args[0] == f"https://slack.test/api/{method}"
        assert post_mock.call_args.kwargs["data"] == data

    asyncio.run(_scenario())


def test_ok_false_raises_with_bare_error_code() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": False, "error": "rate_limited"}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            with pytest.raises(SlackAPIError) as info:
                await _client().get_users()
        assert str(info.value) == "rate_limited"
        assert info.value.method == "users.list"
        assert isinstance(info.value, UpstreamOperationFailed)

    asyncio.run(_scenario())


def test_http_429_maps_to_rate_limited() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(429, {}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            with pytest.raises(SlackAPIError) as info:
                await _client().post_message("C1", "hi")
        assert str(info.value) == "rate_limited"
        assert info.value.status_code == 429

    asyncio.run(_scenario())


def test_connect_resolves_team_id_with_auth_test() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": True, "team_id": "T42", "user": "bot"}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            client = await SlackClient.connect("xoxb-test", base_url="https://slack.test/api")
        assert client.team_id == "T42"
        assert post_mock.call_args.args[0] == "https://slack.test/api/auth.test"

    asyncio.run(_scenario())


def test_connect_skips_auth_test_when_team_known() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock()
        with patch("httpx.AsyncClient.post", new=post_mock):
            client = await SlackClient.connect("xoxb-test", team_id="T9")
        assert client.team_id == "T9"
        post_mock.assert_not_called()

    asyncio.run(_scenario())


def test_explicit_zero_limit_is_passed_through() -> None:
    async def _scenario() -> None:
        post_mock = AsyncMock(return_value=_FakeResponse(200, {"ok": True}))
        with patch("httpx.AsyncClient.post", new=post_mock):
            client = _client()
            await client.get_channels(0)
            assert post_mock.call_args.kwargs["data"]["limit"] == "0"
            await client.get_channel_history("C1", 0)
            assert post_mock.call_args.kwargs["data"]["limit"] == "0"
            await client.get_users(0)
            assert post_mock.call_args.kwargs["data"]["limit"] == "0"

    asyncio.run(_scenario())

from __future__ import annotations

import asyncio
import json

from slacklite.gateway.dispatch import Dispatcher
from slacklite.mcp_server import MCP_PROTOCOL_VERSION, handle_mcp_jsonrpc
from slacklite.tools.slack import build_slack_registry


def _handle(payload, fake_slack):
    dispatcher = Dispatcher(build_slack_registry(fake_slack))
    return asyncio.run(handle_mcp_jsonrpc(payload, dispatcher))


def test_initialize_and_ping(fake_slack) -> None:
    init = _handle({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}, fake_slack)
    assert init["id"] == 1
    assert init["result"]["protocolVersion"] == MCP_PROTOCOL_VERSION
    assert init["result"]["serverInfo"]["name"] == "Slack MCP Server"
    assert "tools" in init["result"]["capabilities"]

    pong = _handle({"jsonrpc": "2.0", "id": "p", "method": "ping"}, fake_slack)
    assert pong == {"jsonrpc": "2.0", "id": "p", "result": {}}


def test_notifications_get_no_reply(fake_slack) -> None:
    assert _handle({"jsonrpc": "2.0", "method": "notifications/initialized"}, fake_slack) is None


def test_tools_list_is_stable_across_calls(fake_slack) -> None:
    before = _handle({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}, fake_slack)
    _handle(
        {"jsonrpc": "2.0", "id": 2, "method": "tools/call", "params": {"name": "slack_post_message", "arguments": {"channel_id": "C1", "text": "x"}}},
        fake_slack,
    )
    _handle({"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "nope", "arguments": {}}}, fake_slack)
    after = _handle({"jsonrpc": "2.0", "id": 4, "method": "tools/list"}, fake_slack)
    assert len(before["result"]["tools"]) == 8
    assert before["result"] == after["result"]


def test_tools_call_application_errors_stay_in_result(fake_slack) -> None:
    out = _handle(
        {"jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "slack_delete_message", "arguments": {}}},
        fake_slack,
    )
    assert "error" not in out
    payload = json.loads(out["result"]["content"][0]["text"])
    assert payload == {"error": "Unknown tool: slack_delete_message"}


def test_tools_call_without_arguments_is_enveloped(fake_slack) -> None:
    out = _handle({"jsonrpc": "2.0", "id": 8, "method": "tools/call", "params": {"name": "slack_get_users"}}, fake_slack)
    assert json.loads(out["result"]["content"][0]["text"]) == {"error": "No arguments provided"}
    assert fake_slack.calls == []


def test_protocol_errors(fake_slack) -> None:
    assert _handle(["not", "an", "object"], fake_slack)["error"]["code"] == -32600
    assert _handle({"jsonrpc": "1.0", "id": 1, "method": "ping"}, fake_slack)["error"]["code"] == -32600
    assert _handle({"jsonrpc": "2.0", "id": 1, "method": "resources/list"}, fake_slack)["error"]["code"] == -32601
    missing_name = _handle({"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {}}, fake_slack)
    assert missing_name["error"]["code"] == -32602
    bad_args = _handle(
        {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": "slack_get_users", "arguments": [1]}},
        fake_slack,
    )
    assert bad_args["error"]["code"] == -32602


def test_tools_call_name_must_match_exactly(fake_slack) -> None:
    out = _handle(
        {"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": {"name": " slack_get_users ", "arguments": {}}},
        fake_slack,
    )
    payload = json.loads(out["result"]["content"][0]["text"])
    assert payload == {"error": "Unknown tool:  slack_get_users "}
    assert fake_slack.calls == []


def test_tools_call_non_string_name_is_invalid_params(fake_slack) -> None:
    out = _handle({"jsonrpc": "2.0", "id": 10, "method": "tools/call", "params": {"name": 5, "arguments": {}}}, fake_slack)
    assert out["error"]["code"] == -32602
    assert fake_slack.calls == []

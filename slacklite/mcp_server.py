from __future__ import annotations

from typing import Any

from loguru import logger

from slacklite import __version__
from slacklite.gateway.dispatch import Dispatcher

MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "Slack MCP Server"


def _ok(result: dict[str, Any], id_value: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": id_value, "result": result}


def _err(code: int, message: str, id_value: Any = None) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": id_value, "error": {"code": code, "message": message}}


async def handle_mcp_jsonrpc(payload: Any, dispatcher: Dispatcher) -> dict[str, Any] | None:
    """Answer one JSON-RPC message. Notifications (no ``id``) get ``None``."""
    if not isinstance(payload, dict):
        return _err(-32600, "MCP payload must be a JSON object", None)

    method = str(payload.get("method", "")).strip()
    rpc = str(payload.get("jsonrpc", "2.0"))
    req_id = payload.get("id")
    is_notification = "id" not in payload

    if rpc != "2.0":
        return _err(-32600, "invalid JSON-RPC version", req_id)
    if not method:
        return _err(-32600, "missing MCP method", req_id)

    if is_notification:
        logger.debug("notification received method={}", method)
        return None

    try:
        if method == "initialize":
            return _ok(
                {
                    "protocolVersion": MCP_PROTOCOL_VERSION,
                    "serverInfo": {"name": SERVER_NAME, "version": __version__},
                    "capabilities": {"tools": {}},
                },
                req_id,
            )

        if method == "ping":
            return _ok({}, req_id)

        if method == "tools/list":
            logger.info("tools list requested")
            return _ok({"tools": dispatcher.registry.schema()}, req_id)

        if method == "tools/call":
            params = payload.get("params", {}) or {}
            if not isinstance(params, dict):
                return _err(-32602, "params must be an object", req_id)
            tool_name = params.get("name")
            arguments = params.get("arguments")
            if not isinstance(tool_name, str) or not tool_name:
                return _err(-32602, "tools/call requires params.name", req_id)
            if arguments is not None and not isinstance(arguments, dict):
                return _err(-32602, "params.arguments must be an object", req_id)
            result = await dispatcher.dispatch(tool_name, arguments)
            return _ok(result, req_id)

        return _err(-32601, f"unsupported MCP method: {method}", req_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("MCP handler crashed method={}", method)
        return _err(-32603, f"internal MCP error: {exc}", req_id)

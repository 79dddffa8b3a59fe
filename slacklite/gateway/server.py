from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, AsyncIterator

import uvicorn
from fastapi import BackgroundTasks, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from loguru import logger

from slacklite import __version__
from slacklite.config.schema import AppConfig
from slacklite.gateway.dispatch import Dispatcher
from slacklite.gateway.session import Session, SessionManager
from slacklite.mcp_server import handle_mcp_jsonrpc
from slacklite.slack.client import SlackClient
from slacklite.tools.registry import ToolRegistry
from slacklite.tools.slack import SlackOperations, build_slack_registry
from slacklite.utils.logging import session_context, setup_logging

MESSAGES_PATH = "/messages"


@dataclass(slots=True)
class GatewayRuntime:
    client: SlackOperations
    registry: ToolRegistry
    dispatcher: Dispatcher
    sessions: SessionManager


def build_runtime(config: AppConfig, client: SlackOperations) -> GatewayRuntime:
    registry = build_slack_registry(client)
    return GatewayRuntime(
        client=client,
        registry=registry,
        dispatcher=Dispatcher(registry),
        sessions=SessionManager(endpoint=MESSAGES_PATH, exit_on_close=config.gateway.exit_on_close),
    )


async def connect_slack(config: AppConfig) -> SlackClient:
    token = config.slack.bot_token.strip()
    if not token:
        raise RuntimeError("Please set SLACK_BOT_TOKEN environment variable")
    return await SlackClient.connect(
        token,
        team_id=config.slack.team_id,
        base_url=config.slack.base_url,
        timeout=config.slack.timeout,
    )


async def stream_session(session: Session, sessions: SessionManager) -> AsyncIterator[str]:
    try:
        async for frame in session.frames():
            yield frame
    finally:
        sessions.close(session, reason=session.close_reason or "client_closed")


async def _handle_message(payload: Any, session: Session, dispatcher: Dispatcher) -> None:
    with session_context(session.id):
        response = await handle_mcp_jsonrpc(payload, dispatcher)
        if response is None:
            return
        if not session.send(response):
            logger.warning("response dropped, session closed id={}", response.get("id"))


def create_app(runtime: GatewayRuntime) -> FastAPI:
    app = FastAPI(title="Slack MCP Server", version=__version__)
    app.state.runtime = runtime
    sessions = runtime.sessions

    @app.get("/health")
    def health() -> dict[str, Any]:
        active = sessions.active
        return {
            "ok": True,
            "state": sessions.state.value,
            "session": active.id if active else None,
            "tools": len(runtime.registry),
        }

    @app.get("/sse")
    async def sse() -> StreamingResponse:
        try:
            session = sessions.open()
        except RuntimeError as exc:
            raise HTTPException(status_code=503, detail="gateway_terminating") from exc
        return StreamingResponse(
            stream_session(session, sessions),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.post(MESSAGES_PATH)
    async def messages(
        request: Request,
        background: BackgroundTasks,
        session_id: str | None = Query(default=None, alias="sessionId"),
    ) -> PlainTextResponse:
        session = sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="session_not_found")
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HTTPException(status_code=400, detail="invalid_json") from exc

        method = payload.get("method") if isinstance(payload, dict) else None
        logger.info("message received session={} method={}", session.id, method)
        background.add_task(_handle_message, payload, session, runtime.dispatcher)
        return PlainTextResponse("Accepted", status_code=202)

    @app.exception_handler(HTTPException)
    async def _http_error(_request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse({"ok": False, "error": exc.detail}, status_code=exc.status_code)

    return app


def _validate_port(raw: Any) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError) as exc:
        raise RuntimeError("invalid gateway config: 'port' must be an integer between 1 and 65535") from exc
    if port < 1 or port > 65535:
        raise RuntimeError(f"invalid gateway config: port {port} outside 1..65535")
    return port


async def serve(config: AppConfig, *, client: SlackOperations | None = None) -> None:
    host = config.gateway.host.strip() or "0.0.0.0"
    port = _validate_port(config.gateway.port)

    logger.info("Starting Slack MCP Server...")
    if client is None:
        client = await connect_slack(config)
    runtime = build_runtime(config, client)
    app = create_app(runtime)

    server = uvicorn.Server(
        uvicorn.Config(app, host=host, port=port, access_log=False, log_level="warning")
    )

    def _shutdown() -> None:
        server.should_exit = True

    runtime.sessions.on_terminate = _shutdown
    logger.info(
        "Server is running on port {} host={} mode={}",
        port,
        host,
        "serve-once" if config.gateway.exit_on_close else "serve-many",
    )
    try:
        await server.serve()
    except OSError as exc:
        raise RuntimeError(f"failed to start gateway on {host}:{port}: {exc}") from exc
    logger.info("gateway stopped")


def run_gateway(config: AppConfig) -> None:
    setup_logging(config)
    asyncio.run(serve(config))

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from dotenv import load_dotenv
from loguru import logger

from slacklite.config.loader import load_config
from slacklite.config.schema import AppConfig
from slacklite.gateway.dispatch import Dispatcher
from slacklite.gateway.server import connect_slack, run_gateway
from slacklite.tools.slack import build_slack_registry
from slacklite.utils.logging import setup_logging


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _require_token(cfg: AppConfig) -> bool:
    if cfg.slack.bot_token.strip():
        return True
    logger.error("Please set SLACK_BOT_TOKEN environment variable")
    return False


def cmd_start(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    setup_logging(cfg)
    if not _require_token(cfg):
        return 1
    if args.host:
        cfg.gateway.host = args.host
    if args.port:
        cfg.gateway.port = args.port
    if args.serve_many:
        cfg.gateway.exit_on_close = False
    try:
        run_gateway(cfg)
    except RuntimeError as exc:
        logger.error("gateway failed error={}", exc)
        return 1
    return 0


def cmd_tools(args: argparse.Namespace) -> int:
    registry = build_slack_registry()
    _print_json({"tools": registry.schema()})
    return 0


def cmd_call(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    setup_logging(cfg)
    if not _require_token(cfg):
        return 1
    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as exc:
        logger.error("invalid --args JSON error={}", exc)
        return 2

    async def _scenario() -> dict[str, Any]:
        client = await connect_slack(cfg)
        return await Dispatcher(build_slack_registry(client)).dispatch(args.name, arguments)

    try:
        envelope = asyncio.run(_scenario())
    except RuntimeError as exc:
        logger.error("call failed error={}", exc)
        return 1
    _print_json(envelope)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slacklite", description="Slack MCP server over SSE")
    parser.add_argument("--config", default=None, help="Path to config JSON/YAML")
    sub = parser.add_subparsers(dest="command", required=True)

    p_start = sub.add_parser("start", help="Start the SSE gateway")
    p_start.add_argument("--host", default=None)
    p_start.add_argument("--port", type=int, default=None)
    p_start.add_argument(
        "--serve-many",
        action="store_true",
        help="Keep running after the client disconnects instead of exiting",
    )
    p_start.set_defaults(handler=cmd_start)

    p_tools = sub.add_parser("tools", help="Print the tool catalog")
    p_tools.set_defaults(handler=cmd_tools)

    p_call = sub.add_parser("call", help="Dispatch one tool call against the workspace")
    p_call.add_argument("name")
    p_call.add_argument("--args", default="{}", help="Tool arguments as a JSON object (null sends no arguments)")
    p_call.set_defaults(handler=cmd_call)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.handler(args))

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

from slacklite.config.schema import AppConfig

DEFAULT_CONFIG_PATH = Path.home() / ".slacklite" / "config.json"


def _deep_merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def _read_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    if path.suffix.lower() in {".yaml", ".yml"}:
        loaded = yaml.safe_load(text) or {}
        if not isinstance(loaded, dict):
            raise RuntimeError("invalid config format: expected mapping")
        return dict(loaded)
    loaded = json.loads(text)
    if not isinstance(loaded, dict):
        raise RuntimeError("invalid config format: expected object")
    return dict(loaded)


def _first_env(*names: str) -> str:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def _env_overrides() -> dict[str, Any]:
    out: dict[str, Any] = {}
    token = _first_env("SLACK_BOT_TOKEN")
    if token:
        out.setdefault("slack", {})["bot_token"] = token
    team_id = _first_env("SLACK_TEAM_ID")
    if team_id:
        out.setdefault("slack", {})["team_id"] = team_id
    base_url = _first_env("SLACK_API_BASE_URL")
    if base_url:
        out.setdefault("slack", {})["base_url"] = base_url
    host = _first_env("SLACKLITE_GATEWAY_HOST", "HOST")
    if host:
        out.setdefault("gateway", {})["host"] = host
    port = _first_env("SLACKLITE_GATEWAY_PORT", "PORT")
    if port:
        # validated by GatewayConfig.from_dict
        out.setdefault("gateway", {})["port"] = port
    exit_on_close = _first_env("SLACKLITE_EXIT_ON_CLOSE")
    if exit_on_close:
        out.setdefault("gateway", {})["exit_on_close"] = exit_on_close
    level = _first_env("SLACKLITE_LOG_LEVEL")
    if level:
        out["log_level"] = level
    return out


def load_config(path: str | Path | None = None) -> AppConfig:
    target = Path(path) if path else DEFAULT_CONFIG_PATH
    file_cfg = _read_file(target)
    defaults = AppConfig().to_dict()
    merged = _deep_merge(defaults, file_cfg)
    merged = _deep_merge(merged, _env_overrides())
    return AppConfig.from_dict(merged)


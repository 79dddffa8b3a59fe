from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

DEFAULT_SLACK_API_BASE_URL = "https://slack.com/api"


@dataclass(slots=True)
class SlackConfig:
    bot_token: str = ""
    team_id: str = ""
    base_url: str = DEFAULT_SLACK_API_BASE_URL
    timeout: float = 30.0


@dataclass(slots=True)
class GatewayConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    exit_on_close: bool = True

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> GatewayConfig:
        data = dict(raw or {})
        defaults = cls()
        if "exitOnClose" in data:
            exit_on_close = _as_bool(data.get("exitOnClose"), defaults.exit_on_close)
        else:
            exit_on_close = _as_bool(data.get("exit_on_close"), defaults.exit_on_close)
        try:
            port = int(data.get("port", defaults.port))
        except (TypeError, ValueError) as exc:
            raise RuntimeError("invalid gateway config: 'port' must be an integer") from exc
        return cls(
            host=str(data.get("host") or defaults.host),
            port=port,
            exit_on_close=exit_on_close,
        )


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(slots=True)
class AppConfig:
    slack: SlackConfig = field(default_factory=SlackConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    log_level: str = "INFO"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        def _pick(klass: type, payload: dict[str, Any]) -> dict[str, Any]:
            allowed = {item.name for item in fields(klass)}
            return {key: value for key, value in payload.items() if key in allowed}

        raw = dict(data or {})
        defaults = cls()
        slack = SlackConfig(**_pick(SlackConfig, dict(raw.get("slack") or {})))
        gateway = GatewayConfig.from_dict(dict(raw.get("gateway") or {}))
        return cls(
            slack=slack,
            gateway=gateway,
            log_level=str(raw.get("log_level") or defaults.log_level),
        )

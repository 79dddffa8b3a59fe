from __future__ import annotations

from slacklite.gateway.dispatch import Dispatcher
from slacklite.gateway.session import Session, SessionManager

__all__ = ["Dispatcher", "Session", "SessionManager"]

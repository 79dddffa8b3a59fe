from __future__ import annotations

from slacklite.utils.logging import session_context, setup_logging

__all__ = ["session_context", "setup_logging"]

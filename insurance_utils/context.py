from contextvars import ContextVar

# Identifies one application session in log lines
session_id: ContextVar[str | None] = ContextVar("session_id", default=None)

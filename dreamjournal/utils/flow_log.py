"""Timestamped console flow logging for layout diagnostics."""

import time

from dreamjournal.utils.settings import settings

_ALWAYS_SHOWN_LEVELS = ("WARNING", "ERROR")
_last_logged_at: dict[str, float] = {}


def trace_enabled() -> bool:
    try:
        return bool(settings.value("trace_logs", False, type=bool))
    except Exception:
        return False


def log_flow(component: str, message: str, *, level: str = "DEBUG",
             throttle_key: str | None = None, every_s: float | None = None):
    """Print a flow line, optionally throttled per key.

    DEBUG/INFO lines only show when the `trace_logs` setting is on.
    """
    if level not in _ALWAYS_SHOWN_LEVELS and not trace_enabled():
        return

    now = time.time()
    if throttle_key and every_s is not None:
        last = _last_logged_at.get(throttle_key, 0.0)
        if (now - last) < every_s:
            return
        _last_logged_at[throttle_key] = now
    ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
    print(f"[{ts}][TRACE][{component}][{level}] {message}")


def reset_throttle():
    _last_logged_at.clear()

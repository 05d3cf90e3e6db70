"""In-process counters for operational visibility."""

from collections import deque
from threading import Lock
from typing import Any

# Percentiles are computed over the most recent durations only.
DURATION_WINDOW = 1000

# Handlers run in the server threadpool, so every mutation goes through _lock.
_lock = Lock()
_counters: dict[str, int] = {}
_durations: deque[float] = deque(maxlen=DURATION_WINDOW)
_duration_sum = 0.0


def _reset() -> None:
    global _duration_sum
    with _lock:
        _counters.clear()
        _counters.update(
            {
                "update_requests_total": 0,
                "updates_completed_total": 0,
                "rejected_unauthorized_total": 0,
                "rejected_invalid_path_total": 0,
                "compose_file_missing_total": 0,
                "command_failures_total": 0,
            }
        )
        _durations.clear()
        _duration_sum = 0.0


_reset()


def _increment(name: str) -> None:
    with _lock:
        _counters[name] = _counters.get(name, 0) + 1


def record_update_request() -> None:
    _increment("update_requests_total")


def record_update_completed(seconds: float) -> None:
    """Count a finished update and add its duration to the summary."""
    global _duration_sum
    with _lock:
        _counters["updates_completed_total"] = _counters.get("updates_completed_total", 0) + 1
        _durations.append(seconds)
        _duration_sum += seconds


def record_unauthorized() -> None:
    _increment("rejected_unauthorized_total")


def record_invalid_path() -> None:
    _increment("rejected_invalid_path_total")


def record_compose_file_missing() -> None:
    _increment("compose_file_missing_total")


def record_command_failure() -> None:
    _increment("command_failures_total")


def _percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    idx = int((len(sorted_vals) - 1) * p)
    return round(sorted_vals[idx], 2)


def get_metrics() -> dict[str, Any]:
    """Return current metrics snapshot (for /metrics or tests)."""
    with _lock:
        out: dict[str, Any] = dict(_counters)
        window = list(_durations)
        count = _counters.get("updates_completed_total", 0)
        total = _duration_sum
    out["update_duration_seconds"] = {
        "count": count,
        "p50": _percentile(window, 0.50),
        "p95": _percentile(window, 0.95),
        "sum": round(total, 2),
        "window": len(window),
    }
    return out


def reset_metrics() -> None:
    """Zero all counters (tests)."""
    _reset()

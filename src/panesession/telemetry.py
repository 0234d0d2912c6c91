"""Telemetry - logging and metrics entry point

Log format: [Module:pane[:8]] msg
Metric names: action.ok, action.noop, queue.depth, queue.rejected,
invariant.violation
"""

import logging

from .config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    Args:
        name: Module name (usually ``__name__``)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the web host."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=_LOG_FORMAT)


def format_pane_log(module: str, pane_id: str | None, msg: str) -> str:
    """Format a log message tagged with a pane id.

    Args:
        module: Module tag
        pane_id: Pane identifier
        msg: Message

    Returns:
        ``[module:pane_id[:8]] msg``
    """
    pane_short = pane_id[:8] if pane_id else "-"
    return f"[{module}:{pane_short}] {msg}"


class Metrics:
    """In-memory counters and gauges.

    Keys are ``name`` or ``name{k=v,...}`` when labels are given.
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter.

        Args:
            name: Metric name (e.g. "action.ok")
            labels: Optional labels (e.g. {"kind": "open"})
            value: Increment, default 1
        """
        key = self._make_key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """Set a gauge value."""
        key = self._make_key(name, labels)
        self._gauges[key] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        key = self._make_key(name, labels)
        return self._counters.get(key, 0)

    def get_gauge(self, name: str, labels: dict[str, str] | None = None) -> float:
        key = self._make_key(name, labels)
        return self._gauges.get(key, 0.0)

    def reset(self) -> None:
        """Drop all values (tests)."""
        self._counters.clear()
        self._gauges.clear()

    def _make_key(self, name: str, labels: dict[str, str] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"

    def counters(self, prefix: str = "") -> dict[str, int]:
        """Counters whose key starts with ``prefix``."""
        return {k: v for k, v in self._counters.items() if k.startswith(prefix)}


# Process-wide metrics instance
metrics = Metrics()

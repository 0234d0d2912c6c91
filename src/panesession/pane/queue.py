"""DispatchQueue - host-side action queue

Serializes actions from concurrent UI handlers so the manager sees them one
at a time, in dispatch order.

Behavior:
- Default capacity 256
- Debug log at 75% (high watermark)
- On overflow the new action is refused; queued actions are never dropped
- Refusals are counted as queue.rejected
"""

from collections import deque

from ..config import METRICS_ENABLED, QUEUE_HIGH_WATERMARK, QUEUE_MAX_SIZE
from ..telemetry import get_logger, metrics
from .types import Action

logger = get_logger(__name__)


class DispatchQueue:
    """FIFO queue of pending actions.

    Attributes:
        name: Label used in logs and metrics
        max_size: Capacity
        high_watermark: Fraction of capacity that triggers a debug log
    """

    def __init__(
        self,
        name: str = "session",
        max_size: int = QUEUE_MAX_SIZE,
        high_watermark: float = QUEUE_HIGH_WATERMARK,
    ):
        self.name = name
        self._max_size = max_size
        self._high_watermark = high_watermark
        self._queue: deque[Action] = deque()
        self._processing = False

    def enqueue(self, action: Action) -> bool:
        """Append an action.

        Returns:
            False when the queue is full and the action was refused
        """
        if len(self._queue) >= self._max_size:
            logger.warning(
                f"[Queue:{self.name}] Rejected action {action.kind.value} (queue full)"
            )
            if METRICS_ENABLED:
                metrics.inc("queue.rejected", {"queue": self.name})
            return False

        self._queue.append(action)

        depth = len(self._queue)
        if METRICS_ENABLED:
            metrics.gauge("queue.depth", depth, {"queue": self.name})

        if depth >= self._max_size * self._high_watermark:
            logger.debug(
                f"[Queue:{self.name}] High watermark: {depth}/{self._max_size} "
                f"({depth / self._max_size * 100:.0f}%)"
            )

        return True

    def dequeue(self) -> Action | None:
        """Pop the oldest action, or None when empty."""
        if not self._queue:
            return None

        action = self._queue.popleft()
        if METRICS_ENABLED:
            metrics.gauge("queue.depth", len(self._queue), {"queue": self.name})
        return action

    def peek(self) -> Action | None:
        if not self._queue:
            return None
        return self._queue[0]

    def clear(self) -> int:
        """Empty the queue.

        Returns:
            Number of actions discarded
        """
        count = len(self._queue)
        self._queue.clear()
        if METRICS_ENABLED:
            metrics.gauge("queue.depth", 0, {"queue": self.name})
        return count

    # === State ===

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return len(self._queue) > 0

    @property
    def is_empty(self) -> bool:
        return len(self._queue) == 0

    @property
    def is_full(self) -> bool:
        return len(self._queue) >= self._max_size

    @property
    def depth(self) -> int:
        return len(self._queue)

    @property
    def is_processing(self) -> bool:
        return self._processing

    def set_processing(self, value: bool) -> None:
        self._processing = value

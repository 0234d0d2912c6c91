"""PaneSession configuration

Settings are grouped as:
- Capacity: pane ceiling and closed-history depth
- Defaults: blank pane values
- Manager: action history and invariant checks
- Queue: dispatch queue parameters
- Logging / metrics
- Web host
"""

import os

# === Capacity ===
MAX_PANES = 50  # Pane ceiling (Chrome's default tab limit)
MAX_CLOSED = 25  # Closed-pane history depth

# === Defaults ===
DEFAULT_TITLE = "New Tab"  # Title of a blank pane
SEARCH_URL_TEMPLATE = "https://www.google.com/search?q={query}"  # Address bar fallback

# === Manager ===
ACTION_HISTORY_MAX_LENGTH = 30  # In-memory action history length
CHECK_INVARIANTS = False  # Verify invariants after every applied action

# === Dispatch queue ===
QUEUE_MAX_SIZE = 256  # Queue capacity
QUEUE_HIGH_WATERMARK = 0.75  # Debug log threshold (fraction of capacity)

# === Logging ===
LOG_LEVEL = os.environ.get("PANESESSION_LOG_LEVEL", "INFO")

# === Metrics ===
METRICS_ENABLED = True

# === Web host ===
WEB_HOST = os.environ.get("PANESESSION_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("PANESESSION_PORT", "8765"))

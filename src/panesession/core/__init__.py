"""Core module - host-agnostic utilities"""

from .address import format_address
from .ids import counter_ids, new_pane_id, short_id

__all__ = [
    "new_pane_id",
    "counter_ids",
    "short_id",
    "format_address",
]

from __future__ import annotations

from typing import Any

RPDE_ITEM_STATES = ("updated", "deleted")


def is_rpde_feed(data: Any) -> bool:
    """An untyped object whose `items` hold at least one RPDE item with a known state."""
    if not isinstance(data, dict):
        return False
    if "type" in data or "@type" in data:
        return False
    items = data.get("items")
    if not isinstance(items, list):
        return False
    return any(isinstance(item, dict) and item.get("state") in RPDE_ITEM_STATES for item in items)

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional

_COMPACT_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    """
    ISO-8601 date or date-time -> timezone-aware UTC datetime.

    Accepts YYYY-MM-DD, YYYYMMDD and YYYY-MM-DDTHH:MM[:SS[.fff]][Z|±HH:MM].
    Values without an offset are taken as UTC. Returns None when unparseable.
    """
    if not isinstance(value, str) or not value:
        return None

    s = value.strip()
    m = _COMPACT_DATE.match(s)
    if m:
        s = f"{m.group(1)}-{m.group(2)}-{m.group(3)}"
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

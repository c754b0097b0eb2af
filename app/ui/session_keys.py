from __future__ import annotations

from typing import Any, MutableMapping, Optional


def row_status_key(screen: str, record_id: str) -> str:
    return f"{screen}_row_status_{record_id}"


def forget_row_selects(session: MutableMapping[str, Any], screen: str) -> int:
    """Drop every per-row status select of `screen` so the next run rebuilds them from the records."""
    prefix = row_status_key(screen, "")
    stale = [k for k in list(session.keys()) if isinstance(k, str) and k.startswith(prefix)]
    for k in stale:
        session.pop(k, None)
    return len(stale)


def take_pending(session: MutableMapping[str, Any], key: str) -> Optional[Any]:
    """Read a one-shot request (e.g. open a dialog) and clear it in the same step."""
    return session.pop(key, None)

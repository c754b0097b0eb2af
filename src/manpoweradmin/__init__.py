"""Manpower admin console.

Review screens for manpower submissions and manpower service payments stored
in a remote document database.
"""

from __future__ import annotations

__all__ = []

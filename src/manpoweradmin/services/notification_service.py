from __future__ import annotations

import time
from typing import Callable, Literal, Optional

from pydantic import BaseModel


class Banner(BaseModel):
    """
    Description: One banner shown above a review table.
    Layer: L2
    Input: message + kind + creation time
    Output: renderable banner; success banners carry an expiry
    """

    kind: Literal["success", "error"]
    message: str
    created_at: float
    expires_at: Optional[float] = None


class NotificationService:
    """
    Description: Success/error banners for one screen.
    Layer: L2
    Input: mutation outcomes from the review managers
    Output: transient success banner (self-clears) + persistent, dismissible error banner
    """

    def __init__(self, *, success_seconds: float = 3.0, clock: Optional[Callable[[], float]] = None) -> None:
        self._success_seconds = float(success_seconds)
        self._clock = clock or time.monotonic
        self._success: Optional[Banner] = None
        self._error: Optional[Banner] = None

    def success(self, message: str) -> Banner:
        now = self._clock()
        self._success = Banner(kind="success", message=message, created_at=now, expires_at=now + self._success_seconds)
        return self._success

    def error(self, message: str) -> Banner:
        self._error = Banner(kind="error", message=message, created_at=self._clock())
        return self._error

    def clear_error(self) -> None:
        self._error = None

    @property
    def active_success(self) -> Optional[Banner]:
        if self._success is not None and self._success.expires_at is not None:
            if self._clock() >= self._success.expires_at:
                self._success = None
        return self._success

    @property
    def active_error(self) -> Optional[Banner]:
        return self._error

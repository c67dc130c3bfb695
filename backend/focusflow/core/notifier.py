# backend/focusflow/core/notifier.py
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"  # default | destructive
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ToastNotifier:
    """
    Toast sink for user-visible messages. Fire-and-forget: the UI polls the
    most recent entries, nothing waits for a reply.
    """

    def __init__(self, maxlen: int = 50):
        self._toasts = deque(maxlen=maxlen)

    def notify(self, title: str, description: str = "", variant: str = "default") -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self._toasts.append(toast)
        if variant == "destructive":
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)
        return toast

    def error(self, title: str, description: str = "") -> Toast:
        return self.notify(title, description, variant="destructive")

    @property
    def toasts(self) -> List[Toast]:
        return list(self._toasts)

    def recent(self, limit: int = 10) -> List[Toast]:
        return self.toasts[-limit:]

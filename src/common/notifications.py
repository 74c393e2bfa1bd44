"""
Transient user notifications (toasts).

The presentation layer drains the queue and shows each toast briefly.
"""

from dataclasses import dataclass, field
from typing import Literal

ToastKind = Literal["success", "info", "error"]


@dataclass(frozen=True)
class Toast:
    """A single transient notification."""

    message: str
    kind: ToastKind = "info"


@dataclass
class NotificationQueue:
    """FIFO of toasts waiting to be shown."""

    pending: list[Toast] = field(default_factory=list)

    def add(self, message: str, kind: ToastKind = "info") -> Toast:
        toast = Toast(message=message, kind=kind)
        self.pending.append(toast)
        return toast

    def success(self, message: str) -> Toast:
        return self.add(message, "success")

    def info(self, message: str) -> Toast:
        return self.add(message, "info")

    def error(self, message: str) -> Toast:
        return self.add(message, "error")

    def drain(self) -> list[Toast]:
        """Return all pending toasts in order and empty the queue."""
        drained, self.pending = self.pending, []
        return drained

    def messages(self, kind: ToastKind | None = None) -> list[str]:
        return [t.message for t in self.pending if kind is None or t.kind == kind]

"""User-visible notices ("toasts") raised by the favorites store and services.

Domain code never prints. It pushes :class:`Toast` records onto a
:class:`ToastQueue` owned by the application container, and the CLI drains the
queue after each command.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

ToastKind = Literal["success", "error", "info"]


class Toast(BaseModel):
    message: str
    kind: ToastKind = "info"


class ToastQueue:
    """FIFO buffer of pending notices."""

    def __init__(self) -> None:
        self._pending: list[Toast] = []

    def add(self, message: str, kind: ToastKind = "info") -> Toast:
        toast = Toast(message=message, kind=kind)
        self._pending.append(toast)
        return toast

    def drain(self) -> list[Toast]:
        """Return and forget every pending toast, oldest first."""

        pending, self._pending = self._pending, []
        return pending

    @property
    def pending(self) -> tuple[Toast, ...]:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

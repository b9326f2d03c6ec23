"""Abstract interface for message delivery backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.types import DeliveryReport


class Notifier(ABC):
    """Delivers one formatted message to every configured channel.

    Notifiers are context managers: leaving the ``with`` block shuts down
    whatever connection the backend holds.
    """

    @abstractmethod
    def deliver(self, message: str) -> DeliveryReport:
        """Send ``message`` to all matching channels.

        A failure on one channel is recorded in the report and does not
        stop delivery to the others.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying connection."""

    def __enter__(self) -> "Notifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""Key-value storage interfaces for persisted session state."""

from abc import ABC, abstractmethod

from fastapi import Response


class KeyValueStorage(ABC):
    """String-to-string store with the semantics of browser web storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when absent or unreadable."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    def apply_to(self, response: Response) -> None:
        """Propagate pending writes onto an outgoing response, if the store needs it."""


__all__ = ["KeyValueStorage"]

"""Process-local storage used by tests and non-HTTP callers."""

from managersol.adapters.storage.base import KeyValueStorage


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self.write_count += 1

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self.write_count += 1


__all__ = ["MemoryStorage"]

"""Session storage adapters."""

from .base import KeyValueStorage
from .cookie_storage import CookieStorage
from .memory_storage import MemoryStorage

__all__ = ["CookieStorage", "KeyValueStorage", "MemoryStorage"]

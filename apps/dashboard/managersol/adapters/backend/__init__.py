"""REST backend adapters."""

from .base import BackendClient, BackendError, BackendUnauthorizedError
from .http_backend import HttpBackendClient
from .memory_backend import InMemoryBackendClient

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendUnauthorizedError",
    "HttpBackendClient",
    "InMemoryBackendClient",
]

"""Cookie-backed storage.

A persistent cookie plays the role of the browser's durable store and a
session cookie (no ``Max-Age``) the role of its session-scoped store. Values
are base64url-encoded so JSON survives cookie quoting rules; anything that
fails to decode reads as absent.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping

from fastapi import Response

from managersol.adapters.storage.base import KeyValueStorage


def encode_cookie_value(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cookie_value(raw: str) -> str | None:
    padded = raw + "=" * (-len(raw) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


class CookieStorage(KeyValueStorage):
    """Reads from request cookies; buffers writes until :meth:`apply_to`."""

    def __init__(
        self,
        cookies: Mapping[str, str],
        *,
        prefix: str = "",
        max_age: int | None = None,
        secure: bool = False,
    ) -> None:
        self._cookies = dict(cookies)
        self._prefix = prefix
        self._max_age = max_age
        self._secure = secure
        self._pending: dict[str, str | None] = {}

    def get(self, key: str) -> str | None:
        name = self._cookie_name(key)
        if name in self._pending:
            raw = self._pending[name]
        else:
            raw = self._cookies.get(name)
        if raw is None:
            return None
        return decode_cookie_value(raw)

    def set(self, key: str, value: str) -> None:
        self._pending[self._cookie_name(key)] = encode_cookie_value(value)

    def remove(self, key: str) -> None:
        name = self._cookie_name(key)
        if name in self._cookies or name in self._pending:
            self._pending[name] = None

    def apply_to(self, response: Response) -> None:
        for name, value in self._pending.items():
            if value is None:
                response.delete_cookie(name, path="/", secure=self._secure, httponly=True, samesite="lax")
            else:
                response.set_cookie(
                    name,
                    value,
                    max_age=self._max_age,
                    path="/",
                    secure=self._secure,
                    httponly=True,
                    samesite="lax",
                )

    def _cookie_name(self, key: str) -> str:
        return f"{self._prefix}{key}"


__all__ = ["CookieStorage", "decode_cookie_value", "encode_cookie_value"]

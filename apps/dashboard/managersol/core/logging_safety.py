"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def safe_log_path(path: str) -> str:
    """Collapse a request path to its first two segments so ids in paths stay out of logs."""
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) <= 2:
        return "/" + "/".join(segments)
    return "/" + "/".join(segments[:2]) + "/..."

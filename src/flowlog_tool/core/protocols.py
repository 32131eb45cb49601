"""Lookup of IP protocol numbers in the fixed protocol registry."""

from __future__ import annotations

from typing import Optional

from .constants import PROTOCOL_MAP


def resolve_protocol(numeric_id: str) -> Optional[str]:
    """Return the symbolic name for ``numeric_id`` or ``None`` if unregistered.

    The lookup is exact: ``"06"`` or ``" 6"`` do not resolve.
    """
    return PROTOCOL_MAP.get(numeric_id)


def is_registered(numeric_id: str) -> bool:
    return numeric_id in PROTOCOL_MAP


__all__ = ["resolve_protocol", "is_registered"]

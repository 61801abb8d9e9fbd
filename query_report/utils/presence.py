"""Blank/present checks for request values.

Request values arrive as strings, lists or ``None``. A value is blank when it
carries nothing to filter on: ``None``, ``False``, a whitespace-only string or
an empty collection. Zero is a real value and is present.
"""

from collections.abc import Collection
from typing import Any


def is_blank(value: Any) -> bool:
    """Return True when ``value`` carries nothing to filter on."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Collection):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    """Inverse of :func:`is_blank`."""
    return not is_blank(value)

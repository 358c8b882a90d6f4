"""Built-in string constants available to every BibTeX document."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


MONTH_CONSTANTS: Mapping[str, str] = MappingProxyType(
    {
        "jan": "January",
        "feb": "February",
        "mar": "March",
        "apr": "April",
        "may": "May",
        "jun": "June",
        "jul": "July",
        "aug": "August",
        "sep": "September",
        "oct": "October",
        "nov": "November",
        "dec": "December",
    }
)


def lookup_constant(name: str) -> str | None:
    """Return the expansion of a built-in abbreviation such as ``jan``."""
    return MONTH_CONSTANTS.get(name)


__all__ = ["MONTH_CONSTANTS", "lookup_constant"]

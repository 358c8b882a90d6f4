"""CLI command implementations exposed via `texbib.ui.cli`."""

from __future__ import annotations

from .show import raw, show


__all__ = ["raw", "show"]

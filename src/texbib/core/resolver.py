"""Expansion of ``@string`` variables into plain text."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import CyclicVariableError, ExpansionDepthError, UndefinedVariableError
from .model import Abbreviation, RawEntry, StringFragment, StringLiteral, VariableEntry


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256
MAX_DEPTH_LIMIT = 512


class VariableResolver:
    """Resolve every string variable, regardless of declaration order.

    Each variable is expanded on its own against the complete set of
    definitions, so a variable may reference one declared further down the
    file. Only other variables are consulted: built-in constants are not
    visible inside ``@string`` definitions.
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}.")
        self.max_depth = max_depth
        self._emitter = emitter or NullEmitter()

    def resolve(self, entries: Iterable[RawEntry]) -> dict[str, str]:
        """Return a mapping from variable name to its expanded value."""
        definitions = self.collect(entries)
        resolved = {
            name: self._expand(fragments, definitions, (name,))
            for name, fragments in definitions.items()
        }
        logger.debug("Resolved %d string variables", len(resolved))
        return resolved

    def collect(self, entries: Iterable[RawEntry]) -> dict[str, tuple[StringFragment, ...]]:
        """Gather variable definitions; a redefinition replaces the earlier one."""
        definitions: dict[str, tuple[StringFragment, ...]] = {}
        for entry in entries:
            if not isinstance(entry, VariableEntry):
                continue
            if entry.name in definitions:
                self._emitter.warning(
                    f"String variable '{entry.name}' is defined more than once; "
                    "using the last definition."
                )
            definitions[entry.name] = entry.variable.value
        return definitions

    def _expand(
        self,
        fragments: Sequence[StringFragment],
        definitions: Mapping[str, Sequence[StringFragment]],
        chain: tuple[str, ...],
    ) -> str:
        parts: list[str] = []
        for fragment in fragments:
            match fragment:
                case StringLiteral(text=text):
                    parts.append(text)
                case Abbreviation(name=name):
                    if name in chain:
                        raise CyclicVariableError((*chain[chain.index(name) :], name))
                    referenced = definitions.get(name)
                    if referenced is None:
                        raise UndefinedVariableError(name)
                    if len(chain) >= self.max_depth:
                        raise ExpansionDepthError(chain[0], self.max_depth)
                    parts.append(self._expand(referenced, definitions, (*chain, name)))
                case _:
                    raise TypeError(f"Unsupported string fragment: {fragment!r}")
        return "".join(parts)


__all__ = ["DEFAULT_MAX_DEPTH", "MAX_DEPTH_LIMIT", "VariableResolver"]

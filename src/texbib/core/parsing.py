"""Entry points chaining the grammar, the resolver and the document builder."""

from __future__ import annotations

import logging
from pathlib import Path

from .builder import DocumentBuilder
from .config import ResolverConfig
from .diagnostics import DiagnosticEmitter
from .document import Document
from .exceptions import BibtexError
from .grammar import parse_entries
from .model import RawEntry


logger = logging.getLogger(__name__)


def raw_parse(text: str) -> list[RawEntry]:
    """Return the unresolved entries of a BibTeX payload."""
    return parse_entries(text)


def parse(
    text: str,
    *,
    config: ResolverConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> Document:
    """Parse a BibTeX payload and expand every abbreviation it contains."""
    entries = parse_entries(text)
    logger.debug("Parsed %d raw entries", len(entries))
    return DocumentBuilder(config, emitter=emitter).build(entries)


def parse_file(
    path: Path | str,
    *,
    encoding: str | None = None,
    config: ResolverConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> Document:
    """Read a ``.bib`` file and return its resolved document.

    Errors raised while parsing carry the file path in their ``source``
    attribute.
    """
    file_path = Path(path)
    active_config = config or ResolverConfig()
    text = file_path.read_text(encoding=encoding or active_config.encoding)
    try:
        return parse(text, config=active_config, emitter=emitter)
    except BibtexError as exc:
        exc.source = file_path
        raise


__all__ = ["parse", "parse_file", "raw_parse"]

"""Primary public API for texbib."""

from __future__ import annotations

from texbib.core import (
    Bibliography,
    BibtexError,
    BibtexSyntaxError,
    CyclicVariableError,
    DiagnosticEmitter,
    Document,
    ExpansionDepthError,
    LoggingEmitter,
    NullEmitter,
    RawEntry,
    ResolverConfig,
    UndefinedVariableError,
    load_config,
    parse,
    parse_file,
    raw_parse,
    to_bibliography_data,
)
from texbib.version import get_version


__version__ = get_version()

__all__ = [
    "Bibliography",
    "BibtexError",
    "BibtexSyntaxError",
    "CyclicVariableError",
    "DiagnosticEmitter",
    "Document",
    "ExpansionDepthError",
    "LoggingEmitter",
    "NullEmitter",
    "RawEntry",
    "ResolverConfig",
    "UndefinedVariableError",
    "__version__",
    "load_config",
    "parse",
    "parse_file",
    "raw_parse",
    "to_bibliography_data",
]

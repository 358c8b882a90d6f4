"""Resolution engine for BibTeX files.

Architecture
: `grammar.parse_entries` turns text into an ordered list of raw entries whose
  values are kept as fragments (literal text and abbreviations).
: `VariableResolver` expands every `@string` variable against the complete
  set of definitions, so forward references work and loops are reported.
: `DocumentBuilder` walks the raw entries once, expanding preambles and tags
  against the resolved variables and the built-in month constants, and
  returns an immutable `Document`.

Usage Example

```pycon
>>> from texbib.core import parse
>>> document = parse('''
... @string{inst = "MIT"}
... @article{k1, institution = inst, month = jan}
... ''')
>>> document.find("k1").tags
{'institution': 'MIT', 'month': 'January'}
```
"""

from __future__ import annotations

from .builder import DocumentBuilder
from .config import ConfigError, ResolverConfig, load_config
from .constants import MONTH_CONSTANTS, lookup_constant
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .document import Bibliography, Document
from .exceptions import (
    BibtexError,
    BibtexSyntaxError,
    CyclicVariableError,
    ExpansionDepthError,
    UndefinedVariableError,
)
from .interop import to_bibliography_data
from .model import (
    Abbreviation,
    BibliographyEntry,
    CommentEntry,
    KeyValue,
    PreambleEntry,
    RawEntry,
    Span,
    StringFragment,
    StringLiteral,
    VariableEntry,
)
from .parsing import parse, parse_file, raw_parse
from .resolver import VariableResolver


__all__ = [
    "MONTH_CONSTANTS",
    "Abbreviation",
    "Bibliography",
    "BibliographyEntry",
    "BibtexError",
    "BibtexSyntaxError",
    "CommentEntry",
    "ConfigError",
    "CyclicVariableError",
    "DiagnosticEmitter",
    "Document",
    "DocumentBuilder",
    "ExpansionDepthError",
    "KeyValue",
    "LoggingEmitter",
    "NullEmitter",
    "PreambleEntry",
    "RawEntry",
    "ResolverConfig",
    "Span",
    "StringFragment",
    "StringLiteral",
    "UndefinedVariableError",
    "VariableEntry",
    "VariableResolver",
    "load_config",
    "lookup_constant",
    "parse",
    "parse_file",
    "raw_parse",
    "to_bibliography_data",
]

"""Recursive-descent grammar turning BibTeX text into raw entries.

The grammar only recognises structure: values are kept as ordered fragments
(literal text and abbreviation references) and nothing is expanded here.

Accepted input
: `@type{...}` or `@type(...)` entries. The `comment`, `preamble` and
  `string` keywords are matched case-insensitively.
: Values are `{braced}` or `"quoted"` text, bare digit runs, or bare
  identifiers (abbreviations), concatenated with `#`.
: Text outside entries is kept as a comment. An `@` starts an entry when it
  begins a line or is followed by `type{` or `type(`; any other `@`, as in an
  e-mail address, stays part of the surrounding text.

Failures raise `BibtexSyntaxError` pointing at the offending line.
"""

from __future__ import annotations

from bisect import bisect_right
import re
from typing import NoReturn

from .exceptions import BibtexSyntaxError
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


_ENTRY_TYPE_RE = re.compile(r"[A-Za-z][\w:-]*")
_ENTRY_START_RE = re.compile(r"@\s*[A-Za-z][\w:-]*\s*[{(]")
_IDENTIFIER_RE = re.compile(r"[^\s\"#%'(),={}@]+")
_CITATION_KEY_RE = re.compile(r"[^\s\",#%'(){}=]+")

_DELIMITERS = {"{": "}", "(": ")"}


def parse_entries(text: str) -> list[RawEntry]:
    """Return the raw entries of ``text`` in declaration order."""
    return _Parser(text).parse()


def render_context(text: str, span: Span) -> str:
    """Quote the line holding ``span`` with a caret under its first character."""
    line_start = text.rfind("\n", 0, span.start) + 1
    line_end = text.find("\n", span.start)
    if line_end == -1:
        line_end = len(text)
    line_text = text[line_start:line_end].rstrip("\r")
    gutter = f"{span.line:>5} | "
    indent = "".join(ch if ch == "\t" else " " for ch in line_text[: span.column - 1])
    pointer = " " * (len(gutter) - 2) + "| " + indent + "^"
    return f"{gutter}{line_text}\n{pointer}"


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [match.end() for match in re.finditer(r"\n", text)]

    def parse(self) -> list[RawEntry]:
        entries: list[RawEntry] = []
        while True:
            self._skip_whitespace()
            if self._at_end():
                return entries
            if self._at_entry_start(self.pos):
                entries.append(self._entry())
            else:
                entries.append(self._free_text())

    # ------------------------------------------------------------------ entries

    def _free_text(self) -> CommentEntry:
        start = self.pos
        end = self.text.find("@", start + 1)
        while end != -1 and not self._at_entry_start(end):
            end = self.text.find("@", end + 1)
        if end == -1:
            end = len(self.text)
        self.pos = end
        return CommentEntry(self.text[start:end].strip(), self._span(start, end))

    def _at_entry_start(self, index: int) -> bool:
        # An "@" opens an entry at the start of a line or ahead of "type{" / "type(".
        if self.text[index] != "@":
            return False
        if _ENTRY_START_RE.match(self.text, index):
            return True
        line_start = self.text.rfind("\n", 0, index) + 1
        return not self.text[line_start:index].strip()

    def _entry(self) -> RawEntry:
        start = self.pos
        self.pos += 1
        self._skip_whitespace()
        match = _ENTRY_TYPE_RE.match(self.text, self.pos)
        if match is None:
            self._fail("expected an entry type after '@'")
        entry_type = match.group()
        self.pos = match.end()

        self._skip_whitespace()
        opener = self._peek()
        if opener not in _DELIMITERS:
            self._fail(f"expected '{{' or '(' after '@{entry_type}'")
        closer = _DELIMITERS[opener]
        self.pos += 1

        kind = entry_type.lower()
        if kind == "comment":
            body = self._delimited_body(opener, closer, start)
            return CommentEntry(body.strip(), self._span(start, self.pos))
        if kind == "preamble":
            self._skip_whitespace()
            value = self._value()
            self._skip_whitespace()
            self._expect(closer)
            return PreambleEntry(value, self._span(start, self.pos))
        if kind == "string":
            self._skip_whitespace()
            variable = self._key_value()
            self._skip_whitespace()
            if self._peek() == ",":
                self.pos += 1
                self._skip_whitespace()
            self._expect(closer)
            return VariableEntry(variable, self._span(start, self.pos))
        return self._bibliography(entry_type, closer, start)

    def _bibliography(self, entry_type: str, closer: str, start: int) -> BibliographyEntry:
        self._skip_whitespace()
        match = _CITATION_KEY_RE.match(self.text, self.pos)
        if match is None:
            self._fail(f"expected a citation key for '@{entry_type}'")
        citation_key = match.group()
        self.pos = match.end()

        tags: list[KeyValue] = []
        while True:
            self._skip_whitespace()
            if self._peek() == closer:
                self.pos += 1
                break
            self._expect(",")
            self._skip_whitespace()
            if self._peek() == closer:
                self.pos += 1
                break
            tags.append(self._key_value())

        return BibliographyEntry(entry_type, citation_key, tuple(tags), self._span(start, self.pos))

    def _delimited_body(self, opener: str, closer: str, start: int) -> str:
        body_start = self.pos
        depth = 1
        while not self._at_end():
            char = self.text[self.pos]
            self.pos += 1
            if char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return self.text[body_start : self.pos - 1]
        raise self._error("unterminated entry, missing closing delimiter", start)

    # ------------------------------------------------------------------- values

    def _key_value(self) -> KeyValue:
        match = _IDENTIFIER_RE.match(self.text, self.pos)
        if match is None:
            self._fail("expected a field name")
        key = match.group()
        self.pos = match.end()
        self._skip_whitespace()
        self._expect("=")
        self._skip_whitespace()
        return KeyValue(key, self._value())

    def _value(self) -> tuple[StringFragment, ...]:
        fragments = [self._fragment()]
        while True:
            self._skip_whitespace()
            if self._peek() != "#":
                return tuple(fragments)
            self.pos += 1
            self._skip_whitespace()
            fragments.append(self._fragment())

    def _fragment(self) -> StringFragment:
        char = self._peek()
        if char == "{":
            start = self.pos
            self.pos += 1
            return StringLiteral(self._braced(start))
        if char == '"':
            return StringLiteral(self._quoted())
        match = _IDENTIFIER_RE.match(self.text, self.pos)
        if match is None:
            self._fail("expected a value")
        token = match.group()
        self.pos = match.end()
        if token.isdigit():
            return StringLiteral(token)
        return Abbreviation(token)

    def _braced(self, start: int) -> str:
        body_start = self.pos
        depth = 1
        while not self._at_end():
            char = self.text[self.pos]
            self.pos += 1
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return self.text[body_start : self.pos - 1]
        raise self._error("unbalanced braces in value", start)

    def _quoted(self) -> str:
        start = self.pos
        self.pos += 1
        body_start = self.pos
        depth = 0
        while not self._at_end():
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    self._fail("unexpected '}' in quoted value")
            elif char == '"' and depth == 0:
                self.pos += 1
                return self.text[body_start : self.pos - 1]
            self.pos += 1
        raise self._error("unterminated quoted value", start)

    # ------------------------------------------------------------------ helpers

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            found = self._peek()
            described = f"'{found}'" if found else "end of input"
            self._fail(f"expected '{char}' but found {described}")
        self.pos += 1

    def _span(self, start: int, end: int) -> Span:
        line_index = bisect_right(self._line_starts, start) - 1
        return Span(
            start=start,
            end=end,
            line=line_index + 1,
            column=start - self._line_starts[line_index] + 1,
        )

    def _error(self, message: str, position: int | None = None) -> BibtexSyntaxError:
        offset = self.pos if position is None else position
        span = self._span(offset, min(offset + 1, len(self.text)))
        return BibtexSyntaxError(message, span=span, context=render_context(self.text, span))

    def _fail(self, message: str) -> NoReturn:
        raise self._error(message)


__all__ = ["parse_entries", "render_context"]

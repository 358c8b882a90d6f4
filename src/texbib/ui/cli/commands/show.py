"""Commands displaying resolved documents and raw entry streams."""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import typer
import yaml

from texbib.core import (
    BibtexError,
    BibtexSyntaxError,
    ConfigError,
    ResolverConfig,
    load_config,
    parse_file,
    raw_parse,
)
from texbib.core.exceptions import exception_hint

from .._options import BibFileArgument, ConfigOption, EncodingOption, FormatOption, OutputFormat
from ..diagnostics import CliEmitter
from ..presenter import print_document_overview, print_raw_entries
from ..state import emit_error


def _load_resolver_config(config_path: Path | None) -> ResolverConfig:
    if config_path is None:
        return ResolverConfig()
    try:
        return load_config(config_path)
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=2) from exc


def _report_failure(exc: BibtexError) -> None:
    emit_error(exception_hint(exc) or "Failed to parse bibliography.", exception=exc)
    if isinstance(exc, BibtexSyntaxError) and exc.context:
        typer.echo(exc.context, err=True)


def _report_unreadable(bibfile: Path, exc: Exception) -> NoReturn:
    emit_error(f"Unable to read '{bibfile}': {exc}", exception=exc)
    raise typer.Exit(code=1) from exc


def show(
    bibfile: BibFileArgument,
    output_format: FormatOption = OutputFormat.TABLE,
    config_path: ConfigOption = None,
    encoding: EncodingOption = None,
) -> None:
    """Parse BIBFILE and display the resolved document."""
    config = _load_resolver_config(config_path)
    try:
        document = parse_file(
            bibfile, encoding=encoding, config=config, emitter=CliEmitter(bibfile)
        )
    except BibtexError as exc:
        _report_failure(exc)
        raise typer.Exit(code=1) from exc
    except (OSError, UnicodeError, LookupError) as exc:
        _report_unreadable(bibfile, exc)

    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
    elif output_format is OutputFormat.YAML:
        typer.echo(yaml.safe_dump(document.to_dict(), sort_keys=False, allow_unicode=True))
    else:
        print_document_overview(document)


def raw(
    bibfile: BibFileArgument,
    encoding: EncodingOption = None,
) -> None:
    """Display the unresolved entries of BIBFILE."""
    try:
        text = bibfile.read_text(encoding=encoding or ResolverConfig().encoding)
    except (OSError, UnicodeError, LookupError) as exc:
        _report_unreadable(bibfile, exc)
    try:
        entries = raw_parse(text)
    except BibtexError as exc:
        exc.source = bibfile
        _report_failure(exc)
        raise typer.Exit(code=1) from exc
    print_raw_entries(entries)


__all__ = ["raw", "show"]

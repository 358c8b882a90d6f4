import json
from pathlib import Path
import textwrap

from typer.testing import CliRunner
import yaml

from texbib.ui.cli import app


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


LIBRARY = """
@comment{sample library}
@string{inst = "MIT"}
@preamble{"Compiled at " # inst}
@techreport{mit-tr-7,
    title = {Sample Report},
    author = {John Example},
    institution = inst,
    month = jun,
}
"""


def test_show_renders_tables(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file)])

    assert result.exit_code == 0, result.output
    assert "Document" in result.stdout
    assert "String Variables" in result.stdout
    assert "Compiled at MIT" in result.stdout
    assert "mit-tr-7 (techreport)" in result.stdout
    assert "Sample Report" in result.stdout
    assert "John Example" in result.stdout
    assert "June" in result.stdout


def test_show_outputs_json(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file), "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["variables"] == {"inst": "MIT"}
    assert payload["comments"] == ["sample library"]
    assert payload["preambles"] == ["Compiled at MIT"]
    assert payload["bibliographies"] == [
        {
            "key": "mit-tr-7",
            "type": "techreport",
            "fields": {
                "title": "Sample Report",
                "author": "John Example",
                "institution": "MIT",
                "month": "June",
            },
        }
    ]


def test_show_outputs_yaml(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file), "-f", "YAML"])

    assert result.exit_code == 0, result.output
    payload = yaml.safe_load(result.stdout)
    assert payload["bibliographies"][0]["fields"]["institution"] == "MIT"


def test_show_applies_config_file(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)
    config = _write(tmp_path, "texbib.yml", "texbib:\n  expand_months: false\n")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file), "--config", str(config)])

    assert result.exit_code == 1
    assert "String variable 'jun' is not defined." in result.output


def test_show_rejects_invalid_config(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)
    config = _write(tmp_path, "texbib.yml", "unknown_option: 1\n")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file), "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_show_reports_undefined_variables(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "broken.bib", "@article{k, journal = jacm}")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file)])

    assert result.exit_code == 1
    assert "error:" in result.output
    assert "'jacm'" in result.output


def test_show_reports_syntax_errors_with_context(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "broken.bib", "@article{k1 title = x}")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file)])

    assert result.exit_code == 1
    assert "line 1, column 13" in result.output
    assert "@article{k1 title = x}" in result.output


def test_raw_lists_unresolved_entries(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)

    runner = CliRunner()
    result = runner.invoke(app, ["raw", str(bib_file)])

    assert result.exit_code == 0, result.output
    assert "Raw Entries" in result.stdout
    assert "string" in result.stdout
    assert "preamble" in result.stdout
    assert "techreport" in result.stdout
    assert "mit-tr-7" in result.stdout


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", str(tmp_path / "absent.bib")])

    assert result.exit_code != 0


def test_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip()


def test_show_reports_undecodable_files(tmp_path: Path) -> None:
    bib_file = tmp_path / "latin.bib"
    bib_file.write_bytes("@misc{k, author = {Jos\xe9}}\n".encode("latin-1"))

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file)])
    assert result.exit_code == 1
    assert "Unable to read" in result.output

    result = runner.invoke(app, ["show", str(bib_file), "--encoding", "latin-1", "-f", "json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["bibliographies"][0]["fields"]["author"] == "Jos\xe9"


def test_verbose_show_prints_a_resolution_summary(tmp_path: Path) -> None:
    bib_file = _write(tmp_path, "library.bib", LIBRARY)

    runner = CliRunner()
    quiet = runner.invoke(app, ["show", str(bib_file), "-f", "json"])
    verbose = runner.invoke(app, ["-v", "show", str(bib_file), "-f", "json"])

    assert quiet.exit_code == 0, quiet.output
    assert "Resolved" not in quiet.output
    assert verbose.exit_code == 0, verbose.output
    assert f"{bib_file}: Resolved 1 string variable" in verbose.output
    assert "Built document (1 bibliographies, 1 preambles, 1 comments)" in verbose.output


def test_redefined_variables_warn_with_the_file_name(tmp_path: Path) -> None:
    bib_file = _write(
        tmp_path,
        "twice.bib",
        """
        @string{inst = "MIT"}
        @string{inst = "CMU"}
        @misc{k, institution = inst}
        """,
    )

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(bib_file), "-f", "json"])

    assert result.exit_code == 0, result.output
    assert (
        f"warning: {bib_file}: String variable 'inst' is defined more than once"
        in result.output
    )
    assert json.loads(result.stdout)["bibliographies"][0]["fields"]["institution"] == "CMU"

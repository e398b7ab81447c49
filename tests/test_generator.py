"""Integration tests for catalog generation and the command line."""

from __future__ import annotations

import io
import json
from pathlib import Path
import subprocess
import sys

import httpx
import pytest

from zigbee_catalog_generator import cli
from zigbee_catalog_generator.collector import CollectionError
from zigbee_catalog_generator.config import DEFAULT_PERMALINK_BASE, CatalogConfig
from zigbee_catalog_generator.generator import build_catalog, run_catalog
from zigbee_catalog_generator.model_types import SourceDocument
from zigbee_catalog_generator.writer import WriteError, write_document

from .fixture_helpers import fixture_dir, read_fixture

_LISTING_URL = "https://api.example.org/contents/devices"


def _section_lines(document: str, heading: str) -> list[str]:
    lines = document.splitlines()
    start = lines.index(f"## {heading}") + 2
    section: list[str] = []
    for line in lines[start:]:
        if not line:
            break
        section.append(line)
    return section


def test_single_file_end_to_end() -> None:
    """A one-line ``lumi.json`` renders one deep-linked bullet under its alias."""
    run = build_catalog(
        [
            SourceDocument(
                file_id="lumi.json",
                source_label="lumi.json",
                content='{"sensor":[{"description":"Motion Sensor"}]}',
            )
        ],
        config=CatalogConfig(),
    )
    assert _section_lines(run.document, "Aqara/Xiaomi") == [
        f"* [Motion Sensor]({DEFAULT_PERMALINK_BASE}/lumi.json#L1)"
    ]
    assert run.document_count == 1


def test_fixture_directory_catalog() -> None:
    """Known and unknown files both render, with the catch-all last."""
    run = run_catalog(config=CatalogConfig(), directory=fixture_dir())
    document = run.document

    assert run.document_count == 3
    assert _section_lines(document, "acme") == [
        f"* [Acme [RGB] Bulb]({DEFAULT_PERMALINK_BASE}/acme.json#L5)"
    ]
    assert _section_lines(document, "Aqara/Xiaomi") == [
        f"* [Motion Sensor]({DEFAULT_PERMALINK_BASE}/lumi.json#L5)",
        f"* [Door and Window Sensor]({DEFAULT_PERMALINK_BASE}/lumi.json#L10)",
        f"* [Wall Switch H1]({DEFAULT_PERMALINK_BASE}/lumi.json#L20)",
    ]
    headings = [line for line in document.splitlines() if line.startswith("## ")]
    assert headings[0] == "## Общие сведения"
    assert headings[-1] == "## ..."
    assert headings.count("## ...") == 1
    assert _section_lines(document, "...") == [
        f"* [Generic Relay]({DEFAULT_PERMALINK_BASE}/other.json#L5)"
    ]
    assert [section.file_id for section in run.sections][-1] == "other.json"


def test_generation_is_idempotent() -> None:
    """Identical inputs render byte-identical documents."""
    first = run_catalog(config=CatalogConfig(), directory=fixture_dir())
    second = run_catalog(config=CatalogConfig(), directory=fixture_dir())
    assert first.document == second.document


def test_empty_document_aborts_run() -> None:
    """An empty category file stops collection."""
    documents = [
        SourceDocument(
            file_id="lumi.json",
            source_label="lumi.json",
            content=read_fixture("lumi.json"),
        ),
        SourceDocument(file_id="empty.json", source_label="empty.json", content="{}"),
    ]
    with pytest.raises(CollectionError, match="empty.json"):
        build_catalog(documents, config=CatalogConfig())


def test_remote_catalog() -> None:
    """Remote collection downloads listed files and renders them."""

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == _LISTING_URL:
            listing = [
                {
                    "type": "file",
                    "name": "hue.json",
                    "download_url": "https://raw.example.org/hue.json",
                }
            ]
            return httpx.Response(200, content=json.dumps(listing).encode("utf-8"))
        return httpx.Response(200, text='{\n"light": [\n{"description": "Hue Go"}\n]\n}')

    config = CatalogConfig(listing_url=_LISTING_URL)
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        run = run_catalog(config=config, client=client)

    assert _section_lines(run.document, "Philips") == [
        f"* [Hue Go]({DEFAULT_PERMALINK_BASE}/hue.json#L3)"
    ]


def test_cli_writes_output_file(tmp_path: Path) -> None:
    """The CLI renders a local directory into the requested file."""
    output = tmp_path / "devs.md"
    exit_code = cli.main(["-d", str(fixture_dir()), "-f", str(output)])
    assert exit_code == cli.EXIT_OK
    expected = run_catalog(config=CatalogConfig(), directory=fixture_dir()).document
    assert output.read_text(encoding="utf-8") == expected


def test_cli_writes_to_console(capsys: pytest.CaptureFixture[str]) -> None:
    """Without ``-f`` the catalog goes to standard output."""
    exit_code = cli.main(["-d", str(fixture_dir())])
    assert exit_code == cli.EXIT_OK
    captured = capsys.readouterr()
    assert captured.out.startswith("# ZigBee: Поддерживаемые устройства")


def test_cli_reports_collection_failure(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Malformed input aborts the run without emitting a catalog."""
    (tmp_path / "bad.json").write_text('{"a":}', encoding="utf-8")
    exit_code = cli.main(["-d", str(tmp_path)])
    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_COLLECTION_FAILED
    assert captured.out == ""
    assert "failed to parse JSON file" in captured.err
    assert "Couldn't collect data." in captured.err


def test_cli_reports_unwritable_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """An output file that cannot be created stops before collection."""
    target = tmp_path / "missing" / "devs.md"
    exit_code = cli.main(["-d", str(tmp_path / "nowhere"), "-f", str(target)])
    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_SETUP_FAILED
    assert f"Couldn't create file {target}" in captured.err
    assert "Couldn't collect data." not in captured.err


def test_cli_failed_run_keeps_existing_output(tmp_path: Path) -> None:
    """A failed collection leaves an earlier catalog at the target untouched."""
    source = tmp_path / "devices"
    source.mkdir()
    (source / "bad.json").write_text('{"a":}', encoding="utf-8")
    output = tmp_path / "devs.md"
    output.write_text("previous catalog\n", encoding="utf-8")

    exit_code = cli.main(["-d", str(source), "-f", str(output)])

    assert exit_code == cli.EXIT_COLLECTION_FAILED
    assert output.read_text(encoding="utf-8") == "previous catalog\n"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["devices", "devs.md"]


def test_cli_replaces_existing_output(tmp_path: Path) -> None:
    """A successful run swaps in the new catalog and leaves no staging file."""
    output = tmp_path / "devs.md"
    output.write_text("previous catalog\n", encoding="utf-8")

    exit_code = cli.main(["-d", str(fixture_dir()), "-f", str(output)])

    assert exit_code == cli.EXIT_OK
    assert output.read_text(encoding="utf-8").startswith("# ZigBee")
    assert [path.name for path in tmp_path.iterdir()] == ["devs.md"]


def test_cli_handles_unpaired_surrogate_escape(tmp_path: Path) -> None:
    """A lone ``\\ud800`` escape in a device name is written as U+FFFD."""
    source = tmp_path / "devices"
    source.mkdir()
    (source / "acme.json").write_text(
        '{"c":[{"description":"Bad \\ud800 name"}]}', encoding="utf-8"
    )
    output = tmp_path / "devs.md"

    exit_code = cli.main(["-d", str(source), "-f", str(output)])

    assert exit_code == cli.EXIT_OK
    assert "* [Bad \ufffd name](" in output.read_text(encoding="utf-8")


def test_unencodable_document_is_a_write_error() -> None:
    """Encoding failures on the output stream surface as ``WriteError``."""
    stream = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    with pytest.raises(WriteError, match="Failed to write catalog"):
        write_document(stream, "# ZigBee: Поддерживаемые устройства\n")


def test_cli_uses_config_file(tmp_path: Path) -> None:
    """Aliases from a config file rename sections."""
    config_path = tmp_path / "catalog.yaml"
    config_path.write_text("file_aliases:\n  acme.json: ACME Corp\n", encoding="utf-8")
    output = tmp_path / "devs.md"
    exit_code = cli.main(["-c", str(config_path), "-d", str(fixture_dir()), "-f", str(output)])
    assert exit_code == cli.EXIT_OK
    document = output.read_text(encoding="utf-8")
    assert "## ACME Corp" in document
    assert "## Aqara/Xiaomi" not in document
    assert "## lumi" in document


def test_cli_invalid_option_exits_with_usage(capsys: pytest.CaptureFixture[str]) -> None:
    """Unknown options print usage to standard error and exit with code 3."""
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-x"])
    assert excinfo.value.code == cli.EXIT_USAGE
    captured = capsys.readouterr()
    assert "usage:" in captured.err.lower()


def test_cli_help_screen() -> None:
    """Running the CLI help should succeed and print usage information."""
    result = subprocess.run(
        [sys.executable, "-m", "zigbee_catalog_generator", "-h"],
        check=False,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()

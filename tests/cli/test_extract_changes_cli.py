from __future__ import annotations

import json
from pathlib import Path
import time

import pytest

from redline.cli import extract_changes as cli
from redline.extraction.parser import DocxRedlineParser


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("REDLINE_LOG_LEVEL", "REDLINE_DOCUMENT_TIMEOUT_SECONDS", "REDLINE_MAX_CONCURRENCY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)


def _use_converter(monkeypatch, converter) -> None:
    monkeypatch.setattr(cli, "DocxRedlineParser", lambda: DocxRedlineParser(text_converter=converter))


def test_cli_reports_changes_for_each_docx_in_directory(
    tmp_path: Path, monkeypatch, capsys, docx_factory, document_xml
) -> None:
    _use_converter(monkeypatch, lambda _data: "Rent is due weekly")
    (tmp_path / "b.docx").write_bytes(
        docx_factory(document_xml('<w:p><w:ins w:author="Bob"><w:r><w:t>weekly</w:t></w:r></w:ins></w:p>'))
    )
    (tmp_path / "a.docx").write_bytes(docx_factory(None))
    (tmp_path / "~$b.docx").write_bytes(b"lock file")
    (tmp_path / "notes.txt").write_text("[Added: ignored]", encoding="utf-8")

    exit_code = cli.main(["--path", str(tmp_path), "--include-content"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["processed"] == 2
    assert payload["errors"] == []
    first, second = payload["results"]
    assert first["source_path"].endswith("a.docx")
    assert first["extraction_path"] == "empty"
    assert first["changes"] == []
    assert second["extraction_path"] == "structured"
    assert second["metadata"]["authors"] == ["Bob"]
    assert second["metadata"]["word_count"] == 4
    assert second["content"] == "Rent is due weekly"
    [change] = second["changes"]
    assert change["kind"] == "added"
    assert change["text"] == "weekly"
    assert change["location"]["approximate"] is True


def test_cli_collects_conversion_failures_as_errors(tmp_path: Path, monkeypatch, capsys) -> None:
    def _fail(_data: bytes) -> str:
        raise ValueError("unreadable")

    _use_converter(monkeypatch, _fail)
    source = tmp_path / "broken.docx"
    source.write_bytes(b"junk")

    exit_code = cli.main(["--path", str(source)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["processed"] == 0
    assert payload["errors"][0]["source_path"] == str(source)
    assert "broken.docx" in payload["errors"][0]["error"]


def test_cli_treats_timeout_as_document_failure(tmp_path: Path, monkeypatch, capsys) -> None:
    def _slow(_data: bytes) -> str:
        time.sleep(0.5)
        return "late"

    _use_converter(monkeypatch, _slow)
    source = tmp_path / "slow.docx"
    source.write_bytes(b"whatever")

    exit_code = cli.main(["--path", str(source), "--timeout", "0.05"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["errors"][0]["error"].startswith("Timed out")


def test_cli_rejects_invalid_configuration(tmp_path: Path, monkeypatch, capsys, caplog) -> None:
    monkeypatch.setenv("REDLINE_MAX_CONCURRENCY", "zero")

    exit_code = cli.main(["--path", str(tmp_path)])

    assert exit_code == 1
    assert capsys.readouterr().out == ""
    assert "Configuration error" in caplog.text


def test_cli_with_missing_path_processes_nothing(tmp_path: Path, capsys) -> None:
    exit_code = cli.main(["--path", str(tmp_path / "absent.docx")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["processed"] == 0
    assert payload["results"] == []

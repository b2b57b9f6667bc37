"""Unit tests for CLI command handling."""

from __future__ import annotations

import pytest

from cli.main import main
from store.key_codec import raw_cid_for


@pytest.fixture(autouse=True)
def _default_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ZIPCAR_COMPRESSION_LEVEL", raising=False)
    monkeypatch.delenv("ZIPCAR_ATOMIC_REWRITE", raising=False)
    monkeypatch.delenv("ZIPCAR_LOG_LEVEL", raising=False)


def test_cli_put_prints_raw_cid(tmp_path, capsys) -> None:
    """CLI put should print the CID the file was stored under."""
    source_path = tmp_path / "input.bin"
    source_path.write_bytes(b"random meaningless bytes")

    exit_code = main([str(tmp_path / "a.zcar"), "put", str(source_path)])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0
    assert output == "bafkreihwkf6mtnjobdqrkiksr7qhp6tiiqywux64aylunbvmfhzeql2coa"


def test_cli_has_size_get_after_put(tmp_path, capsys) -> None:
    """Stored files should be visible to later commands."""
    archive = str(tmp_path / "a.zcar")
    source_path = tmp_path / "input.bin"
    source_path.write_bytes(b"aaaa")
    cid = str(raw_cid_for(b"aaaa"))
    output_path = tmp_path / "out.bin"
    main([archive, "put", str(source_path)])
    capsys.readouterr()

    has_code = main([archive, "has", cid])
    size_code = main([archive, "size", cid])
    get_code = main([archive, "get", cid, "--output", str(output_path)])
    lines = capsys.readouterr().out.split()

    assert (has_code, size_code, get_code) == (0, 0, 0)
    assert lines == ["true", "4"] and output_path.read_bytes() == b"aaaa"


def test_cli_rm_then_has_reports_missing(tmp_path, capsys) -> None:
    """Removed records should report false with exit code 1."""
    archive = str(tmp_path / "a.zcar")
    source_path = tmp_path / "input.bin"
    source_path.write_bytes(b"aaaa")
    cid = str(raw_cid_for(b"aaaa"))
    main([archive, "put", str(source_path)])

    rm_code = main([archive, "rm", cid])
    has_code = main([archive, "has", cid])

    assert rm_code == 0 and has_code == 1
    assert capsys.readouterr().out.split()[-1] == "false"


def test_cli_get_missing_exits_with_not_found(tmp_path, capsys) -> None:
    """Missing records should exit 1 with a stderr message."""
    exit_code = main([str(tmp_path / "a.zcar"), "get", str(raw_cid_for(b"missing"))])

    assert exit_code == 1 and "not found" in capsys.readouterr().err


def test_cli_invalid_cid_exits_with_error(tmp_path, capsys) -> None:
    """Unparseable CIDs should exit 2."""
    exit_code = main([str(tmp_path / "a.zcar"), "size", "not-a-cid"])

    assert exit_code == 2 and "zipcar:" in capsys.readouterr().err


def test_cli_writes_log_events_to_stderr(tmp_path, capsys) -> None:
    """CLI runs should keep stdout for command output only."""
    source_path = tmp_path / "input.bin"
    source_path.write_bytes(b"aaaa")

    main([str(tmp_path / "a.zcar"), "put", str(source_path)])
    captured = capsys.readouterr()

    assert captured.out.strip() == str(raw_cid_for(b"aaaa"))
    assert "datastore_opened" in captured.err

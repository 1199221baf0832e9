from __future__ import annotations

from pathlib import Path

import pytest

from byteseek.cli import build_parser, load_config, main


def make_log(tmp_path: Path) -> Path:
    p = tmp_path / "app.log"
    p.write_bytes(b"HEADER v1\nok\nERROR disk\nok\nERROR net\nFOOTER done")
    return p


def test_head_and_tail(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = make_log(tmp_path)
    assert main(["head", str(p)]) == 0
    assert "HEADER v1" in capsys.readouterr().out
    assert main(["tail", str(p)]) == 0
    assert "FOOTER done" in capsys.readouterr().out


def test_find_and_rfind(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = make_log(tmp_path)
    data = p.read_bytes()
    assert main(["find", str(p), "ERROR"]) == 0
    assert str(data.index(b"ERROR")) in capsys.readouterr().out
    assert main(["rfind", str(p), "ERROR"]) == 0
    assert str(data.rindex(b"ERROR")) in capsys.readouterr().out
    assert main(["find", str(p), "4552524f52", "--hex", "--from", "20"]) == 0
    assert str(data.rindex(b"ERROR")) in capsys.readouterr().out


def test_no_match_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = make_log(tmp_path)
    assert main(["find", str(p), "PANIC"]) == 1
    assert "no match" in capsys.readouterr().out


def test_read_range(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "c.txt"
    p.write_bytes(b"test-content")
    assert main(["read", str(p), "5", "7"]) == 0
    assert "content" in capsys.readouterr().out
    assert main(["read", str(p), "0x0", "2", "--hex"]) == 0
    assert "74 65" in capsys.readouterr().out


def test_delimiter_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "semi.txt"
    p.write_bytes(b"first;second;third")
    assert main(["--delimiter", ";", "tail", str(p)]) == 0
    assert "third" in capsys.readouterr().out


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["head", str(tmp_path / "nope.log")]) == 2
    assert "file not found" in capsys.readouterr().err


def test_bad_pattern_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = make_log(tmp_path)
    assert main(["find", str(p), "zz", "--hex"]) == 1
    assert "byteseek:" in capsys.readouterr().err


def test_config_file_and_overrides(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("chunk_size: 2048\nencoding: latin-1\n", encoding="utf-8")
    args = build_parser().parse_args(
        ["--config", str(cfg_path), "--chunk-size", "512", "head", "x"]
    )
    cfg = load_config(args)
    assert cfg.chunk_size == 512
    assert cfg.encoding == "latin-1"

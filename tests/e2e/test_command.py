"""``fastdoc`` 커맨드 실행 테스트."""
import json
from pathlib import Path

import pytest

from fastdoc.command import FastDocCommandParser


def write_json(path: Path, doc) -> str:
    path.write_text(json.dumps(doc), encoding="utf8")
    return str(path)


@pytest.fixture
def parser() -> FastDocCommandParser:
    return FastDocCommandParser()


def test_diff(parser: FastDocCommandParser, tmp_path: Path, capsys):
    old = write_json(tmp_path / "old.json", {"name": "Ann", "tags": ["a"]})
    new = write_json(tmp_path / "new.json", {"name": "Annie", "tags": ["a", "b"], "age": 3})

    assert parser.parse_args(["diff", old, new]) == 1

    out = capsys.readouterr().out
    assert "FIELD_CHANGED" in out
    assert "Ann (String) -> Annie (String)" in out
    assert "ARRAY_VALUE_ADDED" in out
    assert "NEW_FIELD" in out


def test_diff_without_changes(parser: FastDocCommandParser, tmp_path: Path, capsys):
    old = write_json(tmp_path / "old.json", {"price": 1})
    new = write_json(tmp_path / "new.json", {"price": 1.0})

    assert parser.parse_args(["diff", old, new]) == 0
    assert "no changes" in capsys.readouterr().out


def test_diff_metadata(parser: FastDocCommandParser, tmp_path: Path, capsys):
    old = write_json(tmp_path / "old.json", {"name": "Ann", "@metadata": {}})
    new = write_json(
        tmp_path / "new.json", {"name": "Ann", "@metadata": {"@read-only": True}}
    )

    assert parser.parse_args(["diff", old, new]) == 0
    capsys.readouterr()

    assert parser.parse_args(["diff", old, new, "--metadata"]) == 1
    assert "@metadata.@read-only" in capsys.readouterr().out


def test_diff_missing_file(parser: FastDocCommandParser, tmp_path: Path, capsys):
    new = write_json(tmp_path / "new.json", {})

    assert parser.parse_args(["diff", str(tmp_path / "nope.json"), new]) == 2
    assert "file not found" in capsys.readouterr().err


def test_diff_invalid_document(parser: FastDocCommandParser, tmp_path: Path, capsys):
    old = write_json(tmp_path / "old.json", [1, 2])
    new = write_json(tmp_path / "new.json", {})

    assert parser.parse_args(["diff", old, new]) == 2
    assert "should be an object" in capsys.readouterr().err


def test_info(parser: FastDocCommandParser, capsys):
    assert parser.parse_args(["info"]) == 0
    out = capsys.readouterr().out
    assert "use_optimistic_concurrency" in out
    assert "max_number_of_requests_per_session" in out


def test_no_args_prints_help(parser: FastDocCommandParser, capsys):
    assert parser.parse_args([]) == 0
    assert "fastdoc" in capsys.readouterr().out

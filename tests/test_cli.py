"""Tests for cli/inspect.py, utils/output.py and utils/logging.py."""

import json
import logging

import pytest
from pydantic import BaseModel

from mdquery.cli.inspect import build_parser, main
from mdquery.utils.logging import LOG_LEVEL_ENV, setup_logging
from mdquery.utils.output import output

from conftest import write_tree


class TestParser:
    def test_list_defaults(self):
        args = build_parser().parse_args(["list", "docs"])
        assert args.command == "list"
        assert args.root == "docs"
        assert args.glob == []
        assert args.concurrency == 0
        assert not args.json

    def test_match_files_and_globs(self):
        args = build_parser().parse_args(
            ["match", "docs", "a.ts", "b.ts", "--glob", "ui/**/*.md", "--glob", "!ui/old/**"]
        )
        assert args.files == ["a.ts", "b.ts"]
        assert args.glob == ["ui/**/*.md", "!ui/old/**"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    def test_list_json(self, patterns_root, quiet_output, capsys):
        assert main(["list", str(patterns_root), "--json"]) == 0
        listed = json.loads(capsys.readouterr().out)
        assert [item["id"] for item in listed] == [
            "complex/with-query",
            "complex/with-status",
            "nested/level1",
            "nested/level1/pattern1",
            "simple/basic",
        ]
        assert listed[2] == {
            "id": "nested/level1",
            "type": None,
            "file": "nested/level1/level1.md",
            "query": {"never": True},
        }

    def test_list_table(self, patterns_root, quiet_output, capsys):
        assert main(["--quiet", "list", str(patterns_root)]) == 0
        assert "Entries in" in capsys.readouterr().out

    def test_list_with_glob(self, patterns_root, quiet_output, capsys):
        assert main(["list", str(patterns_root), "--json", "--glob", "simple/**/*.md"]) == 0
        assert [item["id"] for item in json.loads(capsys.readouterr().out)] == ["simple/basic"]

    def test_schema(self, patterns_root, quiet_output, capsys):
        assert main(["schema", str(patterns_root)]) == 0
        schema = json.loads(capsys.readouterr().out)
        assert "query" in schema["properties"]

    def test_match(self, patterns_root, tmp_path, quiet_output, capsys):
        src = write_tree(tmp_path / "src", {
            "button.tsx": "export const button = 1;\n",
            "form.tsx": "export const component = 2;\n",
        })
        argv = [
            "match", str(patterns_root),
            str(src / "button.tsx"), str(src / "form.tsx"),
            "--base", str(tmp_path), "--json",
        ]
        assert main(argv) == 0
        assert json.loads(capsys.readouterr().out) == [
            "complex/with-query",
            "complex/with-status",
            "simple/basic",
        ]

    def test_load_error_exit_code(self, tmp_path, quiet_output, capsys):
        write_tree(tmp_path, {"bad.md": "---\nquery:\n  and: []\n---\n"})
        assert main(["list", str(tmp_path)]) == 1
        assert "Failed to parse config for bad.md" in capsys.readouterr().out

    def test_match_missing_file_exit_code(self, patterns_root, tmp_path, quiet_output, capsys):
        missing = tmp_path / "missing.tsx"
        assert main(["match", str(patterns_root), str(missing), "--base", str(tmp_path)]) == 1
        assert "No such file" in capsys.readouterr().out

    def test_match_file_outside_base_exit_code(self, patterns_root, tmp_path, quiet_output):
        outside = write_tree(tmp_path / "elsewhere", {"a.tsx": "button"}) / "a.tsx"
        base = tmp_path / "src"
        base.mkdir()
        assert main(["match", str(patterns_root), str(outside), "--base", str(base)]) == 1


class TestSetupLogging:
    def test_verbose_level(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert setup_logging(verbose=True).level == logging.INFO
        assert setup_logging(verbose=False).level == logging.WARNING

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert setup_logging().level == logging.DEBUG

    def test_invalid_env_level(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
        with pytest.raises(ValueError):
            setup_logging()


class Range(BaseModel):
    low: int
    high: int = 10


class TestOutput:
    def test_print_json_dumps_models(self, quiet_output, capsys):
        output.print_json([{"id": "a", "query": {"length": Range(low=1)}}])
        assert json.loads(capsys.readouterr().out) == [
            {"id": "a", "query": {"length": {"low": 1, "high": 10}}}
        ]

    def test_status_suppressed_when_quiet(self, quiet_output, capsys):
        output.configure(quiet=True)
        output.status("loading")
        assert capsys.readouterr().out == ""

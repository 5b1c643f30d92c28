"""Tests for main.py: argument handling and the stdin loop."""

import io
import os
import unittest
from unittest import mock

import pytest

from main import build_parser, config_from_args, run
from structy.config import Config


@pytest.mark.usefixtures("clean_env")
class TestConfigFromArgs(unittest.TestCase):
    def _config(self, *argv: str) -> Config:
        return config_from_args(build_parser().parse_args(list(argv)))

    def test_defaults(self):
        self.assertEqual(self._config(), Config())

    def test_short_flags(self):
        cfg = self._config("-n", "-l", "-d", "2", "-t", "ts", "-H", "user", "id")
        self.assertEqual(
            cfg,
            Config(
                disable_colors=True,
                disable_level=True,
                parse_depth=2,
                timestamp_field="ts",
                highlight_fields=frozenset({"user", "id"}),
            ),
        )

    def test_long_flags(self):
        cfg = self._config("--no-colors", "--parse-depth", "3", "--highlight-props", "a")
        self.assertTrue(cfg.disable_colors)
        self.assertEqual(cfg.parse_depth, 3)
        self.assertEqual(cfg.highlight_fields, frozenset({"a"}))

    def test_cli_depth_overrides_invalid_env_depth(self):
        for bad in ("0", "deep"):
            with mock.patch.dict(os.environ, {"STRUCTY_PARSE_DEPTH": bad}):
                self.assertEqual(self._config("-d", "2").parse_depth, 2)
                with self.assertRaises(ValueError):
                    self._config()

    def test_zero_depth_rejected(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["-d", "0"])

    def test_non_numeric_depth_rejected(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["-d", "deep"])


class TestRun(unittest.TestCase):
    def _run(self, text: str, config: Config | None = None) -> str:
        stdout = io.StringIO()
        code = run(config or Config(disable_colors=True), io.StringIO(text), stdout)
        self.assertEqual(code, 0)
        return stdout.getvalue()

    def test_formats_each_line(self):
        out = self._run('{"a": 17}\nb=2 a=1\n')
        self.assertEqual(out, "a=17\na=1 b=2\n")

    def test_unparseable_line_echoed(self):
        out = self._run('plain text line\n{"a": 1}\n')
        self.assertEqual(out, "plain text line\na=1\n")

    def test_crlf_stripped(self):
        self.assertEqual(self._run('{"a": 1}\r\n'), "a=1\n")

    def test_last_line_without_newline(self):
        self.assertEqual(self._run("a=1"), "a=1\n")

    def test_empty_input(self):
        self.assertEqual(self._run(""), "")

    def test_blank_line_kept(self):
        self.assertEqual(self._run("\n"), "\n")

    def test_too_deep_line_echoed_and_stream_continues(self):
        deep = "[" * 100000 + "]" * 100000
        out = self._run(deep + "\n" + '{"a": 1}\n')
        self.assertEqual(out, deep + "\na=1\n")


if __name__ == "__main__":
    unittest.main()

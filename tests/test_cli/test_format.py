"""Tests for CLI formatting utilities."""

import json

from forking_paths.cli._format import (
    SCHEMA_VERSION,
    format_coordinate,
    format_table,
    json_envelope,
    print_json,
    print_lines,
)


class TestFormatCoordinate:
    def test_none(self):
        assert format_coordinate(None) == "—"

    def test_whole_number(self):
        assert format_coordinate(400.0) == "400"

    def test_fraction(self):
        assert format_coordinate(210.5) == "210.5"

    def test_negative(self):
        assert format_coordinate(-150.0) == "-150"

    def test_zero(self):
        assert format_coordinate(0.0) == "0"


class TestFormatTable:
    def test_empty_rows(self):
        assert format_table(["Node", "X"], []) == []

    def test_alignment(self):
        lines = format_table(["Node", "X"], [["root", "400"], ["alt", "1000"]])
        assert lines[0] == "  Node  X   "
        assert lines[2] == "  root   400"
        assert lines[3] == "  alt   1000"


class TestJsonEnvelope:
    def test_shape(self):
        envelope = json_envelope("layout", {"a": 1})
        assert envelope["schema_version"] == SCHEMA_VERSION
        assert envelope["command"] == "layout"
        assert envelope["data"] == {"a": 1}
        assert "generated_at" in envelope

    def test_print_to_file(self, tmp_path, capsys):
        target = tmp_path / "out.json"
        print_json("scene", {"nodes": []}, str(target))
        assert "Wrote scene output" in capsys.readouterr().out
        assert json.loads(target.read_text())["data"] == {"nodes": []}


class TestPrintLines:
    def test_truncates(self, capsys):
        print_lines([str(i) for i in range(5)], max_lines=2)
        out = capsys.readouterr().out
        assert out.startswith("0\n1\n")
        assert "3 more lines" in out

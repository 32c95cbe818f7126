"""Tests for the print/convert commands and the hmap CLI."""

import os

import pytest

from tools.hmap.__main__ import main as hmap_main
from tools.hmap.commands import (
    HeaderMapFileFormat,
    convert,
    convert_file,
    print_file,
    print_header_map,
    resolve_format,
)
from tools.hmap.entry import Entry
from tools.hmap.errors import CannotOpenFile, SameFormat, UnknownFormat
from tools.hmap.headermap import decode, encode
from tools.hmap.interchange import load_json, load_yaml


SIMPLE = [Entry("D", "E", "F"), Entry("A", "B", "C")]


# -- Format resolution --

class TestResolveFormat:
    @pytest.mark.parametrize("path,fmt", [
        ("build/Foo.hmap", HeaderMapFileFormat.HMAP),
        ("Foo.json", HeaderMapFileFormat.JSON),
        ("Foo.yaml", HeaderMapFileFormat.YAML),
        ("Foo.yml", HeaderMapFileFormat.YAML),
        ("FOO.HMAP", HeaderMapFileFormat.HMAP),
    ])
    def test_known_extensions(self, path, fmt):
        assert resolve_format(path) == fmt

    def test_unknown_extension(self):
        with pytest.raises(UnknownFormat) as exc:
            resolve_format("Foo.txt")
        assert exc.value.path == "Foo.txt"

    def test_no_extension(self):
        with pytest.raises(UnknownFormat):
            resolve_format("hmap")


# -- Print --

class TestPrint:
    def test_sorted_lines(self):
        assert print_header_map(encode(SIMPLE)) == "A -> BC\nD -> EF"

    def test_empty_map(self):
        assert print_header_map(encode([])) == ""

    def test_real_paths(self, sample_hmap):
        lines = print_header_map(sample_hmap).split("\n")
        assert lines[0] == "A -> BC"
        assert "Foo/Foo.h -> /Users/dev/Source/Foo/Foo.h" in lines
        assert len(lines) == 4


# -- Convert --

class TestConvert:
    def test_hmap_to_json(self):
        out = convert(encode(SIMPLE), HeaderMapFileFormat.HMAP, HeaderMapFileFormat.JSON)
        assert set(load_json(out)) == set(SIMPLE)

    def test_json_to_hmap(self, sample_json):
        out = convert(sample_json.encode("utf-8"),
                      HeaderMapFileFormat.JSON, HeaderMapFileFormat.HMAP)
        assert set(decode(out)) == {Entry("A", "B", "C"), Entry("D", "E", "F")}

    def test_hmap_to_yaml(self, sample_hmap, sample_entries):
        out = convert(sample_hmap, HeaderMapFileFormat.HMAP, HeaderMapFileFormat.YAML)
        assert set(load_yaml(out)) == set(sample_entries)

    def test_yaml_to_json(self, sample_yaml):
        out = convert(sample_yaml.encode("utf-8"),
                      HeaderMapFileFormat.YAML, HeaderMapFileFormat.JSON)
        assert set(load_json(out)) == {Entry("A", "B", "C"), Entry("D", "E", "F")}

    def test_same_format(self):
        with pytest.raises(SameFormat):
            convert(b"", HeaderMapFileFormat.JSON, HeaderMapFileFormat.JSON)


# -- File wrappers --

class TestFiles:
    def test_convert_file_round_trip(self, tmp_path, sample_hmap, sample_entries):
        src = tmp_path / "in.hmap"
        src.write_bytes(sample_hmap)
        json_path = tmp_path / "out.json"
        back = tmp_path / "back.hmap"

        convert_file(str(src), str(json_path))
        convert_file(str(json_path), str(back))

        assert set(decode(back.read_bytes())) == set(sample_entries)

    def test_convert_file_replaces_existing(self, tmp_path, sample_json):
        src = tmp_path / "in.json"
        src.write_text(sample_json)
        dest = tmp_path / "out.hmap"
        dest.write_bytes(b"stale")

        convert_file(str(src), str(dest))

        assert len(decode(dest.read_bytes())) == 2
        assert sorted(os.listdir(tmp_path)) == ["in.json", "out.hmap"]

    def test_convert_file_same_format(self, tmp_path):
        with pytest.raises(SameFormat):
            convert_file(str(tmp_path / "a.json"), str(tmp_path / "b.json"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(CannotOpenFile):
            print_file(str(tmp_path / "missing.hmap"))

    def test_print_file(self, tmp_path):
        path = tmp_path / "map.hmap"
        path.write_bytes(encode(SIMPLE))
        assert print_file(str(path)) == "A -> BC\nD -> EF"


# -- CLI --

class TestCli:
    def test_print(self, tmp_path, capsys):
        path = tmp_path / "map.hmap"
        path.write_bytes(encode(SIMPLE))

        assert hmap_main(["print", str(path)]) == 0

        assert capsys.readouterr().out == "A -> BC\nD -> EF\n"

    def test_print_empty(self, tmp_path, capsys):
        path = tmp_path / "empty.hmap"
        path.write_bytes(encode([]))

        assert hmap_main(["print", str(path)]) == 0

        assert capsys.readouterr().out == "Empty header map\n"

    def test_print_several_files(self, tmp_path, capsys):
        a = tmp_path / "a.hmap"
        b = tmp_path / "b.hmap"
        a.write_bytes(encode([Entry("A", "B", "C")]))
        b.write_bytes(encode([]))

        assert hmap_main(["print", str(a), str(b)]) == 0

        out = capsys.readouterr().out
        assert out == f"{a}:\nA -> BC\n\n{b}:\nEmpty header map\n\n"

    def test_convert(self, tmp_path, capsys, sample_json):
        src = tmp_path / "map.json"
        src.write_text(sample_json)
        dest = tmp_path / "map.hmap"

        assert hmap_main(["convert", str(src), str(dest)]) == 0

        assert f"wrote {dest}" in capsys.readouterr().out
        assert len(decode(dest.read_bytes())) == 2

    def test_invalid_file_reports_error(self, tmp_path, capsys):
        path = tmp_path / "bad.hmap"
        path.write_bytes(b"\x00" * 32)

        assert hmap_main(["print", str(path)]) == 1

        captured = capsys.readouterr()
        assert captured.err.startswith("Error: File magic is unknown")

    def test_unknown_format_reports_error(self, tmp_path, capsys):
        assert hmap_main(["convert", str(tmp_path / "a.txt"), str(tmp_path / "b.hmap")]) == 1
        assert "could not be determined" in capsys.readouterr().err

    def test_strict_flag(self, tmp_path, capsys):
        data = bytearray(encode([Entry("A", "B", "C")]))
        # Point the last string offset past the end of the buffer.
        data[-2:] = b"\xff\xff"
        path = tmp_path / "corrupt.hmap"
        path.write_bytes(bytes(data))

        assert hmap_main(["print", str(path)]) == 0
        assert capsys.readouterr().out == "Empty header map\n"

        assert hmap_main(["print", "--strict", str(path)]) == 1
        assert "bucket 1" in capsys.readouterr().err

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            hmap_main([])

    def test_unwritable_destination_reports_error(self, tmp_path, capsys, sample_json):
        src = tmp_path / "map.json"
        src.write_text(sample_json)
        dest = tmp_path / "out.hmap"
        dest.mkdir()

        assert hmap_main(["convert", str(src), str(dest)]) == 1

        assert capsys.readouterr().err.startswith(f"Error: Cannot open file at path {dest}")
        assert dest.is_dir()
        assert sorted(os.listdir(tmp_path)) == ["map.json", "out.hmap"]

    def test_unencodable_string_reports_error(self, tmp_path, capsys):
        src = tmp_path / "map.yaml"
        src.write_text('A: {prefix: "\\ud800", suffix: C}\n')
        dest = tmp_path / "map.json"

        assert hmap_main(["convert", str(src), str(dest)]) == 1

        assert capsys.readouterr().err.startswith("Error: ")
        assert not dest.exists()

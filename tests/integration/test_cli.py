"""Integration tests for the gfxinject command line."""

import json

import pytest

from gfxinject.cli import main

PROJECT = """
name = "cli"
target = "out.gba"
system = "gba"
format = "GBA-4BPP"
palette_format = "RGB555"
palette_size = 16

[[image]]
name = "title"
filename = "title.png"
graphic = 0x40
palette = 0x80
target = 0x100
"""


@pytest.fixture
def project_setup(make_bitmap, make_rom, write_project):
    make_bitmap("title.png")
    return write_project(PROJECT), make_rom(0x1000)


class TestArguments:
    def test_no_arguments_exits_1(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])

        assert excinfo.value.code == 1
        assert "usage:" in capsys.readouterr().err

    def test_one_argument_exits_1(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["project.toml"])

        assert excinfo.value.code == 1


class TestRun:
    def test_success_writes_project_target(self, project_setup, tmp_path, capsys):
        project_path, rom_path = project_setup

        assert main([str(project_path), str(rom_path)]) == 0

        output = tmp_path / "out.gba"
        assert output.exists()
        assert len(output.read_bytes()) == 0x1000
        out = capsys.readouterr().out
        assert "Wrote modified ROM to:" in out
        assert "Done!" in out

    def test_output_override(self, project_setup, tmp_path):
        project_path, rom_path = project_setup
        other = tmp_path / "hack.gba"

        assert main([str(project_path), str(rom_path), "-o", str(other)]) == 0

        assert other.exists()
        assert not (tmp_path / "out.gba").exists()

    def test_trace_io_writes_trace(self, project_setup, tmp_path):
        project_path, rom_path = project_setup

        assert main([str(project_path), str(rom_path), "--trace-io"]) == 0

        trace = json.loads((tmp_path / "write_trace.json").read_text())
        assert len(trace["entries"]) == 3
        assert trace["entries"][0]["annotation"] == "title graphic data"

    def test_verbose_prints_stats(self, project_setup, capsys):
        project_path, rom_path = project_setup

        assert main([str(project_path), str(rom_path), "-v"]) == 0

        out = capsys.readouterr().out
        assert "Per-image statistics:" in out
        assert "title: 2 tiles, 4 colors" in out


class TestErrors:
    def test_syntax_error_reports_position(self, write_project, make_rom, capsys):
        project_path = write_project('name = "broken"\ntarget = \n')
        rom_path = make_rom()

        assert main([str(project_path), str(rom_path)]) == 1

        out = capsys.readouterr().out
        assert "Error parsing" in out
        assert "\n2:" in out

    def test_missing_project_file(self, make_rom, tmp_path, capsys):
        rom_path = make_rom()

        assert main([str(tmp_path / "missing.toml"), str(rom_path)]) == 1
        assert "project file not found" in capsys.readouterr().out

    def test_invalid_project(self, write_project, make_rom, capsys):
        project_path = write_project('name = "no target"\n')

        assert main([str(project_path), str(make_rom())]) == 1
        assert "missing required key 'target'" in capsys.readouterr().out

    def test_missing_rom(self, project_setup, tmp_path, capsys):
        project_path, _ = project_setup

        assert main([str(project_path), str(tmp_path / "missing.gba")]) == 1
        assert "ROM file not found" in capsys.readouterr().out
        assert not (tmp_path / "out.gba").exists()

    def test_unreadable_rom_names_rom_path(self, project_setup, tmp_path, capsys):
        project_path, _ = project_setup
        rom_dir = tmp_path / "rom_dir"
        rom_dir.mkdir()

        assert main([str(project_path), str(rom_dir)]) == 1

        out = capsys.readouterr().out
        assert f"Error: {rom_dir}:" in out
        assert "out.gba" not in out.splitlines()[-1]

    def test_missing_bitmap(self, write_project, make_rom, tmp_path, capsys):
        project_path = write_project(PROJECT.replace("title.png", "missing.png"))

        assert main([str(project_path), str(make_rom())]) == 1
        assert "file not found" in capsys.readouterr().out

    def test_palette_overflow(self, make_bitmap, write_project, make_rom, capsys):
        make_bitmap("title.png")
        project_path = write_project(PROJECT.replace("palette_size = 16", "palette_size = 2"))

        assert main([str(project_path), str(make_rom())]) == 1
        assert "Palette full" in capsys.readouterr().out

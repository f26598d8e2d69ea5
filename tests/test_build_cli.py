"""Tests for picross.levels.build – the picross-levels command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from picross.levels.build import main

LEVEL_TEXT = '{\n  "name": "1",\n  "description": "dot",\n  "content": [[1]]\n}'
LEGACY_TEXT = "title Bar\nwidth 2\nheight 1\ngoal [11]\n"


@pytest.fixture()
def levels_dir(tmp_path: Path) -> Path:
    d = tmp_path / "levels"
    d.mkdir()
    (d / "1.json").write_text(LEVEL_TEXT, encoding="utf-8")
    return d


class TestCommands:
    def test_concat(self, levels_dir: Path):
        assert main(["concat", str(levels_dir)]) == 0
        bundle = json.loads((levels_dir / "levels.json").read_text(encoding="utf-8"))
        assert bundle == [json.loads(LEVEL_TEXT)]

    def test_insert_uuid(self, levels_dir: Path, capsys):
        assert main(["insert-uuid", str(levels_dir)]) == 0
        assert "uuid" in json.loads((levels_dir / "1.json").read_text(encoding="utf-8"))
        assert "Tagged 1 of 1" in capsys.readouterr().out

    def test_convert(self, tmp_path: Path):
        src = tmp_path / "a.non"
        src.write_text(LEGACY_TEXT, encoding="utf-8")
        out = tmp_path / "converted"
        assert main(["convert", str(src), "--output", str(out), "--start", "20"]) == 0
        assert json.loads((out / "20.json").read_text(encoding="utf-8"))["content"] == [[1, 1]]

    def test_build_pipeline(self, levels_dir: Path, tmp_path: Path):
        legacy = tmp_path / "legacy"
        legacy.mkdir()
        (legacy / "x.non").write_text(LEGACY_TEXT, encoding="utf-8")

        assert main(["build", str(levels_dir), "--legacy", str(legacy)]) == 0

        bundle = json.loads((levels_dir / "levels.json").read_text(encoding="utf-8"))
        assert sorted(level["name"] for level in bundle) == ["1", "5"]
        assert all("uuid" in level for level in bundle)

    def test_config_file(self, levels_dir: Path, tmp_path: Path):
        config = tmp_path / "picross.yaml"
        config.write_text(f"levels_dir: {levels_dir.as_posix()}\nbundle_name: all.json\n", encoding="utf-8")
        assert main(["--config", str(config), "concat"]) == 0
        assert (levels_dir / "all.json").exists()


class TestFailures:
    def test_bad_level_exit_code(self, levels_dir: Path, capsys):
        (levels_dir / "2.json").write_text("{", encoding="utf-8")
        assert main(["concat", str(levels_dir)]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not (levels_dir / "levels.json").exists()

    def test_bad_legacy_exit_code(self, tmp_path: Path):
        src = tmp_path / "a.non"
        src.write_text("width 2\nheight 2\ngoal [11]\n", encoding="utf-8")
        assert main(["convert", str(src), "--output", str(tmp_path / "out")]) == 1

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            main([])


class TestRebuild:
    @pytest.fixture()
    def legacy(self, tmp_path: Path) -> Path:
        d = tmp_path / "legacy"
        d.mkdir()
        (d / "x.non").write_text(LEGACY_TEXT, encoding="utf-8")
        return d

    def test_second_build_keeps_uuids(self, levels_dir: Path, legacy: Path):
        assert main(["build", str(levels_dir), "--legacy", str(legacy)]) == 0
        first = json.loads((levels_dir / "5.json").read_text(encoding="utf-8"))["uuid"]

        assert main(["build", str(levels_dir), "--legacy", str(legacy)]) == 0
        second = json.loads((levels_dir / "5.json").read_text(encoding="utf-8"))["uuid"]

        assert first == second
        bundle = json.loads((levels_dir / "levels.json").read_text(encoding="utf-8"))
        assert [level["uuid"] for level in bundle if level["name"] == "5"] == [first]

    def test_authored_level_not_overwritten(self, levels_dir: Path, legacy: Path, capsys):
        authored = '{\n  "name": "5",\n  "content": [[0]]\n}'
        (levels_dir / "5.json").write_text(authored, encoding="utf-8")

        assert main(["build", str(levels_dir), "--legacy", str(legacy)]) == 1

        assert "already exists" in capsys.readouterr().err
        assert (levels_dir / "5.json").read_text(encoding="utf-8") == authored

    def test_custom_bundle_name_not_tagged(self, levels_dir: Path, tmp_path: Path):
        config = tmp_path / "picross.yaml"
        config.write_text(f"levels_dir: {levels_dir.as_posix()}\nbundle_name: all.json\n", encoding="utf-8")
        assert main(["--config", str(config), "concat"]) == 0
        before = (levels_dir / "all.json").read_text(encoding="utf-8")

        assert main(["--config", str(config), "insert-uuid"]) == 0

        assert (levels_dir / "all.json").read_text(encoding="utf-8") == before
        assert "uuid" in json.loads((levels_dir / "1.json").read_text(encoding="utf-8"))

"""Tests for actionroutes.collector — collected controller data and merging."""

import json
import os
from pathlib import Path

import pytest

from actionroutes.collector import (
    collect_controller_actions,
    iter_php_files,
    load_collected_file,
    merge_controller_actions,
)
from actionroutes.discovery import load_autoload_map
from actionroutes.errors import ConfigurationError
from actionroutes.php.reflection import SourceReflector

EXTRA_CONTROLLER = """<?php
namespace extra\\controllers;

class ReportsController extends \\craft\\web\\Controller
{
    public function actionExport() {}
}
"""


class TestMerge:
    def test_collected_takes_precedence(self) -> None:
        merged = merge_controller_actions(
            {"a\\XController": ["actionOne"]},
            {"a\\XController": ["actionOne", "actionTwo"], "a\\YController": ["actionY"]},
        )
        assert merged == {
            "a\\XController": ("actionOne",),
            "a\\YController": ("actionY",),
        }

    def test_collected_entries_union_in_order(self) -> None:
        merged = merge_controller_actions(
            [("a\\X", ["actionB", "actionA"]), ("a\\X", ["actionA", "actionC"])],
            {},
        )
        assert merged == {"a\\X": ("actionB", "actionA", "actionC")}

    def test_discovered_only(self) -> None:
        assert merge_controller_actions({}, {"a\\X": ["actionA"]}) == {"a\\X": ("actionA",)}


class TestCollect:
    def test_iter_php_files_skips_vendor(self, make_files, tmp_path: Path) -> None:
        make_files({
            "src/A.php": "",
            "src/sub/B.php": "",
            "src/vendor/C.php": "",
            "src/readme.md": "",
        })
        found = [p.relative_to(tmp_path).as_posix() for p in iter_php_files([tmp_path / "src"])]
        assert found == ["src/A.php", "src/sub/B.php"]

    def test_iter_php_files_accepts_files(self, make_files, tmp_path: Path) -> None:
        make_files({"one.php": "", "two.txt": ""})
        found = list(iter_php_files([tmp_path / "one.php", tmp_path / "two.txt", tmp_path / "nope"]))
        assert found == [tmp_path / "one.php"]

    def test_collects_concrete_controllers(self, craft_project: Path) -> None:
        (craft_project / "extra/controllers").mkdir(parents=True)
        (craft_project / "extra/controllers/ReportsController.php").write_text(EXTRA_CONTROLLER)
        reflector = SourceReflector(load_autoload_map(craft_project))

        collected = collect_controller_actions(
            [craft_project / "extra", craft_project / "modules/blog"], reflector,
        )
        assert collected == {
            "extra\\controllers\\ReportsController": ("actionExport",),
            "modules\\blog\\controllers\\ArchiveController": ("actionByYear",),
            "modules\\blog\\controllers\\PostsController": ("actionIndex", "actionSave", "actionPing"),
        }

    def test_symlink_loop_is_skipped(self, craft_project: Path) -> None:
        (craft_project / "extra").mkdir()
        (craft_project / "extra/ReportsController.php").write_text(EXTRA_CONTROLLER)
        loop = craft_project / "extra/LoopController.php"
        os.symlink(loop, loop)
        reflector = SourceReflector(load_autoload_map(craft_project))

        collected = collect_controller_actions([craft_project / "extra"], reflector)
        assert collected == {"extra\\controllers\\ReportsController": ("actionExport",)}

    def test_file_already_loaded_under_another_path(
        self, craft_project: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        reflector = SourceReflector(load_autoload_map(craft_project))
        assert reflector.reflect("modules\\blog\\controllers\\PostsController") is not None

        monkeypatch.chdir(craft_project)
        collected = collect_controller_actions(["modules/blog/controllers"], reflector)
        assert collected["modules\\blog\\controllers\\PostsController"] == (
            "actionIndex",
            "actionSave",
            "actionPing",
        )


class TestLoadCollectedFile:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "actions.json"
        path.write_text(json.dumps({"a\\XController": ["actionOne"]}))
        assert load_collected_file(path) == {"a\\XController": ("actionOne",)}

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_collected_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_collected_file(path)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError, match="expected a JSON object"):
            load_collected_file(path)

    def test_actions_must_be_string_lists(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"a\\X": "actionOne"}))
        with pytest.raises(ConfigurationError, match="must be a list"):
            load_collected_file(path)

"""Tests for actionroutes.discovery — controllers found via PSR-4."""

from pathlib import Path

import pytest

from actionroutes.discovery import (
    controller_directories,
    discover_controllers,
    load_autoload_map,
)
from actionroutes.namespaces import resolve_namespaces
from actionroutes.php.reflection import SourceReflector


@pytest.fixture
def autoload(craft_project: Path):
    return load_autoload_map(craft_project)


class TestLoadAutoloadMap:
    def test_reads_composer_table(self, craft_project: Path, autoload) -> None:
        assert autoload["modules\\"] == (str(craft_project / "modules"),)
        assert set(autoload) == {"yii\\", "modules\\", "craft\\", "acme\\seo\\"}

    def test_unknown_root(self) -> None:
        assert dict(load_autoload_map(None)) == {}

    def test_missing_table(self, tmp_path: Path) -> None:
        assert dict(load_autoload_map(tmp_path)) == {}

    def test_string_entries_and_junk(self, make_files) -> None:
        root = make_files({
            "vendor/composer/autoload_psr4.php": "<?php return ['a\\\\' => '/srv/a', 'b\\\\' => 42];",
        })
        assert dict(load_autoload_map(root)) == {"a\\": ("/srv/a",)}


class TestControllerDirectories:
    def test_joins_namespace_remainder(self, craft_project: Path, autoload) -> None:
        assert controller_directories("modules\\blog\\controllers", autoload) == [
            craft_project / "modules/blog/controllers",
        ]

    def test_nonexistent_directories_dropped(self, autoload) -> None:
        assert controller_directories("modules\\missing\\controllers", autoload) == []

    def test_prefix_must_end_on_segment(self, tmp_path: Path) -> None:
        (tmp_path / "controllers").mkdir()
        autoload = {"app\\": [str(tmp_path)]}
        assert controller_directories("application\\controllers", autoload) == []
        assert controller_directories("app\\controllers", autoload) == [tmp_path / "controllers"]

    def test_namespace_equal_to_prefix(self, tmp_path: Path) -> None:
        autoload = {"app\\controllers\\": [str(tmp_path)]}
        assert controller_directories("app\\controllers", autoload) == [tmp_path]


class TestDiscoverControllers:
    def test_fixture_project(self, craft_project: Path, autoload) -> None:
        namespaces = resolve_namespaces(craft_project / "config/app.php")
        found = discover_controllers(
            namespaces.handles.values(), autoload, SourceReflector(autoload),
        )
        assert found == {
            "craft\\controllers\\EntriesController": ("actionSaveEntry",),
            "modules\\blog\\controllers\\ArchiveController": ("actionByYear",),
            "modules\\blog\\controllers\\PostsController": ("actionIndex", "actionSave", "actionPing"),
            "modules\\shop\\controllers\\CartController": ("actionAdd", "actionCheckout"),
            "acme\\seo\\controllers\\SitemapController": ("actionGenerate",),
        }

    def test_skips_abstract_unrelated_and_actionless(self, autoload) -> None:
        found = discover_controllers(
            ["modules\\blog\\controllers"], autoload, SourceReflector(autoload),
        )
        assert "modules\\blog\\controllers\\BaseController" not in found
        assert "modules\\blog\\controllers\\HelperController" not in found
        assert "modules\\blog\\controllers\\EmptyController" not in found

    def test_empty_autoload(self, autoload) -> None:
        assert discover_controllers(["modules\\blog\\controllers"], {}, SourceReflector(autoload)) == {}

    def test_class_must_match_file_name(self, make_files) -> None:
        root = make_files({
            "src/controllers/MisnamedController.php": """<?php
namespace app\\controllers;
class OtherController extends \\yii\\web\\Controller
{
    public function actionRun() {}
}
""",
        })
        autoload = {"app\\": [str(root / "src")]}
        assert discover_controllers(["app\\controllers"], autoload, SourceReflector(autoload)) == {}

    def test_reflection_errors_skip_candidate(self, autoload) -> None:
        class Exploding:
            def reflect(self, fqcn: str) -> None:
                raise RuntimeError(fqcn)

        assert discover_controllers(["modules\\blog\\controllers"], autoload, Exploding()) == {}

    def test_custom_base_controller(self, make_files) -> None:
        root = make_files({
            "src/controllers/ApiController.php": """<?php
namespace app\\controllers;
class ApiController extends \\app\\Base
{
    public function actionList() {}
}
""",
        })
        autoload = {"app\\": [str(root / "src")]}
        found = discover_controllers(
            ["app\\controllers"], autoload, SourceReflector(autoload), base_controller="app\\Base",
        )
        assert found == {"app\\controllers\\ApiController": ("actionList",)}

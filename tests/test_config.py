"""Tests for actionroutes.config — CheckConfig frozen dataclass."""

from pathlib import Path

import pytest

from actionroutes.config import BASE_CONTROLLER, CORE_NAMESPACE, CheckConfig


class TestCheckConfig:
    def test_defaults(self) -> None:
        cfg = CheckConfig()

        assert cfg.config_path == "config/app.php"
        assert cfg.handles == ()
        assert cfg.autoload is None
        assert cfg.template_paths == ("templates",)
        assert cfg.template_extension == ".twig"
        assert cfg.scan_paths == ()
        assert cfg.collected is None
        assert cfg.core_namespace == CORE_NAMESPACE == "craft\\controllers"
        assert cfg.base_controller == BASE_CONTROLLER == "yii\\web\\Controller"

    def test_override(self) -> None:
        cfg = CheckConfig(config_path=Path("cfg/app.php"), template_paths=("views",))

        assert cfg.config_path == Path("cfg/app.php")
        assert cfg.template_paths == ("views",)

    def test_frozen(self) -> None:
        cfg = CheckConfig()

        with pytest.raises(AttributeError):
            cfg.template_extension = ".html"  # type: ignore[misc]

    def test_handle_overrides(self) -> None:
        cfg = CheckConfig(handles=(("x", "a\\controllers"), ("x", "b\\controllers")))
        assert cfg.handle_overrides == {"x": "b\\controllers"}

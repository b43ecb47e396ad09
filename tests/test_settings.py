"""Tests for settings loading and logging setup."""

import logging
from pathlib import Path
from typing import Iterator

import pytest
import yaml

from modhub.logging_config import mod_logger, setup_logging
from modhub.settings import get_setting, load_settings, reload_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    reload_settings()
    yield
    reload_settings()


class TestLoadSettings:
    """Defaults merged with config/settings.yaml."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path)
        assert get_setting(settings, "console.prompt") == "> "
        assert get_setting(settings, "logging.max_bytes") == 10 * 1024 * 1024
        assert get_setting(settings, "event_bus.scheduler") == "asyncio"
        assert get_setting(settings, "mods.dir") == "sandbox/mods"

    def test_file_overrides_nested_values(self, tmp_path: Path) -> None:
        (tmp_path / "settings.yaml").write_text(
            yaml.safe_dump({"event_bus": {"scheduler": "thread"}, "logging": {"level": "DEBUG"}}),
            encoding="utf-8",
        )
        settings = load_settings(tmp_path)
        assert get_setting(settings, "event_bus.scheduler") == "thread"
        assert get_setting(settings, "logging.level") == "DEBUG"
        assert get_setting(settings, "logging.backup_count") == 3

    def test_invalid_yaml_falls_back_to_defaults(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "settings.yaml").write_text("event_bus: [unclosed", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="modhub.settings"):
            settings = load_settings(tmp_path)
        assert get_setting(settings, "event_bus.scheduler") == "asyncio"
        assert "Ignoring unreadable settings file" in caplog.text

    def test_defaults_not_mutated_by_file(self, tmp_path: Path) -> None:
        (tmp_path / "settings.yaml").write_text("mods:\n  dir: elsewhere\n", encoding="utf-8")
        assert get_setting(load_settings(tmp_path), "mods.dir") == "elsewhere"
        reload_settings()
        assert get_setting(load_settings(tmp_path.parent / "none"), "mods.dir") == "sandbox/mods"

    def test_cached_until_reload(self, tmp_path: Path) -> None:
        first = load_settings(tmp_path)
        (tmp_path / "settings.yaml").write_text("console:\n  enabled: false\n", encoding="utf-8")
        assert load_settings(tmp_path) is first
        reload_settings()
        assert get_setting(load_settings(tmp_path), "console.enabled") is False

    def test_get_setting_missing_path(self) -> None:
        assert get_setting({"a": {"b": 1}}, "a.c", "dflt") == "dflt"
        assert get_setting({"a": 1}, "a.b") is None


class TestSetupLogging:
    """Root logger gets a rotating file handler and optional console handler."""

    def test_file_and_console_handlers(self, tmp_path: Path) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(
                tmp_path,
                {
                    "logging": {
                        "file": "logs/test.log",
                        "level": "debug",
                        "log_to_console": True,
                        "levels": {"mod.quiet": "warning", "mod.odd": "nonsense"},
                    }
                },
            )
            assert root.level == logging.DEBUG
            assert logging.getLogger("mod.quiet").level == logging.WARNING
            assert logging.getLogger("mod.odd").level == logging.DEBUG
            assert (tmp_path / "logs").is_dir()
            kinds = {type(h).__name__ for h in root.handlers}
            assert kinds == {"RotatingFileHandler", "StreamHandler"}
            mod_logger("demo").debug("hello from demo")
            for h in root.handlers:
                h.flush()
            assert "mod.demo: hello from demo" in (tmp_path / "logs" / "test.log").read_text(
                encoding="utf-8"
            )
        finally:
            for h in root.handlers[:]:
                root.removeHandler(h)
                h.close()
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
            for name in ("mod.quiet", "mod.odd"):
                logging.getLogger(name).setLevel(logging.NOTSET)

import logging
from pathlib import Path

from aether_zenith.config import default_settings, load_settings
from aether_zenith.content import Content
from aether_zenith.log import setup_logging


def test_missing_file_uses_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.yaml") == default_settings()


def test_partial_yaml_overrides(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "window:\n"
        "  width: 1024\n"
        "player:\n"
        "  base_speed: 420\n"
        "  color: not-a-color\n"
        "logging:\n"
        "  level: debug\n"
        "simulation:\n"
        "  seed: 42\n",
        encoding="utf-8",
    )
    s = load_settings(path)
    assert s.window.width == 1024
    assert s.window.height == 600
    assert s.player.base_speed == 420.0
    assert s.player.color == (0, 188, 212)
    assert s.logging.level == "DEBUG"
    assert s.simulation.seed == 42


def test_shipped_settings_match_defaults():
    s = load_settings(Path(__file__).resolve().parent.parent / "config" / "settings.yaml")
    d = default_settings()
    assert s.window == d.window
    assert s.player == d.player
    assert s.progression == d.progression


def test_content_defaults_and_unlocks(content):
    assert content.unlocked_enemies(1) == ["basic"]
    assert content.unlocked_enemies(2) == ["basic", "charger"]
    assert content.unlocked_enemies(3) == ["basic", "charger", "shooter"]
    assert content.upgrade("weapon")["costs"][0] == 1000


def test_content_yaml_overrides(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "enemies.yaml").write_text("charger:\n  unlock_level: 5\n  score: 40\n", encoding="utf-8")
    content = Content(tmp_path)
    assert content.unlocked_enemies(4) == ["basic", "shooter"]
    assert content.enemy("charger")["score"] == 40
    assert content.enemy("charger")["size"] == 50


def test_setup_logging_is_idempotent():
    setup_logging("debug")
    setup_logging("warning")
    logger = logging.getLogger("aether_zenith")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1

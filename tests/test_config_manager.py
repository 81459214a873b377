"""Tests for ConfigManager."""

import json

from audio_controller.utils.config_manager import ConfigManager


def test_defaults_without_file(tmp_path):
    config = ConfigManager(config_file=tmp_path / "config.json")
    assert config.get_config("AUDIO_CONTROL.LINUX_BACKEND") is None
    assert config.get_config("AUDIO_CONTROL.ALSA_MIC_CONTROL") == "Capture"
    assert config.get_config("AUDIO_CONTROL.MISSING", "fallback") == "fallback"
    # nothing is written until something changes
    assert not (tmp_path / "config.json").exists()


def test_file_is_merged_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"AUDIO_CONTROL": {"LINUX_BACKEND": "pactl"}, "EXTRA": 1}),
        encoding="utf-8",
    )
    config = ConfigManager(config_file=path)
    assert config.get_config("AUDIO_CONTROL.LINUX_BACKEND") == "pactl"
    assert config.get_config("AUDIO_CONTROL.ALSA_SPEAKER_CONTROL") == "Master"
    assert config.get_config("EXTRA") == 1


def test_invalid_json_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    config = ConfigManager(config_file=path)
    assert config.get_config("AUDIO_CONTROL.USE_PYCAW_FALLBACK") is True


def test_update_persists_and_reloads(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = ConfigManager(config_file=path)
    assert config.update_config("AUDIO_CONTROL.ADDON_SEARCH_DIRS", ["/opt/addons"])

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["AUDIO_CONTROL"]["ADDON_SEARCH_DIRS"] == ["/opt/addons"]

    other = ConfigManager(config_file=path)
    assert other.get_config("AUDIO_CONTROL.ADDON_SEARCH_DIRS") == ["/opt/addons"]


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = ConfigManager(config_file=tmp_path / "a.json")
    first.update_config("AUDIO_CONTROL.ADDON_SEARCH_DIRS", ["/tmp/x"])
    second = ConfigManager(config_file=tmp_path / "b.json")
    assert second.get_config("AUDIO_CONTROL.ADDON_SEARCH_DIRS") == []
    assert ConfigManager.DEFAULT_CONFIG["AUDIO_CONTROL"]["ADDON_SEARCH_DIRS"] == []

"""Tests for config.settings.

Run with:
    pytest tests/test_settings.py -v
"""

import pytest
from pydantic import ValidationError

from solowindow.config.settings import CONFIG_KEYS, PolicyType, Settings, SettingsError


class TestDefaults:
    def test_defaults(self):
        settings = Settings()
        assert settings.respect_monitors
        assert settings.respect_virtual_desktops
        assert settings.respect_overlap
        assert settings.pinned_windows_dont_minimize
        assert settings.policy is PolicyType.DOMINANCE
        assert settings.sweep_limit == 0
        assert settings.intent_max_age == 0

    def test_empty_mapping_gives_defaults(self):
        assert Settings.from_mapping({}) == Settings()


class TestFromReader:
    def test_reader_is_called_once_per_key_with_default(self):
        calls = []

        def read_config(key, default):
            calls.append((key, default))
            return default

        Settings.from_reader(read_config)

        assert [key for key, _ in calls] == list(CONFIG_KEYS)
        assert ("respectOverlap", True) in calls
        assert ("policy", "dominance") in calls

    def test_reader_values_are_coerced(self):
        values = {"respectOverlap": "false", "sweepLimit": "25", "policy": "single-active"}
        settings = Settings.from_reader(lambda key, default: values.get(key, default))

        assert settings.respect_overlap is False
        assert settings.sweep_limit == 25
        assert settings.policy is PolicyType.SINGLE_ACTIVE


class TestValidation:
    @pytest.mark.parametrize("raw,expected", [("yes", True), ("Off", False), (1, True), (0, False)])
    def test_bool_spellings(self, raw, expected):
        assert Settings.from_mapping({"respectMonitors": raw}).respect_monitors is expected

    def test_bad_bool(self):
        with pytest.raises(SettingsError, match="respectMonitors"):
            Settings.from_mapping({"respectMonitors": "maybe"})

    def test_unknown_key(self):
        with pytest.raises(SettingsError, match="respectMonitor: Extra inputs"):
            Settings.from_mapping({"respectMonitor": True})

    def test_negative_count(self):
        with pytest.raises(SettingsError, match="sweepLimit"):
            Settings.from_mapping({"sweepLimit": -1})

    def test_count_must_be_an_integer(self):
        with pytest.raises(SettingsError, match="intentMaxAge"):
            Settings.from_mapping({"intentMaxAge": "soon"})

    def test_unknown_policy(self):
        with pytest.raises(SettingsError, match="policy"):
            Settings.from_mapping({"policy": "tiling"})

    def test_hotkey_must_be_string(self):
        with pytest.raises(SettingsError, match="pinHotkey"):
            Settings.from_mapping({"pinHotkey": 5})


class TestConversion:
    def test_as_config_feeds_from_mapping(self):
        settings = Settings(respect_overlap=False, policy=PolicyType.SINGLE_ACTIVE)
        config = settings.as_config()

        assert config["policy"] == "single_active"
        assert Settings.from_mapping(config) == settings

    def test_replace(self):
        settings = Settings().replace(sweep_limit=3)
        assert settings.sweep_limit == 3
        assert Settings().sweep_limit == 0

    def test_replace_is_validated(self):
        with pytest.raises(SettingsError, match="sweep_limit"):
            Settings().replace(sweep_limit=-2)

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.respect_overlap = False

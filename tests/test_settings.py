"""
Tests for settings persistence and token lookup.
"""

import json
import logging

from cms_translator.project_model import DEFAULT_TRANSLATABLE_KEYS
from cms_translator.settings import TOKEN_ENV_VAR, Settings, get_access_token


class TestSettings:
    """Test the Settings dataclass."""

    def test_defaults(self):
        settings = Settings()
        assert settings.batch_size == 20
        assert settings.page_size == 100
        assert settings.batch_pause == 1.0
        assert settings.update_pause == 0.5
        assert settings.content_field == "activityJSON"
        assert settings.content_type == "healthJourney_toolboxActivity"
        assert settings.translatable_keys == DEFAULT_TRANSLATABLE_KEYS

    def test_missing_file_uses_defaults(self, tmp_path):
        assert Settings.load(str(tmp_path / "nope.json")) == Settings()

    def test_broken_file_uses_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        assert Settings.load(str(path)) == Settings()

    def test_load_overrides(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "batch_size": 5,
            "translatable_keys": ["label"],
            "unknown": True,
        }), encoding="utf-8")
        settings = Settings.load(str(path))
        assert settings.batch_size == 5
        assert settings.translatable_keys == frozenset({"label"})
        assert not hasattr(settings, "unknown")

    def test_wrong_types_keep_defaults(self, tmp_path, caplog):
        """Values of the wrong JSON type are ignored with a warning."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "translatable_keys": "title",
            "batch_size": "5",
            "page_size": True,
            "batch_pause": "fast",
            "default_locale": 7,
        }), encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="cms_translator.settings"):
            settings = Settings.load(str(path))
        assert settings == Settings()
        assert "title" in settings.translatable_keys
        assert "t" not in settings.translatable_keys
        assert len([r for r in caplog.records if "unexpected value" in r.getMessage()]) == 5

    def test_translatable_keys_must_all_be_strings(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"translatable_keys": ["label", 3]}),
                        encoding="utf-8")
        assert Settings.load(str(path)).translatable_keys == DEFAULT_TRANSLATABLE_KEYS

    def test_integer_pauses_accepted(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"batch_pause": 2, "update_pause": 0.25}),
                        encoding="utf-8")
        settings = Settings.load(str(path))
        assert settings.batch_pause == 2.0
        assert isinstance(settings.batch_pause, float)
        assert settings.update_pause == 0.25

    def test_save_round_trip(self, tmp_path):
        path = str(tmp_path / "settings.json")
        Settings(target_locale="de-DE", batch_pause=0).save(path)
        loaded = Settings.load(path)
        assert loaded.target_locale == "de-DE"
        assert loaded.batch_pause == 0
        assert loaded.translatable_keys == DEFAULT_TRANSLATABLE_KEYS


def test_access_token_from_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(TOKEN_ENV_VAR, "cfpat-abc")
    assert get_access_token() == "cfpat-abc"

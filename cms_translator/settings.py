"""Persistent run settings and credential lookup."""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields

from dotenv import load_dotenv

from .contentful_client import DEFAULT_BASE_URL
from .project_model import DEFAULT_TRANSLATABLE_KEYS

log = logging.getLogger(__name__)

SETTINGS_FILE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "_settings.json")
TOKEN_ENV_VAR = "CONTENTFUL_MANAGEMENT_TOKEN"


@dataclass
class Settings:
    """Knobs for export/import runs. The access token is never stored here."""
    base_url: str = DEFAULT_BASE_URL
    content_type: str = "healthJourney_toolboxActivity"
    content_field: str = "activityJSON"  # entry field holding the JSON document
    default_locale: str = "en-US"       # locale read from
    target_locale: str = ""             # locale written to on import; must differ from default_locale
    translatable_keys: frozenset = field(default_factory=lambda: DEFAULT_TRANSLATABLE_KEYS)
    batch_size: int = 20                # entry ids per fetch when ids are given
    page_size: int = 100
    batch_pause: float = 1.0            # seconds between id batches
    update_pause: float = 0.5           # seconds after each persisted entry
    output_dir: str = "exports"
    timeout: int = 30
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: str = SETTINGS_FILE) -> "Settings":
        """Load settings from a JSON file, using defaults for anything missing."""
        settings = cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                cfg = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError, OSError):
            return settings  # No saved settings — use defaults
        if not isinstance(cfg, dict):
            log.warning("Ignoring settings file %s: not a JSON object", path)
            return settings

        known = {f.name: f for f in fields(cls)}
        for key, value in cfg.items():
            if key not in known:
                log.warning("Ignoring unknown setting %r", key)
                continue
            value = _coerce(known[key].type, value)
            if value is None:
                log.warning("Ignoring setting %r: unexpected value %r", key, cfg[key])
                continue
            setattr(settings, key, value)
        return settings

    def save(self, path: str = SETTINGS_FILE):
        """Persist settings to a JSON file."""
        cfg = asdict(self)
        cfg["translatable_keys"] = sorted(self.translatable_keys)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, ensure_ascii=False, indent=2)


def _coerce(field_type, value):
    """Return ``value`` converted to ``field_type``, or None if it does not fit."""
    if field_type is frozenset:
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return frozenset(value)
        return None
    if isinstance(value, bool):
        return None
    if field_type is float and isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, field_type):
        return value
    return None


def get_access_token() -> str:
    """Return the management token from the environment (or a .env file)."""
    load_dotenv()
    return os.environ.get(TOKEN_ENV_VAR, "")

"""Data model for entries, translation dictionaries and run summaries."""

import json
import os
import re
from dataclasses import dataclass, field, asdict
from typing import Optional

from . import PayloadError

# Object keys whose values hold user-facing text
DEFAULT_TRANSLATABLE_KEYS = frozenset({
    "name",
    "text",
    "subText",
    "highlightText",
    "alt",
    "altText",
    "list",
    "caption",
    "title",
    "subtitle",
    "richText",
    "richtext",
    "prefix",
    "placeholder",
    "placeHolder",
    "suffix",
})

_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass
class Entry:
    """A single Contentful entry as returned by the Content Management API."""
    sys: dict = field(default_factory=dict)
    fields: dict = field(default_factory=dict)   # fieldName -> {localeCode: value}

    @classmethod
    def from_json(cls, data: dict) -> "Entry":
        return cls(sys=data.get("sys", {}) or {}, fields=data.get("fields", {}) or {})

    @property
    def id(self) -> str:
        return self.sys.get("id", "")

    @property
    def version(self) -> Optional[int]:
        return self.sys.get("version")

    def get_field(self, name: str, locale: str):
        """Return ``fields.<name>.<locale>``, or None when either level is missing."""
        localized = self.fields.get(name)
        if not isinstance(localized, dict):
            return None
        return localized.get(locale)

    def set_field(self, name: str, locale: str, value):
        localized = self.fields.get(name)
        if not isinstance(localized, dict):
            localized = {}
            self.fields[name] = localized
        localized[locale] = value

    def to_payload(self) -> dict:
        """Body for an entry update request."""
        return {"fields": self.fields}


@dataclass
class TranslationDictionary:
    """Mapping from source string to target string.

    Used as the run-wide accumulator during export (every key maps to
    itself) and as the lookup table during import.
    """
    translations: dict = field(default_factory=dict)

    def add(self, text: str):
        """Record a source string, mapped to itself."""
        self.translations[text] = text

    def update(self, other):
        if isinstance(other, TranslationDictionary):
            other = other.translations
        self.translations.update(other)

    def __contains__(self, text) -> bool:
        return text in self.translations

    def __getitem__(self, text: str) -> str:
        return self.translations[text]

    def __iter__(self):
        return iter(self.translations)

    def __len__(self) -> int:
        return len(self.translations)

    def to_dict(self) -> dict:
        return dict(self.translations)

    def save(self, path: str):
        """Write the dictionary as a pretty-printed JSON object."""
        os.makedirs(os.path.dirname(path) if os.path.dirname(path) else ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.translations, f, ensure_ascii=False, indent=2)

    @classmethod
    def load(cls, path: str) -> "TranslationDictionary":
        """Load a dictionary file, dropping non-string values."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise PayloadError(f"{path} does not contain a JSON object")
        return cls(sanitize_translations(data))


@dataclass
class SubstitutionResult:
    """Outcome of one substitution pass over a document."""
    changed: bool = False   # at least one hit produced a different value
    replacements: int = 0   # every dictionary hit, self-mappings included


@dataclass
class ImportSummary:
    entries_processed: int = 0
    entries_updated: int = 0
    replacements: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def sanitize_translations(raw: dict) -> dict:
    """Keep only entries whose value is a string."""
    return {key: value for key, value in raw.items() if isinstance(value, str)}


def parse_import_payload(text: str) -> tuple:
    """Parse an uploaded import file.

    The payload is either the translation dictionary itself or an object
    wrapping it under ``translations``, optionally with an ``entryIds`` list.

    Returns:
        (raw_translations, entry_ids) where entry_ids is None when the
        payload carries no ``entryIds`` list.

    Raises:
        PayloadError: the text is not JSON, or not a JSON object.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise PayloadError(f"Invalid JSON file uploaded for import: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError("Import JSON must be an object of translations")

    translations = data
    if isinstance(data.get("translations"), dict):
        translations = data["translations"]

    entry_ids = None
    if isinstance(data.get("entryIds"), list):
        entry_ids = [str(value).strip() for value in data["entryIds"]]
        entry_ids = [value for value in entry_ids if value]
    return translations, entry_ids


def parse_entry_ids(text: str) -> list:
    """Split text into entry ids, one per line, ignoring blank lines."""
    ids = (line.strip() for line in _LINE_SPLIT_RE.split(text))
    return [entry_id for entry_id in ids if entry_id]


def read_entry_ids(path: str) -> list:
    """Read an entry id list file (one id per line)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_entry_ids(f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise PayloadError(f"Could not read entry ids from {path}: {e}") from e

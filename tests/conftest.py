"""Shared fixtures: an in-memory entry store standing in for Contentful."""

import pytest

from cms_translator import FetchError, PersistError
from cms_translator.project_model import Entry
from cms_translator.settings import Settings


def make_entry(entry_id: str, document, locale: str = "en-US",
               field: str = "activityJSON", version: int = 1) -> dict:
    """Raw API representation of one entry."""
    fields = {}
    if document is not None:
        fields[field] = {locale: document}
    return {"sys": {"id": entry_id, "version": version}, "fields": fields}


class FakeContentfulClient:
    """Serves entries from a list and records every call."""

    def __init__(self, entries: list, space_name: str = "Demo"):
        self.entries = entries
        self.space_name = space_name
        self.fetch_calls = []
        self.updated = []
        self.fail_fetch = False
        self.fail_update = False

    def list_spaces(self) -> list:
        return [{"id": "space1", "name": self.space_name}]

    def get_space(self, space_id: str) -> dict:
        return {"sys": {"id": space_id}, "name": self.space_name}

    def get_all_entries(self, space_id, environment_id, content_type,
                        entry_ids=None, page_size=100):
        self.fetch_calls.append(list(entry_ids) if entry_ids else None)
        if self.fail_fetch:
            raise FetchError("boom")
        items = self.entries
        if entry_ids:
            items = [e for e in items if e["sys"]["id"] in entry_ids]
        return [Entry.from_json(e) for e in items]

    def update_entry(self, space_id, environment_id, entry):
        if self.fail_update:
            raise PersistError(f"Failed to update entry {entry.id}")
        self.updated.append(entry)
        return entry


@pytest.fixture
def settings(tmp_path):
    """Settings with throttling disabled and output under tmp_path."""
    return Settings(batch_pause=0, update_pause=0, output_dir=str(tmp_path))

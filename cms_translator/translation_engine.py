"""Translation engine — orchestrates export and import runs against Contentful."""

import logging
import os
import re
import time
from datetime import datetime, timezone

from . import PayloadError
from .content_parser import extract_strings, substitute_strings
from .contentful_client import ContentfulClient
from .project_model import ImportSummary, TranslationDictionary, sanitize_translations
from .settings import Settings

log = logging.getLogger(__name__)

# Characters not allowed in a filename on at least one supported platform
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')


def _safe_name(part: str) -> str:
    return _UNSAFE_FILENAME_RE.sub("-", str(part))


class TranslationEngine:
    """Runs export and import passes over the entries of one content type.

    Entries are fetched and processed strictly one batch at a time. When an
    explicit id list is given it is split into ``settings.batch_size`` chunks
    with ``settings.batch_pause`` seconds between chunks.
    """

    def __init__(self, client: ContentfulClient, settings: Settings = None):
        self.client = client
        self.settings = settings or Settings()
        self.progress = None  # optional callable(batches_done, batches_total)

    def export_strings(self, space_id: str, environment_id: str,
                       entry_ids: list = None, locale: str = None,
                       output_dir: str = None) -> str:
        """Collect translatable strings from every entry into one JSON file.

        Args:
            space_id: Contentful space id.
            environment_id: Environment id or alias.
            entry_ids: Restrict the run to these entries (all entries if empty).
            locale: Locale to read the content field from (default locale
                from settings when omitted).
            output_dir: Directory for the export file.

        Returns:
            Path of the written export file.
        """
        locale = locale or self.settings.default_locale
        output_dir = output_dir or self.settings.output_dir
        translations = TranslationDictionary()
        space = self.client.get_space(space_id)

        for entries in self._iter_entry_batches(space_id, environment_id, entry_ids):
            for entry in entries:
                document = entry.get_field(self.settings.content_field, locale)
                if document is not None:
                    extract_strings(document, self.settings.translatable_keys,
                                    translations)

        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        timestamp = timestamp.replace("+00:00", "Z")
        parts = [space.get("name") or space_id, environment_id, locale, timestamp]
        filename = "export-" + "-".join(_safe_name(p) for p in parts) + ".json"
        path = os.path.join(output_dir, filename)
        translations.save(path)

        log.info("Exported %d strings to %s", len(translations), path)
        return path

    def import_strings(self, space_id: str, environment_id: str,
                       raw_translations: dict, locale: str = None,
                       entry_ids: list = None) -> ImportSummary:
        """Write translated copies of each entry's content into ``locale``.

        The content field is read from the default locale, translated into a
        new document and stored under the target locale. Entries without the
        field, or whose content has no dictionary hit, are left alone.

        Raises:
            PayloadError: no target locale, or the target is the default
                locale the content is read from.
            FetchError: fetching entries failed; the run stops.
            PersistError: updating an entry failed; the run stops.
        """
        locale = locale or self.settings.target_locale
        if not locale:
            raise PayloadError("No target locale given for import")
        if locale == self.settings.default_locale:
            raise PayloadError(
                f"Target locale {locale} is the default locale; "
                "importing would overwrite the source content")
        translations = TranslationDictionary(sanitize_translations(raw_translations))
        summary = ImportSummary()
        if not translations:
            log.info("Import skipped: no string translations in payload")
            return summary

        for entries in self._iter_entry_batches(space_id, environment_id, entry_ids):
            self._import_entries(space_id, environment_id, entries,
                                 translations, locale, summary)

        log.info("Import into %s finished: %d processed, %d updated, %d replacements",
                 locale, summary.entries_processed, summary.entries_updated,
                 summary.replacements)
        return summary

    def _import_entries(self, space_id: str, environment_id: str, entries: list,
                        translations: TranslationDictionary, locale: str,
                        summary: ImportSummary):
        field_name = self.settings.content_field
        for entry in entries:
            summary.entries_processed += 1
            document = entry.get_field(field_name, self.settings.default_locale)
            if not document:
                continue

            translated, result = substitute_strings(document, translations)
            if result.replacements == 0:
                continue

            entry.set_field(field_name, locale, translated)
            self.client.update_entry(space_id, environment_id, entry)
            summary.entries_updated += 1
            summary.replacements += result.replacements
            log.debug("Updated entry %s (%d replacements)", entry.id, result.replacements)
            time.sleep(self.settings.update_pause)

    def _iter_entry_batches(self, space_id: str, environment_id: str,
                            entry_ids: list = None):
        """Yield lists of entries, one list per fetched id batch."""
        content_type = self.settings.content_type
        page_size = self.settings.page_size
        if not entry_ids:
            log.info("No entry IDs provided. Fetching all entries for content type '%s'.",
                     content_type)
            yield self.client.get_all_entries(space_id, environment_id, content_type,
                                              page_size=page_size)
            self._report(1, 1)
            return

        batches = self._split_batches(entry_ids, self.settings.batch_size)
        for i, batch in enumerate(batches):
            if i > 0:
                time.sleep(self.settings.batch_pause)
            log.info("Processing batch %d/%d (%d ids)", i + 1, len(batches), len(batch))
            yield self.client.get_all_entries(space_id, environment_id, content_type,
                                              entry_ids=batch, page_size=page_size)
            self._report(i + 1, len(batches))

    def _report(self, done: int, total: int):
        if self.progress is not None:
            self.progress(done, total)

    @staticmethod
    def _split_batches(items: list, size: int) -> list:
        """Split a list into sequential chunks of at most ``size`` items."""
        size = max(1, size)
        return [items[i:i + size] for i in range(0, len(items), size)]

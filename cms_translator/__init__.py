"""Contentful entry translator: string export and translated re-import."""

__version__ = "1.0.0"


class TranslatorError(Exception):
    """Base class for errors surfaced to the caller of an export/import run."""


class FetchError(TranslatorError):
    """Reading spaces, environments, locales or entries from Contentful failed."""


class PersistError(TranslatorError):
    """Writing an updated entry back to Contentful failed."""


class PayloadError(TranslatorError):
    """An import payload or entry id file could not be used."""

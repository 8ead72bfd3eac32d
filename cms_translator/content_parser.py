"""Contentful JSON content walker.

Handles extraction of translatable strings from entry content documents
and writing translations back into an equivalent document.
"""

import logging
from typing import Optional

from .project_model import (
    DEFAULT_TRANSLATABLE_KEYS, SubstitutionResult, TranslationDictionary,
)

log = logging.getLogger(__name__)


def extract_strings(document, keys=DEFAULT_TRANSLATABLE_KEYS,
                    accumulator: Optional[TranslationDictionary] = None
                    ) -> TranslationDictionary:
    """Collect every non-empty string stored under a translatable key.

    A string counts when it is the value of a translatable key, or an
    element of a list that is. Nested objects and lists are always descended
    into, whether or not their own key is translatable.

    Args:
        document: Any JSON value (dict, list, str, number, bool, None).
        keys: Object key names that mark user-facing text.
        accumulator: Dictionary to add to. A fresh one is created when omitted,
            so one export run can pass the same accumulator for every entry.

    Returns:
        The accumulator, each found string mapped to itself.
    """
    if accumulator is None:
        accumulator = TranslationDictionary()
    _collect(document, keys, accumulator)
    return accumulator


def _collect(obj, keys, out: TranslationDictionary):
    if isinstance(obj, list):
        for item in obj:
            if isinstance(item, (dict, list)):
                _collect(item, keys, out)
        return
    if not isinstance(obj, dict):
        return

    for key, value in obj.items():
        if key in keys:
            if isinstance(value, list):
                for item in value:
                    if isinstance(item, str) and item:
                        out.add(item)
            elif isinstance(value, str) and value:
                out.add(value)
        if isinstance(value, (dict, list)):
            _collect(value, keys, out)


def substitute_strings(document, translations) -> tuple:
    """Replace every string leaf found in ``translations`` with its mapping.

    No key filter applies: any string anywhere in the document is a
    candidate. The input document is left untouched; the result is a new
    tree with the same keys, list lengths and non-string leaves.

    Args:
        document: Any JSON value.
        translations: Mapping (dict or TranslationDictionary) of source
            string to target string.

    Returns:
        (new_document, SubstitutionResult)
    """
    result = SubstitutionResult()

    def visit(node):
        if isinstance(node, str):
            if node not in translations:
                return node
            replacement = translations[node]
            result.replacements += 1
            if replacement != node:
                result.changed = True
            return replacement
        if isinstance(node, list):
            return [visit(item) for item in node]
        if isinstance(node, dict):
            return {key: visit(value) for key, value in node.items()}
        return node

    translated = visit(document)
    log.debug("Substitution: %d replacements (changed=%s)",
              result.replacements, result.changed)
    return translated, result

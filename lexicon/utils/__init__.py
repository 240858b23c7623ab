"""Shared utilities for the lexicon backend and client.

Key normalization lives here so the server tiers and the client tiers
agree on what "the same query" means.
"""

from lexicon.utils.keys import LexiconKey, TranslationEntry, normalize_term

__all__ = [
    'LexiconKey',
    'TranslationEntry',
    'normalize_term',
]

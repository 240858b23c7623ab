"""Shared constants for the application."""

from lexicon.constants.languages import (
    SUPPORTED_LANGUAGES,
    LANGUAGE_NAMES,
    VOICE_MAP,
    validate_language,
    validate_language_pair,
)

__all__ = [
    'SUPPORTED_LANGUAGES',
    'LANGUAGE_NAMES',
    'VOICE_MAP',
    'validate_language',
    'validate_language_pair',
]

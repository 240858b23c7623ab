"""Language constants: single source of truth for the backend.

Must stay in sync with the language selector on the client.
"""

LANGUAGE_NAMES = {
    'de': 'German',
    'uz': 'Uzbek',
    'en': 'English',
    'ru': 'Russian',
}

SUPPORTED_LANGUAGES = frozenset(LANGUAGE_NAMES)

# Prebuilt TTS voices per language (uz and ru are approximations)
VOICE_MAP = {
    'de': 'Kore',
    'uz': 'Zephyr',
    'en': 'Puck',
    'ru': 'Charon',
}
DEFAULT_VOICE = 'Zephyr'


def validate_language(lang) -> tuple[str, str | None]:
    """Validate and normalize a language code.

    Returns:
        (normalized_code, error_message); error_message is None if valid
    """
    if not lang or not isinstance(lang, str):
        return '', 'Language code is required'
    
    code = lang.strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        return code, f"Unsupported language '{lang}'. Valid: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
    
    return code, None


def validate_language_pair(source_lang, target_lang) -> tuple[str, str, str | None]:
    """Validate a (source, target) pair; the two must differ."""
    source, error = validate_language(source_lang)
    if error:
        return source, '', error
    
    target, error = validate_language(target_lang)
    if error:
        return source, target, error
    
    if source == target:
        return source, target, 'Source and target languages must differ'
    
    return source, target, None

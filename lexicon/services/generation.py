"""Generation gateway: translations and speech from the Gemini API.

The gateway makes exactly one HTTP call per request and never retries on
its own. Retrying is the caller's decision. A circuit breaker stops calls
for a while after repeated failures so a rate-limited or misconfigured key
is not hammered.
"""

import json
import logging
import time

import requests

from lexicon.constants import LANGUAGE_NAMES, VOICE_MAP
from lexicon.constants.languages import DEFAULT_VOICE
from lexicon.errors import GenerationFailed, MalformedPayload

logger = logging.getLogger(__name__)

API_BASE = 'https://generativelanguage.googleapis.com/v1beta/models'

TRANSLATION_PROMPT = """Advanced Polyglot Dictionary: Translate the word or phrase "{term}" from {source} to {target}.
Provide detailed linguistic metadata including IPA phonetic transcripts for both the source word and the primary translation.
Return JSON with: term, termPhonetic, mainTranslation, translationPhonetic,
alternatives (synonyms in {target}), sourceSynonyms (synonyms in {source}), level (A1-C2 if applicable),
grammar (partOfSpeech, gender m/f/n, plural, conjugation, notes),
examples (text in {source}, translation in {target}, sourceTitle, sourceType book/movie/general),
etymology (brief history)."""

_STRING = {'type': 'STRING'}
_STRING_LIST = {'type': 'ARRAY', 'items': _STRING}

RESPONSE_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'term': _STRING,
        'termPhonetic': _STRING,
        'mainTranslation': _STRING,
        'translationPhonetic': _STRING,
        'alternatives': _STRING_LIST,
        'sourceSynonyms': _STRING_LIST,
        'level': _STRING,
        'grammar': {
            'type': 'OBJECT',
            'properties': {
                'partOfSpeech': _STRING,
                'gender': _STRING,
                'plural': _STRING,
                'conjugation': _STRING,
                'notes': _STRING,
            },
            'required': ['partOfSpeech'],
        },
        'examples': {
            'type': 'ARRAY',
            'items': {
                'type': 'OBJECT',
                'properties': {
                    'text': _STRING,
                    'translation': _STRING,
                    'sourceTitle': _STRING,
                    'sourceType': _STRING,
                },
                'required': ['text', 'translation', 'sourceTitle'],
            },
        },
        'etymology': _STRING,
    },
    'required': ['term', 'mainTranslation', 'examples', 'grammar'],
}

_OPTIONAL_STRINGS = ('termPhonetic', 'translationPhonetic', 'level', 'etymology')
_OPTIONAL_STRING_LISTS = ('alternatives', 'sourceSynonyms')


def validate_payload(data) -> dict:
    """Check a translation payload has the required shape.

    Returns a shallow copy of ``data``.

    Raises:
        MalformedPayload: a required field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise MalformedPayload('Translation payload must be an object')

    for field in ('term', 'mainTranslation'):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise MalformedPayload(f"Missing required field '{field}'")

    grammar = data.get('grammar')
    if not isinstance(grammar, dict) or not isinstance(grammar.get('partOfSpeech'), str):
        raise MalformedPayload("Missing required field 'grammar.partOfSpeech'")

    examples = data.get('examples')
    if not isinstance(examples, list):
        raise MalformedPayload("Missing required field 'examples'")
    for idx, example in enumerate(examples):
        if not isinstance(example, dict):
            raise MalformedPayload(f"examples[{idx}] must be an object")
        for field in ('text', 'translation', 'sourceTitle'):
            if not isinstance(example.get(field), str):
                raise MalformedPayload(f"Missing required field 'examples[{idx}].{field}'")

    for field in _OPTIONAL_STRINGS:
        if data.get(field) is not None and not isinstance(data[field], str):
            raise MalformedPayload(f"Field '{field}' must be a string")
    for field in _OPTIONAL_STRING_LISTS:
        value = data.get(field)
        if value is not None and not (isinstance(value, list) and all(isinstance(v, str) for v in value)):
            raise MalformedPayload(f"Field '{field}' must be a list of strings")

    return dict(data)


class CircuitBreaker:
    """Consecutive-failure breaker with a cooldown and a permanent trip."""

    def __init__(self, max_failures=3, cooldown=300, clock=time.time):
        self.max_failures = max_failures
        self.cooldown = cooldown
        self._clock = clock
        self._consecutive_failures = 0
        self._cooldown_until = 0
        self._disabled = False  # True once the API key is known to be bad

    @property
    def disabled(self) -> bool:
        return self._disabled

    def is_open(self) -> bool:
        """Check if calls should be skipped."""
        if self._disabled:
            return True

        if self._consecutive_failures >= self.max_failures:
            if self._clock() < self._cooldown_until:
                return True
            # Cooldown expired, allow a trial call
            self._consecutive_failures = 0
            self._cooldown_until = 0
            logger.info("Generation circuit breaker reset, retrying")

        return False

    def record_success(self):
        self._consecutive_failures = 0

    def record_failure(self, permanent: bool = False):
        if permanent:
            self._disabled = True
            logger.error(
                "Gemini API key is INVALID. Generation is now DISABLED. "
                "Set a valid GEMINI_API_KEY."
            )
            return

        self._consecutive_failures += 1
        if self._consecutive_failures >= self.max_failures:
            self._cooldown_until = self._clock() + self.cooldown
            logger.warning(
                f"Generation failed {self._consecutive_failures} times in a row. "
                f"Pausing for {self.cooldown}s."
            )


class GeminiGateway:
    """Gemini REST client for dictionary entries and speech."""

    def __init__(self, api_key, model='gemini-3-flash-preview',
                 tts_model='gemini-2.5-flash-preview-tts', timeout=30,
                 session=None, breaker=None):
        self.api_key = api_key
        self.model = model
        self.tts_model = tts_model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.breaker = breaker or CircuitBreaker()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip()) and not self.breaker.disabled

    def generate(self, term, source_lang, target_lang) -> dict:
        """Generate a dictionary entry for ``term``.

        Raises:
            GenerationFailed: transport error, timeout, API error, open circuit.
            MalformedPayload: the model's answer lacks required fields.
        """
        prompt = TRANSLATION_PROMPT.format(
            term=term,
            source=LANGUAGE_NAMES[source_lang],
            target=LANGUAGE_NAMES[target_lang],
        )
        body = {
            'contents': [{'parts': [{'text': prompt}]}],
            'generationConfig': {
                'responseMimeType': 'application/json',
                'responseSchema': RESPONSE_SCHEMA,
                'thinkingConfig': {'thinkingBudget': 0},
            },
        }
        part = self._call(self.model, body)

        text = part.get('text') or ''
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedPayload(f"Gemini returned invalid JSON: {e}") from e

        return validate_payload(data)

    def synthesize_speech(self, text, lang) -> str:
        """Synthesize ``text`` and return base64-encoded 24kHz PCM audio."""
        body = {
            'contents': [{'parts': [{'text': f"Say this clearly: {text}"}]}],
            'generationConfig': {
                'responseModalities': ['AUDIO'],
                'speechConfig': {
                    'voiceConfig': {
                        'prebuiltVoiceConfig': {'voiceName': VOICE_MAP.get(lang, DEFAULT_VOICE)},
                    },
                },
            },
        }
        part = self._call(self.tts_model, body)

        audio = (part.get('inlineData') or {}).get('data')
        if not audio:
            raise GenerationFailed('Audio generation failed')
        return audio

    def _call(self, model, body) -> dict:
        """POST one generateContent request and return the first part."""
        if not self.enabled:
            raise GenerationFailed('Generation is not configured')
        if self.breaker.is_open():
            raise GenerationFailed('Generation temporarily paused after repeated failures')

        url = f"{API_BASE}/{model}:generateContent"
        try:
            response = self.session.post(
                url,
                params={'key': self.api_key},
                json=body,
                timeout=self.timeout,
            )
            result = response.json()
        except requests.Timeout as e:
            logger.warning(f"Gemini timeout ({model})")
            self.breaker.record_failure()
            raise GenerationFailed('Generation timed out') from e
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Gemini request error ({model}): {e}")
            self.breaker.record_failure()
            raise GenerationFailed(f"Generation request failed: {e}") from e

        if 'error' in result:
            error = result['error'] or {}
            details = error.get('details') or []
            if any(d.get('reason') == 'API_KEY_INVALID' for d in details if isinstance(d, dict)):
                self.breaker.record_failure(permanent=True)
            else:
                self.breaker.record_failure()
            logger.warning(f"Gemini error: {error.get('status', '')} {error.get('message', 'unknown')}")
            raise GenerationFailed(error.get('message') or 'Generation failed')

        try:
            part = result['candidates'][0]['content']['parts'][0]
        except (KeyError, IndexError, TypeError) as e:
            self.breaker.record_failure()
            logger.warning("Gemini unexpected response format")
            raise MalformedPayload('Gemini response has no content') from e

        self.breaker.record_success()
        return part


def build_gateway(config):
    """Create the gateway from app config, or None when no key is set."""
    api_key = config.get('GEMINI_API_KEY')
    if not api_key:
        logger.warning("GEMINI_API_KEY not set - server-side generation is disabled")
        return None

    return GeminiGateway(
        api_key,
        model=config.get('GEMINI_MODEL', 'gemini-3-flash-preview'),
        tts_model=config.get('GEMINI_TTS_MODEL', 'gemini-2.5-flash-preview-tts'),
        timeout=config.get('GENERATION_TIMEOUT', 30),
    )

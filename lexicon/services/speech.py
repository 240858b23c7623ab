"""Cached text-to-speech on top of the generation gateway."""

import logging

from lexicon.services.hot_cache import HotCache
from lexicon.utils import normalize_term

logger = logging.getLogger(__name__)


class SpeechService:
    """Audio keyed by (lang, case-folded text); failures are never cached."""

    def __init__(self, gateway, cache=None):
        self.gateway = gateway
        self.cache = cache if cache is not None else HotCache(capacity=500)

    def speak(self, text, lang) -> str:
        key = (lang, normalize_term(text))
        audio = self.cache.get(key)
        if audio is not None:
            return audio

        audio = self.gateway.synthesize_speech(text.strip(), lang)
        self.cache.put(key, audio)
        logger.debug(f"Synthesized speech for {lang}:{key[1]}")
        return audio

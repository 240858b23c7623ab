"""Cache keys and the cached translation value object."""

from dataclasses import dataclass, field
from types import MappingProxyType
import re

from lexicon.constants import validate_language_pair

_WHITESPACE = re.compile(r'\s+')


def normalize_term(term: str) -> str:
    """Trim, collapse inner whitespace, and case-fold a term for keying."""
    if term is None:
        return ''
    return _WHITESPACE.sub(' ', term.strip()).casefold()


@dataclass(frozen=True)
class LexiconKey:
    """Identity of a translation across every tier."""
    
    term: str
    source_lang: str
    target_lang: str
    
    @classmethod
    def build(cls, term, source_lang, target_lang) -> 'LexiconKey':
        """Normalize raw query parts into a key.

        Raises:
            ValueError: empty term or unsupported/identical languages.
        """
        normalized = normalize_term(term if isinstance(term, str) else '')
        if not normalized:
            raise ValueError('Term is required')
        
        source, target, error = validate_language_pair(source_lang, target_lang)
        if error:
            raise ValueError(error)
        
        return cls(normalized, source, target)
    
    @property
    def cache_key(self) -> str:
        """Flat string form used by string-keyed stores."""
        return f"{self.source_lang}_{self.target_lang}_{self.term}"


@dataclass(frozen=True)
class TranslationEntry:
    """A generated translation, immutable once created."""
    
    key: LexiconKey
    display_term: str
    payload: MappingProxyType = field(repr=False)
    
    def __post_init__(self):
        if not isinstance(self.payload, MappingProxyType):
            object.__setattr__(self, 'payload', MappingProxyType(dict(self.payload)))
    
    @property
    def main_translation(self) -> str:
        return self.payload.get('mainTranslation', '')
    
    @property
    def category(self) -> str:
        grammar = self.payload.get('grammar') or {}
        return grammar.get('partOfSpeech') or 'Other'
    
    def to_dict(self) -> dict:
        """Plain JSON-serializable copy of the payload."""
        return dict(self.payload)

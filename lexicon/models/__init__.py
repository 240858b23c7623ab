"""Database models for the lexicon application."""

from .lexicon_entry import LexiconEntry
from .search_history import SearchHistory

__all__ = ['LexiconEntry', 'SearchHistory']

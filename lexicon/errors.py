"""Error types raised across the lookup tiers.

A plain miss at any tier is not an error: lookups return ``None``.
"""


class LexiconError(Exception):
    """Base class for lexicon errors."""


class GenerationFailed(LexiconError):
    """The generative API errored, timed out, or is unavailable."""


class MalformedPayload(GenerationFailed):
    """Generated data does not have the required translation shape."""


class PersistenceWriteFailed(LexiconError):
    """A cache or store write failed after the result was already in hand."""

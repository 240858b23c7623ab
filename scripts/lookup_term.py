#!/usr/bin/env python3
"""Look a term up through the session cache, the backend, and Gemini.

Usage:
    python scripts/lookup_term.py <term> <source_lang> <target_lang>

Environment:
    LEXICON_URL       Backend base URL (default http://localhost:5000)
    GEMINI_API_KEY    Key for generation on a full miss
    LEXICON_STORE     Local session/history file (default ~/.lexicon/local.json)
    LEXICON_CLIENT_ID Optional id for server-side history
"""

import os
import sys

# Add parent directory to path to import lexicon modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lexicon.client import create_client
from lexicon.errors import GenerationFailed


def lookup_term(term: str, source_lang: str, target_lang: str) -> bool:
    """Resolve one term and print the entry.

    Returns:
        True if a translation was shown, False on failure
    """
    coordinator = create_client(
        os.getenv('LEXICON_URL', 'http://localhost:5000'),
        os.getenv('GEMINI_API_KEY', ''),
        store_path=os.getenv('LEXICON_STORE', os.path.expanduser('~/.lexicon/local.json')),
        client_id=os.getenv('LEXICON_CLIENT_ID'),
    )
    
    try:
        resolution = coordinator.submit(term, source_lang, target_lang)
    except ValueError as e:
        print(f"❌ {e}")
        return False
    except GenerationFailed as e:
        print(f"❌ Translation failed: {e} (try again)")
        return False
    
    entry = resolution.entry
    payload = entry.payload
    grammar = payload.get('grammar') or {}
    
    print(f"\n📖 {entry.display_term}  →  {entry.main_translation}   [{resolution.tier}]")
    print(f"   {grammar.get('partOfSpeech', 'Other')}"
          + (f", {grammar['gender']}" if grammar.get('gender') else '')
          + (f", pl. {grammar['plural']}" if grammar.get('plural') else ''))
    if payload.get('alternatives'):
        print(f"   Also: {', '.join(payload['alternatives'])}")
    for example in payload.get('examples', [])[:3]:
        print(f"   • {example['text']}\n     {example['translation']}  ({example['sourceTitle']})")
    if payload.get('etymology'):
        print(f"   Etymology: {payload['etymology']}")
    
    print(f"\n🕘 Recent: {', '.join(h.term for h in coordinator.history.items()[:10])}")
    return True


if __name__ == '__main__':
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    
    success = lookup_term(sys.argv[1], sys.argv[2], sys.argv[3])
    sys.exit(0 if success else 1)

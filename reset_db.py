"""Database reset script for development.

Drops the lexicon tables and recreates them with the current schema.
Before asking for confirmation it reports how many translations (per
language pair) and history rows are about to be lost, since every
dropped translation costs a generation call to rebuild.

USE ONLY IN DEVELOPMENT.

Usage:
    python reset_db.py
"""

import sys

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from lexicon import create_app, db
from lexicon.models import LexiconEntry, SearchHistory


def summarize_tables():
    """Print what the reset would delete. Returns the translation count."""
    try:
        pairs = db.session.query(
            LexiconEntry.source_lang,
            LexiconEntry.target_lang,
            func.count(LexiconEntry.id)
        ).group_by(LexiconEntry.source_lang, LexiconEntry.target_lang).all()
        history_rows = SearchHistory.query.count()
        clients = db.session.query(func.count(func.distinct(SearchHistory.client_id))).scalar()
    except SQLAlchemyError as e:
        db.session.rollback()
        print(f"Could not read current tables ({type(e).__name__}); they may not exist yet.")
        return 0

    total = sum(count for _, _, count in pairs)
    print(f"global_lexicon: {total} translations")
    for source_lang, target_lang, count in sorted(pairs):
        print(f"  {source_lang} -> {target_lang}: {count}")
    print(f"search_history: {history_rows} rows from {clients} clients")
    return total


app = create_app()

with app.app_context():
    print("="*60)
    print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
    total = summarize_tables()
    print("="*60)
    print("WARNING: This will DELETE ALL DATA in the database!")
    if total:
        print(f"All {total} translations will have to be generated again.")
    print("="*60)

    confirm = input("Type 'yes' to confirm: ")
    if confirm.lower() != 'yes':
        print("Aborted.")
        sys.exit(0)

    print("\nDropping all tables...")
    db.drop_all()

    print("Creating all tables with current schema...")
    db.create_all()

    print("\nDatabase reset complete!")
    print("You can now start the server with: python wsgi.py")

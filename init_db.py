#!/usr/bin/env python
"""Database initialization script for the lexicon backend.

Creates the global_lexicon and search_history tables from the
SQLAlchemy models. Safe to run more than once.

Usage:
    python init_db.py
"""

import os
import sys
from lexicon import create_app, db

def init_database():
    """Initialize the database by creating all tables."""
    
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)
    
    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")
    
    with app.app_context():
        try:
            print("Creating database tables...")
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
            
            db.create_all()
            
            tables_info = [
                ("global_lexicon", "Generated translations, one per (term, source, target)"),
                ("search_history", "Per-client lookup history"),
            ]
            
            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  ✓ {table_name:<25} - {description}")
            
            print(f"\n{'='*60}")
            print("✅ Database initialization complete!")
            print(f"{'='*60}\n")
            print("Next steps:")
            print("  1. Start the Flask server: python wsgi.py")
            print("  2. Look a word up: python scripts/lookup_term.py Haus de uz")
            print("\n")
            
            return True
            
        except Exception as e:
            print(f"❌ Error creating database: {e}\n")
            print(f"Traceback: {type(e).__name__}: {str(e)}")
            return False

if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)

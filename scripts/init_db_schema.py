"""
Database schema initialization
------------------------------
Creates missing tables and lists the tables that exist afterwards.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

# load the project's .env file
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# make the app package importable when run as a script
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import inspect

from app.db.init_db import init_db
from app.db.session import create_store


def init_db_schema() -> None:
    """Create tables and print what is there."""
    store = create_store()
    try:
        print("Initializing database schema...")
        init_db(store)
        print("Tables created.")

        print("\nTables:")
        for name in sorted(inspect(store.engine).get_table_names()):
            print(f"  - {name}")
    finally:
        store.close()


if __name__ == "__main__":
    init_db_schema()

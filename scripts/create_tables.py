#!/usr/bin/env python3
"""
Create All Database Tables Script

Creates every table of the Mangashelf schema from the SQLAlchemy models.
Production deployments should prefer ``alembic upgrade head``.

Usage:
    python scripts/create_tables.py
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from mangashelf.core.config import settings
from mangashelf.core.database import engine, init_db


def create_all_tables() -> bool:
    """Create all database tables."""
    print("🏗️  Creating All Database Tables")
    print("=" * 40)
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Database: {settings.DATABASE_URL[:50]}...")
    print()

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            print("✅ Database connection successful")

        print("🔨 Creating tables...")
        init_db()

        table_names = sorted(inspect(engine).get_table_names())
        print(f"✅ Successfully created {len(table_names)} tables:")
        for table in table_names:
            print(f"  - {table}")
        return True

    except SQLAlchemyError as e:
        print(f"❌ Database error: {str(e)}")
        return False


def main():
    if create_all_tables():
        print("\n📋 Next steps:")
        print("  1. Run: python scripts/create_admin.py <username>")
        print("  2. Or import an existing folder: python scripts/import_library.py")
        sys.exit(0)
    print("\n❌ Table creation failed!")
    sys.exit(1)


if __name__ == "__main__":
    main()

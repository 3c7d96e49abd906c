#!/usr/bin/env python3
"""
Create Admin Script

Creates an admin account with a random temporary password, or promotes the
account to admin when the username is already taken.

Usage:
    python scripts/create_admin.py <username>
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy.exc import SQLAlchemyError

from mangashelf.core.database import SessionLocal
from mangashelf.services.maintenance import ensure_admin


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/create_admin.py <username>")
        sys.exit(1)
    username = sys.argv[1].strip()

    db = SessionLocal()
    try:
        user, password = ensure_admin(db, username)
    except SQLAlchemyError as e:
        print(f"❌ Database error: {str(e)}")
        sys.exit(1)
    finally:
        db.close()

    if password is None:
        print(f"✅ User '{username}' already existed; role set to admin.")
        print("   Keep using the existing password.")
    else:
        print(f"✅ Created admin user '{username}'")
        print(f"🔑 Temporary password: {password}")
    sys.exit(0)


if __name__ == "__main__":
    main()

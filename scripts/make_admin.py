#!/usr/bin/env python3
"""
Promote an existing user to admin.

Usage:
    python scripts/make_admin.py <username>
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy.exc import SQLAlchemyError

from mangashelf.core.database import SessionLocal
from mangashelf.crud.user import crud_user


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/make_admin.py <username>")
        sys.exit(1)
    username = sys.argv[1].strip()

    db = SessionLocal()
    try:
        affected = crud_user.promote_to_admin(db, username=username)
    except SQLAlchemyError as e:
        print(f"❌ Failed to update user: {str(e)}")
        sys.exit(1)
    finally:
        db.close()

    if affected == 0:
        print("❌ No user found with that username.")
        sys.exit(1)
    print(f"✅ User '{username}' promoted to admin.")
    sys.exit(0)


if __name__ == "__main__":
    main()

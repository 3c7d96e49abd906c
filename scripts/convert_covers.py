#!/usr/bin/env python3
"""
Normalize every cover to <slug>/cover.webp.

Existing covers (any supported format) are re-encoded as WebP with Pillow
and the stored cover path is updated to match.

Usage:
    python scripts/convert_covers.py
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from mangashelf.core.database import SessionLocal
from mangashelf.services.maintenance import convert_covers


def main():
    db = SessionLocal()
    try:
        converted, skipped = convert_covers(db)
    finally:
        db.close()

    print(f"✅ Cover conversion completed: {converted} converted, {skipped} skipped.")
    sys.exit(0)


if __name__ == "__main__":
    main()

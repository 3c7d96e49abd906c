#!/usr/bin/env python3
"""
Import an on-disk library into the database.

Every folder under MANGA_DIR becomes a manga and every subfolder a chapter
whose pages are its image files in natural order. Rows that already exist
are skipped, so the script can be re-run safely.

Usage:
    python scripts/import_library.py
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from mangashelf.core.config import settings
from mangashelf.core.database import SessionLocal, init_db
from mangashelf.services.maintenance import import_library


def main():
    print("📚 Importing library")
    print("=" * 40)
    print(f"Media folder: {Path(settings.MANGA_DIR).resolve()}")
    print()

    init_db()
    db = SessionLocal()
    try:
        report = import_library(db)
    finally:
        db.close()

    for slug in report.manga_created:
        print(f"  + manga {slug}")
    for slug in report.chapters_created:
        print(f"  + chapter {slug}")
    for slug in report.errors:
        print(f"  ❌ failed {slug}")

    print(
        f"\n🎉 Import complete: {len(report.manga_created)} manga, "
        f"{len(report.chapters_created)} chapters"
    )
    sys.exit(1 if report.errors else 0)


if __name__ == "__main__":
    main()

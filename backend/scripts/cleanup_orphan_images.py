"""Cleanup orphan images (original + every derivative size).

Usage:
  python scripts/cleanup_orphan_images.py            # dry-run
  python scripts/cleanup_orphan_images.py --apply    # delete orphan image sets
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
from app.services import editor_image_service
from app.services.object_store import get_object_store


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Actually delete orphan image sets")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    db = SessionLocal()
    try:
        result = editor_image_service.cleanup_orphan_images(db, get_object_store(), dry_run=not args.apply)
    finally:
        db.close()

    print("Orphan image cleanup result")
    print(f"  dry_run: {result['dry_run']}")
    print(f"  referenced_count: {result['referenced_count']}")
    print(f"  existing_count: {result['existing_count']}")
    print(f"  orphan_count: {result['orphan_count']}")
    print(f"  deleted_count: {result['deleted_count']}")
    if result["orphan_base_names"]:
        print("  orphan_base_names:")
        for name in result["orphan_base_names"]:
            print(f"    - {name}")


if __name__ == "__main__":
    main()

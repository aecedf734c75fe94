"""Generate missing derivative sizes for stored editor originals.

Usage:
  python scripts/backfill_derivatives.py
  python scripts/backfill_derivatives.py --namespace editor
"""
import argparse
import asyncio
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.services.derivative_pipeline import DerivativePipeline
from app.services.object_store import get_object_store


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--namespace", default="editor", help="Original image namespace to scan")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    runs = asyncio.run(DerivativePipeline(get_object_store()).backfill(namespace=args.namespace))

    print("Derivative backfill result")
    print(f"  processed: {len(runs)}")
    for run in runs:
        status = "ok" if not run.failed else f"failed={','.join(run.failed)}"
        print(f"    - {run.key} [{run.state.value}] {status}")


if __name__ == "__main__":
    main()

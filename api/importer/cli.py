"""
Import scraped restaurants from a JSON file.

Usage (from `api/`, or anywhere once the package is installed):
    python -m importer.cli --file ./file/restaurants.json

The file holds a JSON array of records shaped like the
`POST /api/places/import` body items.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from core import db
from core.logging import configure_logging

from . import service

logger = logging.getLogger(__name__)


def read_records(path: Path) -> list[Any]:
    with path.open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    if isinstance(data, dict) and isinstance(data.get("restaurants"), list):
        return data["restaurants"]
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of restaurant records.")
    return data


async def run_import(path: Path) -> service.ImportSummary:
    records = read_records(path)
    pool = await db.create_pool()
    try:
        return await service.import_restaurants(pool, records)
    finally:
        await db.close_pool(pool)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import restaurant records into places.")
    parser.add_argument(
        "--file",
        type=Path,
        default=Path("file/restaurants.json"),
        help="Path to the restaurants JSON file (default: ./file/restaurants.json)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging()

    if not args.file.exists():
        logger.error("import_file_missing path=%s", args.file)
        return 1

    try:
        summary = asyncio.run(run_import(args.file))
    except (OSError, ValueError) as exc:
        logger.error("import_file_unreadable path=%s error=%s", args.file, exc)
        return 1

    for failure in summary.failures:
        logger.info("import_failure label=%s error=%s", failure.label, failure.error)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

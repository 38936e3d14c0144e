"""
Pre-generate the daily challenge pool.

Run once per day (e.g. from a scheduled CI job) so clients can fetch the pool
as a static file instead of hitting the card catalog themselves.

Usage:
    python -m poolbuilder.jobs.generate_daily --output daily.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from poolbuilder.services.catalog import HttpCatalog, create_catalog_client
from poolbuilder.services.sealed import PoolSnapshot, build_daily_snapshot

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("daily.json")


def write_snapshot(snapshot: PoolSnapshot, output_path: Path) -> int:
    """
    Write a snapshot as compact JSON.

    Returns:
        Number of bytes written
    """
    payload = json.dumps(snapshot.to_dict(), separators=(",", ":"), ensure_ascii=False)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(payload, encoding="utf-8")
    return len(payload.encode("utf-8"))


async def run_generate_daily(output_path: Path = DEFAULT_OUTPUT) -> PoolSnapshot:
    """Generate today's pool and write it to output_path."""
    try:
        async with create_catalog_client() as client:
            snapshot = await build_daily_snapshot(HttpCatalog(client))
        size = write_snapshot(snapshot, output_path)
    except Exception as e:
        logger.error("Failed to generate daily pool: %s", e)
        raise

    logger.info("Wrote %s (%d cards, %.1f KB)", output_path, len(snapshot.pool), size / 1024)
    return snapshot


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Pre-generate the daily challenge pool")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to write the snapshot (default: daily.json)",
    )
    args = parser.parse_args(argv)

    try:
        asyncio.run(run_generate_daily(args.output))
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    main()

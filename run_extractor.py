#!/usr/bin/env python3
"""
CLI script to extract Hitomi.la gallery metadata.

Each argument is either a saved gallery page on disk (extracted offline) or
a gallery/reader address (downloaded first).  Reader addresses are
rewritten to the gallery page automatically.

Usage:
    python run_extractor.py https://hitomi.la/galleries/1083230.html
    python run_extractor.py https://hitomi.la/reader/1083230.html -o out.json
    python run_extractor.py sample_gallery.html -v
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from hitomi_metadata.main import MetadataSource
from hitomi_metadata.exceptions import HitomiSourceError, InvalidAddressError
from hitomi_metadata.logger import setup_logger


async def extract_one(source: MetadataSource, item: str) -> dict:
    """Extract one file or address into a JSON-ready result entry."""
    try:
        path = Path(item)
        if path.is_file():
            record = source.extract_file(path)
        elif source.can_handle(item):
            record = await source.extract(item)
        else:
            raise InvalidAddressError(
                "Neither a local file nor a Hitomi.la gallery address",
                address=item
            )
    except HitomiSourceError as e:
        print(f"  ✗ {item}: {e.message}", file=sys.stderr)
        return {"source": item, "status": "error", "error": e.to_response()}

    print(f"  ✓ {item}: {record.title} ({len(record.pages)} pages)", file=sys.stderr)
    return {"source": item, "status": "success", "metadata": record.model_dump(mode="json")}


async def run(items: list[str]) -> list[dict]:
    source = MetadataSource()
    # Extractions share no state, so they can run side by side
    return list(await asyncio.gather(*(extract_one(source, item) for item in items)))


def main() -> int:
    parser = argparse.ArgumentParser(description="Extract metadata from Hitomi.la gallery pages")
    parser.add_argument("items", nargs="+", help="Gallery/reader addresses or saved HTML files")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    if args.verbose:
        setup_logger(level=logging.DEBUG)

    results = asyncio.run(run(args.items))

    # ensure_ascii=False keeps Japanese titles readable
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)

    return 1 if any(r["status"] == "error" for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Load candidate themes from a text file into the database.

One theme per line. Blank lines and lines starting with '#' are ignored,
and themes that already exist are skipped, so the script can be rerun.

Usage:
    python scripts/load_themes.py [themes.txt]
"""

import argparse
import asyncio
import sys
from pathlib import Path

import logfire

from jamvote.application.usecase.theme import ImportThemesRequest, ImportThemesUseCase
from jamvote.config import Settings
from jamvote.util.di.container import create_container
from jamvote.util.observability import configure_logfire


async def load(path: Path) -> int:
    container = create_container(with_fastapi=False)
    try:
        # Request scope commits the imported themes on exit
        async with container() as request_container:
            use_case = await request_container.get(ImportThemesUseCase)
            response = await use_case.execute(
                ImportThemesRequest(lines=path.read_text(encoding="utf-8").splitlines())
            )
    finally:
        await container.close()

    print(f"Loaded {response.loaded} new themes")
    if response.skipped:
        print(f"Skipped {response.skipped} duplicate themes")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", nargs="?", default="themes.txt", type=Path)
    args = parser.parse_args()

    configure_logfire(Settings())

    if not args.path.is_file():
        print(f"Themes file not found: {args.path}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(load(args.path))
    except Exception as e:
        logfire.error(
            "Theme import failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())

"""Re-index products, templates and documents from the command line.

Usage:
    python -m app.jobs.index_content --type all
"""

import argparse
import asyncio
import sys
from typing import Dict, Optional, Sequence

from app.core.database import async_session_maker, close_database
from app.schemas.search import IndexingReport
from app.services.search.indexing_service import IndexingService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

INDEX_TYPES = ("all", "products", "templates", "documents")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Index QMS content into the vector store")
    parser.add_argument("--type", choices=INDEX_TYPES, default="all", help="Content type to index")
    return parser.parse_args(argv)


async def run(content_type: str) -> Dict[str, IndexingReport]:
    async with async_session_maker() as session:
        service = IndexingService(session)
        return await service.index_by_type(content_type)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    LOGGER.info(f"Starting indexing job for '{args.type}'")
    try:
        reports = await run(args.type)
    finally:
        await close_database()

    failed = 0
    for name, report in reports.items():
        LOGGER.info(f"{name}: indexed {report.indexed}/{report.total}, failed {report.failed}")
        failed += report.failed
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

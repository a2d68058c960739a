#!/usr/bin/env python3
"""
Command-line interface for the ushort service.

Usage:
    ushort-cli shorten <url>
    ushort-cli resolve <short_code>
    ushort-cli info <short_code>
    ushort-cli list [--limit N] [--by-access]
    ushort-cli stats
    ushort-cli sweep [--ttl-days N]
    ushort-cli init-db
    ushort-cli health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from .lib.database import create_store
from .lib.errors import GenerationExhausted, InvalidInput
from .lib.service import MappingLifecycle
from .lib.shortcode import ShortCodeGenerator
from .lib.common.logging_config import setup_logging


class UshortCLI:
    """Command-line interface for the mapping lifecycle."""

    def __init__(
        self,
        db_url: str,
        ttl_days: int = 90,
        verbose: bool = False,
        service: Optional[MappingLifecycle] = None,
    ):
        """Initialize CLI."""
        self.db_url = db_url
        self.ttl_days = ttl_days
        self.verbose = verbose
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.store = service.store if service else None
        self.service = service

    async def initialize(self, create_tables: bool = False):
        """Initialize store and service."""
        if self.service is not None:
            return

        self.logger.info("Initializing ushort...")
        self.store = create_store(self.db_url, create_tables=create_tables, logger=self.logger)
        self.service = MappingLifecycle(
            store=self.store,
            short_code_generator=ShortCodeGenerator(logger=self.logger),
            ttl_days=self.ttl_days,
            logger=self.logger,
        )
        self.logger.info("Initialization complete")

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    @staticmethod
    def _emit(payload: dict) -> int:
        print(json.dumps({"success": True, **payload}, indent=2))
        return 0

    @staticmethod
    def _fail(message: str) -> int:
        print(json.dumps({"success": False, "error": message}, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str):
        """Shorten a URL (returns the existing mapping for a known URL)."""
        try:
            mapping = await self.service.create_or_get(url)
        except (InvalidInput, GenerationExhausted) as e:
            return self._fail(str(e))

        return self._emit({
            **mapping.to_dict(),
            "message": f"Successfully shortened URL to: {mapping.short_code}",
        })

    async def resolve(self, short_code: str):
        """Resolve a short code like a visitor would (counts an access)."""
        try:
            outcome = await self.service.resolve(short_code)
        except InvalidInput as e:
            return self._fail(str(e))

        if not outcome.is_found:
            return self._fail(f"Short code '{short_code}' {outcome.status.value.replace('_', ' ')}")

        return self._emit({"short_code": short_code, "original_url": outcome.original_url})

    async def info(self, short_code: str):
        """Show a mapping without counting an access."""
        mapping = await self.service.get_mapping(short_code)
        if mapping is None:
            return self._fail(f"Short code '{short_code}' not found")
        return self._emit(mapping.to_dict())

    async def list_urls(self, limit: int = 100, by_access: bool = False):
        """List recent (or most accessed) URLs."""
        if by_access:
            mappings = await self.service.list_most_accessed(limit)
        else:
            mappings = await self.service.list_recent(limit)

        return self._emit({
            "count": len(mappings),
            "urls": [m.to_dict() for m in mappings],
        })

    async def stats(self):
        """Show service-wide statistics."""
        return self._emit({"statistics": await self.service.get_statistics()})

    async def sweep(self, ttl_days: Optional[int] = None):
        """Delete expired mappings now."""
        try:
            deleted = await self.service.sweep_expired(ttl_days)
        except InvalidInput as e:
            return self._fail(str(e))
        return self._emit({"deleted": deleted})

    async def init_db(self):
        """Create the backing table."""
        await self.store.ensure_schema()
        healthy = await self.store.health_check()
        if not healthy:
            return self._fail("Database health check failed")
        return self._emit({"message": "Tables initialized successfully"})

    async def health(self):
        """Check service health."""
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics()

        print(json.dumps({
            "success": True,
            "health": health_status,
            "statistics": stats,
        }, indent=2))

        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ushort-cli",
        description="ushort CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Follow a code (counts an access)
  %(prog)s resolve aB3xY9kQ

  # Delete mappings idle for more than 30 days
  %(prog)s sweep --ttl-days 30
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "memory://"),
        help="Store URL (default: from DATABASE_URL env or memory://)"
    )

    parser.add_argument(
        "--ttl-days",
        dest="service_ttl_days",
        type=int,
        default=int(os.getenv("TTL_DAYS", "90")),
        help="Mapping TTL in days (default: from TTL_DAYS env or 90)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("short_code", help="Short code to resolve")

    info_parser = subparsers.add_parser("info", help="Show a mapping")
    info_parser.add_argument("short_code", help="Short code to look up")

    list_parser = subparsers.add_parser("list", help="List URLs")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")
    list_parser.add_argument("--by-access", action="store_true", help="Order by access count")

    subparsers.add_parser("stats", help="Show statistics")

    sweep_parser = subparsers.add_parser("sweep", help="Delete expired mappings")
    sweep_parser.add_argument("--ttl-days", type=int, default=None, help="TTL override in days")

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("health", help="Check service health")

    return parser


async def main(argv: Optional[List[str]] = None, service: Optional[MappingLifecycle] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = UshortCLI(
        db_url=args.db_url,
        ttl_days=args.service_ttl_days,
        verbose=args.verbose,
        service=service,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "resolve":
            return await cli.resolve(args.short_code)
        elif args.command == "info":
            return await cli.info(args.short_code)
        elif args.command == "list":
            return await cli.list_urls(args.limit, args.by_access)
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "sweep":
            return await cli.sweep(args.ttl_days)
        elif args.command == "init-db":
            return await cli.init_db()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except Exception as e:
        return UshortCLI._fail(f"Unexpected error: {str(e)}")
    finally:
        if service is None:
            await cli.cleanup()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

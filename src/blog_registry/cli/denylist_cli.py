"""
Command-line interface for denylist administration.

The registry's public surface has no denylist mutation; the denylist is managed
externally, directly against the MongoDB-backed registry state.

    blog-registry-denylist list
    blog-registry-denylist add spammer.near bot.near
    blog-registry-denylist remove spammer.near
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from pymongo.errors import PyMongoError

from blog_registry.config import settings
from blog_registry.database import RegistryState, db_manager
from blog_registry.managers.blog_registry_manager import BlogRegistryManager
from blog_registry.managers.logging_manager import get_logger

logger = get_logger(prefix="[DenylistCLI]")


class DenylistCLI:
    """CLI tool for denylist operations."""

    def __init__(self, registry: BlogRegistryManager):
        self.registry = registry

    async def add(self, accounts: List[str]) -> int:
        added = await self.registry.denylist_add(accounts)
        print(f"Added {added} account(s) to the denylist")
        return 0

    async def remove(self, accounts: List[str]) -> int:
        removed = await self.registry.denylist_remove(accounts)
        print(f"Removed {removed} account(s) from the denylist")
        return 0

    async def list(self) -> int:
        for account_id in await self.registry.get_denylist():
            print(account_id)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blog-registry-denylist",
        description="Manage the blog registry denylist",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add accounts to the denylist")
    add_parser.add_argument("accounts", nargs="+", help="Account IDs")

    remove_parser = subparsers.add_parser("remove", help="Remove accounts from the denylist")
    remove_parser.add_argument("accounts", nargs="+", help="Account IDs")

    subparsers.add_parser("list", help="List denylisted accounts")
    return parser


async def run_command(args: argparse.Namespace, registry: BlogRegistryManager) -> int:
    cli = DenylistCLI(registry)
    if args.command == "add":
        return await cli.add(args.accounts)
    if args.command == "remove":
        return await cli.remove(args.accounts)
    return await cli.list()


async def _main(args: argparse.Namespace) -> int:
    await db_manager.connect()
    try:
        registry = BlogRegistryManager(RegistryState.from_database(db_manager))
        return await run_command(args, registry)
    finally:
        await db_manager.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not settings.uses_mongodb:
        print("The denylist CLI requires STORAGE_BACKEND=mongodb", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_main(args))
    except (ConnectionError, PyMongoError) as e:
        logger.error("Could not reach the registry database: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

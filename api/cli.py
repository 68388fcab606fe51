#!/usr/bin/env python3
"""CLI for PRSK master API management tasks.

Usage:
    python -m cli <command>

Commands:
    migrate [target]       Apply migrations (default: head)
    downgrade [target]     Revert migrations (default: -1)
    current                Show the current revision
    create-tables          Create missing tables straight from the models
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_DIR = Path(__file__).resolve().parent


def get_alembic_config() -> Config:
    """Alembic config with an absolute script_location, usable from any cwd."""
    cfg = Config(str(API_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(API_DIR / "alembic"))
    return cfg


def cmd_migrate(target: str) -> int:
    logger.info("Running database migrations to %s...", target)
    command.upgrade(get_alembic_config(), target)
    logger.info("Migrations complete")
    return 0


def cmd_downgrade(target: str) -> int:
    logger.info("Reverting database migrations to %s...", target)
    command.downgrade(get_alembic_config(), target)
    return 0


def cmd_current() -> int:
    command.current(get_alembic_config())
    return 0


async def create_tables() -> None:
    """Create all tables defined in models.

    create_all() only creates missing tables; use migrations for changes.
    """
    import models  # noqa: F401
    from core.database import Base, create_engine, dispose_engine

    engine = create_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await dispose_engine(engine)


def cmd_create_tables() -> int:
    logger.info("Creating database tables...")
    asyncio.run(create_tables())
    logger.info("Tables created successfully")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PRSK master API CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    migrate = subparsers.add_parser("migrate", help="Apply database migrations")
    migrate.add_argument("target", nargs="?", default="head")

    downgrade = subparsers.add_parser("downgrade", help="Revert database migrations")
    downgrade.add_argument("target", nargs="?", default="-1")

    subparsers.add_parser("current", help="Show the current revision")
    subparsers.add_parser(
        "create-tables",
        help="Create missing tables from the models (no migration history)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    match args.command:
        case "migrate":
            return cmd_migrate(args.target)
        case "downgrade":
            return cmd_downgrade(args.target)
        case "current":
            return cmd_current()
        case "create-tables":
            return cmd_create_tables()
        case _:
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())

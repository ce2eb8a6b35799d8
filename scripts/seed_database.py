#!/usr/bin/env python3
"""
CLI script to seed the database with the default emission factors.

Usage:
    # Basic seeding
    python scripts/seed_database.py

    # Clear existing factors before seeding
    python scripts/seed_database.py --clear

    # Seed another environment's database
    python scripts/seed_database.py --config production.toml
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import get_config
from app.database.base import get_db_url, get_engine_kw
from app.database.session_manager.db_session import Database
from app.services.seed_database import FactorSeeder
from app.utils.constants import ConfigFile
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()


def print_header(text: str, style: str = "bold cyan"):
    """Print a formatted header using Rich Panel."""
    console.print(
        Panel(
            Text(text, justify="center", style=style),
            border_style="cyan",
            padding=(1, 2),
        )
    )


def print_config(args):
    config_table = Table(show_header=False, box=None, padding=(0, 2))
    config_table.add_column("Setting", style="bold yellow")
    config_table.add_column("Value", style="green")

    config_table.add_row("Config", args.config)
    config_table.add_row("Clear Existing", "Yes" if args.clear else "No")

    console.print(config_table)
    console.print()


def print_stats(stats: dict):
    """Print seeding statistics using Rich Table."""
    print_header("SEEDING STATISTICS", "bold green")

    stats_table = Table(show_header=True, box=None, padding=(0, 2))
    stats_table.add_column("Category", style="bold cyan", width=30)
    stats_table.add_column("Factors", justify="right", style="bold green")

    for category, count in sorted(stats["by_category"].items()):
        stats_table.add_row(category, str(count))

    console.print(stats_table)
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("Label", style="bold yellow")
    summary.add_column("Value", style="bold magenta")
    summary.add_row("Total Factors", str(stats["emission_factors"]))
    if stats["cleared"]:
        summary.add_row("Cleared", str(stats["cleared"]))

    console.print(summary)
    console.print()


async def main():
    """Main entry point for the seeding script."""
    parser = argparse.ArgumentParser(
        description="Seed the database with the default DEFRA emission factors"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete stored emission factors before seeding",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=ConfigFile.DEVELOPMENT,
        help=f"Configuration file under app/cfg (default: {ConfigFile.DEVELOPMENT})",
    )

    args = parser.parse_args()

    print_header("EMISSION FACTOR SEEDING", "bold cyan")
    print_config(args)

    try:
        config = get_config(args.config)
        async_db_url = get_db_url(config)
        Database.init(async_db_url, engine_kw=get_engine_kw(async_db_url))
        logger.info("Database initialized")

        with console.status("[bold cyan]Seeding emission factors...", spinner="dots"):
            async with FactorSeeder() as seeder:
                stats = await seeder.seed_all(clear_existing=args.clear)

        print_stats(stats)

        console.print(
            Panel(
                Text("SEEDING COMPLETED SUCCESSFULLY", justify="center"),
                border_style="bold green",
                style="bold green",
            )
        )

    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)

        console.print()
        console.print(
            Panel(
                f"[bold red]SEEDING FAILED[/bold red]\n\n[red]{e!s}[/red]",
                border_style="bold red",
            )
        )
        console.print()
        sys.exit(1)
    finally:
        await Database.dispose()


if __name__ == "__main__":
    asyncio.run(main())

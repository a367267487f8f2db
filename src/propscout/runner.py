"""Command-line access to the explore and compare engines.

Run via: python -m propscout.runner explore --search Powai
     or: python -m propscout.runner compare ID1 ID2 ID3
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .catalog import CatalogClient
from .comparison import CompareSession, build_comparison_rows, generate_csv
from .discovery import ExploreSession
from .models.property import BoundingBox, Property

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _listing_table(properties: list[Property], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Location")
    table.add_column("Price", justify="right")
    table.add_column("Beds", justify="right")
    table.add_column("ROI", justify="right")
    table.add_column("Yield", justify="right")

    for p in properties:
        table.add_row(
            p.id,
            p.name,
            p.location_label,
            f"{p.price:,.0f}" if p.price is not None else "N/A",
            str(p.bedrooms) if p.bedrooms is not None else "-",
            f"{p.projected_return:g}%" if p.projected_return is not None else "-",
            f"{p.rental_yield:g}%" if p.rental_yield is not None else "-",
        )
    return table


async def run_explore(
    api_url: Optional[str],
    search: Optional[str],
    bbox: Optional[list[float]],
) -> int:
    """Fetch the catalog and print what the explore list would show."""
    async with CatalogClient(api_url) as catalog:
        session = ExploreSession(catalog)
        await session.load(search)

        if bbox:
            south, west, north, east = bbox
            session.on_bounds_change(BoundingBox.from_corners(south, west, north, east))
            await session.viewport.wait()

        console.print(f"[dim]{session.status_message}[/dim]")
        if session.empty_message:
            console.print(f"[yellow]{session.empty_message}[/yellow]")
        else:
            console.print(
                _listing_table(session.visible, f"Properties ({session.visible_count})")
            )
        session.close()
    return session.visible_count


async def run_compare(
    api_url: Optional[str],
    property_ids: list[str],
    as_csv: bool = False,
) -> int:
    """Load up to three properties and print their highlights and table."""
    logger = logging.getLogger(__name__)

    async with CatalogClient(api_url) as catalog:
        picked = []
        for property_id in property_ids:
            prop = await catalog.fetch_property_by_id(property_id)
            if prop is None:
                logger.warning(f"Property {property_id} not found, skipping")
                continue
            picked.append(prop)

        session = CompareSession(catalog, initial=picked)
        if len(picked) > len(session.properties):
            logger.warning(
                f"Only the first {session.comparison.capacity} properties are compared"
            )
        highlights = await session.start()
        await session.close()

    if not session.properties:
        console.print("[yellow]No properties to compare.[/yellow]")
        return 0

    if as_csv:
        console.print(generate_csv(session.properties), markup=False, highlight=False)
        return len(session.properties)

    if highlights:
        console.print("[bold]Investment Highlights[/bold]")
        console.print(f"  Best ROI:       {highlights.best_roi.name} ({highlights.best_roi.value})")
        console.print(f"  Best Yield:     {highlights.best_yield.name} ({highlights.best_yield.value})")
        console.print(f"  Recommendation: {highlights.recommendation.name}")
        console.print()

    rows = build_comparison_rows(session.properties)
    table = Table(title=f"Property Comparison {session.capacity_label}")
    for header in rows[0]:
        table.add_column(header)
    for row in rows[1:]:
        table.add_row(*row)
    console.print(table)
    return len(session.properties)


def main() -> None:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="PropScout explore & compare",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m propscout.runner explore
  python -m propscout.runner explore --search Andheri --bbox 19.0 72.8 19.2 73.0
  python -m propscout.runner compare 64f1 64f2 64f3
  python -m propscout.runner compare 64f1 64f2 --csv > comparison.csv
        """,
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Catalog API root (default: PROPSCOUT_API_URL or http://localhost:5000)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    explore = subparsers.add_parser("explore", help="List properties in a viewport")
    explore.add_argument("--search", default=None, help="Free-text catalog search")
    explore.add_argument(
        "--bbox",
        nargs=4,
        type=float,
        metavar=("SOUTH", "WEST", "NORTH", "EAST"),
        help="Only show properties inside this box",
    )

    compare = subparsers.add_parser("compare", help="Compare up to three properties")
    compare.add_argument("ids", nargs="+", help="Property IDs")
    compare.add_argument("--csv", action="store_true", help="Print the table as CSV")

    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    try:
        if args.command == "explore":
            asyncio.run(run_explore(args.api_url, args.search, args.bbox))
        else:
            asyncio.run(run_compare(args.api_url, args.ids, as_csv=args.csv))
        sys.exit(0)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        logging.getLogger(__name__).error(f"Error: {e}")
        if args.verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()

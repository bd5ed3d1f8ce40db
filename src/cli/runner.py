# src/cli/runner.py

"""Headless CLI commands that reuse the service layer."""

import asyncio
import json
import logging
import sys
from datetime import date

from rich.console import Console
from rich.table import Table

from src.errors import NaftasError
from src.models.bookmark import Bookmark
from src.models.locality import AggregatedLocality
from src.services.attractiveness import indicator_tier
from src.services.health_checker import HealthChecker
from src.services.location_service import LocationService, parse_coordinates
from src.services.price_service import PriceService, load_price_source
from src.storage.preferences_store import PreferencesStore

logger = logging.getLogger("naftas.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_TIER_STYLES = {
    "high": "green",
    "medium": "yellow",
    "low": "dark_orange",
    "poor": "red",
}


def _print_table(localities: dict[str, AggregatedLocality]) -> None:
    """Render a Rich table of prices per brand and fuel to stdout."""
    for name, locality in localities.items():
        table = Table(
            title=f"Fuel prices: {name}",
            show_lines=True,
            title_style="bold cyan",
        )
        table.add_column("Brand", style="magenta")
        table.add_column("Fuel")
        table.add_column("Price", justify="right", style="green")
        table.add_column("Effective", style="dim")
        table.add_column("Score", justify="center")

        for brand, fuels in locality.brands.items():
            score = locality.scores.get(brand)
            score_str = "-"
            if score is not None:
                style = _TIER_STYLES[indicator_tier(score)]
                score_str = f"[{style}]{score:.1f}[/{style}]"
            for idx, (fuel_name, fuel) in enumerate(fuels.items()):
                table.add_row(
                    brand if idx == 0 else "",
                    fuel_name,
                    f"$ {fuel.price:,.2f}",
                    fuel.effective_date.strftime("%Y-%m-%d"),
                    score_str if idx == 0 else "",
                )

        Console().print(table)


def run_prices(
    city: str | None = None,
    output_format: str = "json",
    source_id: str | None = None,
) -> int:
    """Print aggregated prices for *city* (default: the saved city)."""
    if city is None:
        city = _load_store().city
    _err.print(f"[bold]Fetching prices:[/bold] {city}")
    try:
        source = load_price_source(source_id)
        try:
            localities = PriceService(source).prices_for_locality(city)
        finally:
            source.close()
    except NaftasError as exc:
        logger.error("Price lookup for '%s' failed: %s", city, exc.message)
        _err.print(f"[red]Error: {exc.message}[/red]")
        return 1

    if output_format == "table":
        _print_table(localities)
    else:
        json.dump(
            {name: loc.to_dict() for name, loc in localities.items()},
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


def run_zone(lat: str, lon: str, source_id: str | None = None) -> int:
    """Print the locality nearest to (lat, lon); return an exit code."""
    try:
        target = parse_coordinates(lat, lon)
        source = load_price_source(source_id)
        try:
            zone = LocationService(source).resolve_zone(target)
        finally:
            source.close()
    except NaftasError as exc:
        logger.error("Zone lookup for (%s, %s) failed: %s", lat, lon, exc.message)
        _err.print(f"[red]Error: {exc.message}[/red]")
        return 1

    sys.stdout.write(f"{zone}\n")
    return 0


# ── Saved city and bookmarks ─────────────────────────────


def _load_store() -> PreferencesStore:
    store = PreferencesStore()
    store.load()
    return store


def _save_store(store: PreferencesStore) -> bool:
    try:
        store.save()
    except OSError as exc:
        logger.error("Could not save preferences to %s: %s", store.path, exc)
        _err.print(f"[red]Error: could not save preferences ({exc})[/red]")
        return False
    return True


def run_city(name: str | None = None) -> int:
    """Print the saved city, selecting *name* first when given."""
    store = _load_store()
    if name is not None:
        if not name.strip():
            _err.print("[red]Error: city name must not be empty[/red]")
            return 1
        store.set_city(name)
        if not _save_store(store):
            return 1
        _err.print(f"[green]Selected city:[/green] {store.city}")
    sys.stdout.write(f"{store.city}\n")
    return 0


def run_bookmark_add(
    brand: str,
    fuel_type: str,
    price: float,
    city: str | None = None,
    liters: float | None = None,
    saved_on: str | None = None,
) -> int:
    """Save a price; a bookmark with the same id is replaced."""
    if price <= 0 or (liters is not None and liters <= 0):
        _err.print("[red]Error: price and liters must be positive[/red]")
        return 1

    store = _load_store()
    bookmark = Bookmark(
        brand=brand.strip(),
        fuel_type=fuel_type.strip(),
        price=price,
        date=saved_on or date.today().isoformat(),
        city=(city or store.city).strip().upper(),
        liters=liters,
    )
    store.add_bookmark(bookmark)
    if not _save_store(store):
        return 1
    logger.info("Bookmarked %s", bookmark.id)
    sys.stdout.write(f"{bookmark.id}\n")
    return 0


def run_bookmark_remove(bookmark_id: str) -> int:
    store = _load_store()
    if not store.remove_bookmark(bookmark_id):
        _err.print(f"[red]Error: no bookmark '{bookmark_id}'[/red]")
        return 1
    return 0 if _save_store(store) else 1


def run_bookmark_list(output_format: str = "table") -> int:
    """Print saved bookmarks as a table or JSON."""
    bookmarks = _load_store().bookmarks
    if output_format == "json":
        json.dump(
            [b.to_dict() for b in bookmarks],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    table = Table(
        title="Saved prices",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Id", style="dim")
    table.add_column("Brand", style="magenta")
    table.add_column("Fuel")
    table.add_column("City")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Date", style="dim")
    table.add_column("Liters", justify="right")
    table.add_column("Total", justify="right", style="bold")
    for b in bookmarks:
        table.add_row(
            b.id,
            b.brand,
            b.fuel_type,
            b.city,
            f"$ {b.price:,.2f}",
            b.date,
            f"{b.liters:g}" if b.liters is not None else "-",
            f"$ {b.total:,.2f}" if b.total is not None else "-",
        )
    Console().print(table)
    return 0


def run_health_check() -> int:
    """Run connectivity health check on all upstreams."""
    _err.print("[bold]Running upstream health check...[/bold]")
    results = asyncio.run(HealthChecker().check_all())

    table = Table(
        title="Upstream Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]OK[/green]"
        elif r.status == "slow":
            status = "[yellow]SLOW[/yellow]"
        else:
            status = "[red]DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "-"
        )
        table.add_row(
            r.source_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0

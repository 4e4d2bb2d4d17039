# catalog/cli/runner.py

"""Headless CLI commands and the object graph they run on."""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from catalog.config.settings import Settings
from catalog.models.exceptions import CacheError
from catalog.models.product import ProductRecord
from catalog.models.result import Failure
from catalog.services.connectivity import ConnectivityProbe
from catalog.services.get_products import GetProductsUseCase
from catalog.services.product_repository import ProductRepository
from catalog.sources.product_source import RemoteProductSource
from catalog.storage.kv_store import SQLiteKeyValueStore
from catalog.storage.product_cache import LocalProductCache

logger = logging.getLogger("catalog.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


@dataclass
class CatalogApp:
    """Wired collaborators for one CLI run."""

    remote: RemoteProductSource
    repository: ProductRepository
    get_products: GetProductsUseCase
    store: SQLiteKeyValueStore | None = None
    cache: LocalProductCache | None = None
    probe: ConnectivityProbe | None = None

    async def aclose(self) -> None:
        """Release HTTP sessions and the cache database."""
        await self.remote.close()
        if self.probe is not None:
            await self.probe.close()
        if self.store is not None:
            self.store.close()


def _open_store(db_path: Path | None = None) -> SQLiteKeyValueStore | None:
    """Open the cache database, or return None if it is unusable."""
    try:
        return SQLiteKeyValueStore(db_path)
    except CacheError as exc:
        logger.warning("Running without local cache: %s", exc.message)
        return None


def build_app(
    use_cache: bool = True,
    use_probe: bool = True,
    db_path: Path | None = None,
) -> CatalogApp:
    """Composition root: wire the repository from optional collaborators."""
    remote = RemoteProductSource()
    store = _open_store(db_path) if use_cache else None
    cache = LocalProductCache(store) if store is not None else None
    probe = ConnectivityProbe() if use_probe else None
    repository = ProductRepository(
        remote=remote, cache=cache, connectivity=probe
    )
    logger.debug(
        "Repository wired (cache=%s, probe=%s)", use_cache, use_probe
    )
    return CatalogApp(
        remote=remote,
        repository=repository,
        get_products=GetProductsUseCase(repository),
        store=store,
        cache=cache,
        probe=probe,
    )


def _print_table(products: list[ProductRecord]) -> None:
    """Render a Rich table of products to stdout, in source order."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Image", overflow="fold", style="dim")

    for p in products:
        table.add_row(p.id, p.name[:50], f"{p.price:,.2f}", p.image_url)

    Console().print(table)


def _report_failure(failure: Failure) -> int:
    logger.error(
        "Loading products failed: %s (%s)",
        failure.message,
        type(failure).__name__,
    )
    _err.print(f"[red]{failure.message}[/red]")
    return 1


def _report_products(
    products: list[ProductRecord], output_format: str,
) -> int:
    _err.print(f"[green]✓ {len(products)} products[/green]")
    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_list(
    output_format: str = "json",
    use_cache: bool = True,
    use_probe: bool = True,
) -> int:
    """Load the product list and print it.  Returns an exit code."""
    app = build_app(use_cache=use_cache, use_probe=use_probe)
    try:
        result = await app.get_products()
    finally:
        await app.aclose()

    return result.fold(
        _report_failure,
        lambda products: _report_products(products, output_format),
    )


async def _describe_cache(cache: LocalProductCache) -> tuple[bool, str]:
    """Summarise the cache entry as (usable, note)."""
    try:
        entry = await cache.read_entry()
    except CacheError as exc:
        return False, exc.message
    age = entry.age_seconds(cache.now())
    return True, (
        f"{len(entry.products)} products cached at "
        f"{entry.cached_at.isoformat()} "
        f"(age {age:.0f}s, ttl {cache.ttl_seconds:.0f}s)"
    )


async def run_cache_info() -> int:
    """Print the state of the local cache."""
    store = _open_store()
    if store is None:
        _err.print(
            f"[red]Cache database unusable: {Settings.CACHE_DB_PATH}[/red]"
        )
        return 1
    try:
        usable, note = await _describe_cache(LocalProductCache(store))
    finally:
        store.close()
    _err.print(f"[dim]Cache file: {store.path}[/dim]")
    if not usable:
        _err.print(f"[yellow]Cache unusable: {note}[/yellow]")
        return 1
    _err.print(f"[green]{note}[/green]")
    return 0


async def run_clear_cache() -> int:
    """Drop the cached product list."""
    store = _open_store()
    if store is None:
        _err.print(
            f"[red]Cache database unusable: {Settings.CACHE_DB_PATH}[/red]"
        )
        return 1
    try:
        removed = await LocalProductCache(store).clear()
    finally:
        store.close()
    if removed:
        _err.print("[green]✓ Cache cleared[/green]")
    else:
        _err.print("[dim]Cache was already empty[/dim]")
    return 0


async def run_health_check() -> int:
    """Report network connectivity and cache state."""
    probe = ConnectivityProbe()
    store = _open_store()
    try:
        status = await probe.check()
        if store is None:
            cache_ok, cache_note = False, "cache database unavailable"
        else:
            cache_ok, cache_note = await _describe_cache(
                LocalProductCache(store)
            )
    finally:
        await probe.close()
        if store is not None:
            store.close()

    table = Table(
        title="Catalog Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Component", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    if not status.online:
        net = "[red]❌ OFFLINE[/red]"
    elif status.slow:
        net = "[yellow]⚠️  SLOW[/yellow]"
    else:
        net = "[green]✅ OK[/green]"
    table.add_row(
        "network", net, f"{status.latency_ms:.0f}ms", status.message,
    )
    table.add_row(
        "cache",
        "[green]✅ OK[/green]" if cache_ok else "[yellow]⚠️  EMPTY[/yellow]",
        "—",
        cache_note,
    )

    Console().print(table)
    return 0 if status.online else 1

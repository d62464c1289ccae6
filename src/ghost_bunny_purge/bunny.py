"""BunnyCDN purge and perma-cache tools."""
from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Any, Callable, ParamSpec, TypeVar

import typer
from rich import print as cp
from rich.table import Table
from typer import Option

from ghost_bunny_purge.cleanup import cleanup_perma_cache
from ghost_bunny_purge.models.purge import CleanupTally
from ghost_bunny_purge.models.settings import EnvSettings, load_settings
from ghost_bunny_purge.purge import new_client, run_full_purge, storage_zone
from ghost_bunny_purge.utils.spinners import spinner

T = TypeVar("T")
P = ParamSpec("P")

ConfirmType = Annotated[bool, Option("--yes", "-y", help="Confirm action")]

app = typer.Typer(no_args_is_help=True)


def attempt(func: Callable[P, T], *args: Any) -> T:
    try:
        return func(*args)
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            raise
        cp(f"❌  [red]Error:[/red] {e}")
        raise SystemExit(1)


def print_tally(tally: CleanupTally):
    cp(f"✅  {tally.summary()}")
    for name in tally.failed_folders:
        cp(f"   [yellow]failed:[/yellow] {name}")


async def _purge(settings: EnvSettings) -> CleanupTally:
    async with new_client(settings) as client:
        return await run_full_purge(settings, client)


async def _cleanup(settings: EnvSettings) -> CleanupTally:
    async with new_client(settings) as client:
        return await cleanup_perma_cache(
            storage_zone(settings, client), settings.max_concurrent_deletes
        )


async def _list(settings: EnvSettings):
    async with new_client(settings) as client:
        return await storage_zone(settings, client).list_perma_cache_folders()


@app.command()
def purge(confirm: ConfirmType = False):
    """Purge the whole pull zone cache and delete all perma-cache folders."""
    settings = attempt(load_settings)
    if not confirm:
        typer.confirm(
            f"Purge pull zone {settings.bunny_pullzone_id} and clean up "
            f"{settings.bunny_storage_zone_name!r}?",
            abort=True,
        )

    tally = attempt(asyncio.run, _purge(settings))
    print_tally(tally)


@app.command()
def cleanup(confirm: ConfirmType = False):
    """Delete all perma-cache folders without purging the pull zone."""
    settings = attempt(load_settings)
    if not confirm:
        typer.confirm(
            f"Delete all perma-cache folders in {settings.bunny_storage_zone_name!r}?",
            abort=True,
        )

    tally = attempt(asyncio.run, _cleanup(settings))
    print_tally(tally)


@app.command(name="list")
def list_folders():
    """List perma-cache folders in the storage zone."""
    settings = attempt(load_settings)

    with spinner(f"Listing {settings.bunny_storage_zone_name!r}..."):
        folders = attempt(asyncio.run, _list(settings))

    table = Table("Folder", "Path")
    for folder in folders:
        table.add_row(folder.object_name, folder.path or "")
    cp(table)
    cp(f"{len(folders)} folder(s)")

"""Perma-cache folder cleanup."""
from __future__ import annotations

import asyncio
import contextlib
import logging

from ghost_bunny_purge.errors import UpstreamDeleteFailure
from ghost_bunny_purge.models.purge import CacheFolderEntry, CleanupTally, DeleteOutcome
from ghost_bunny_purge.storage import StorageZone

log = logging.getLogger(__name__)


async def delete_one(
    storage: StorageZone,
    folder: CacheFolderEntry,
    limiter: asyncio.Semaphore | None = None,
) -> DeleteOutcome:
    """Delete a single folder. Never raises for upstream or transport failures."""
    name = folder.object_name
    async with limiter or contextlib.nullcontext():
        try:
            res = await storage.delete_folder(name)
        except Exception as e:
            failure = UpstreamDeleteFailure(name, reason=f"{type(e).__name__}: {e}")
            log.warning("%s", failure)
            return DeleteOutcome(name, ok=False, error=failure)

    if res.is_success:
        log.debug("Deleted folder: %s", name)
        return DeleteOutcome(name, ok=True, status=res.status_code)

    failure = UpstreamDeleteFailure(name, status=res.status_code)
    log.warning("%s", failure)
    return DeleteOutcome(name, ok=False, status=res.status_code, error=failure)


async def delete_all(
    storage: StorageZone,
    folders: list[CacheFolderEntry],
    max_concurrency: int | None = None,
) -> CleanupTally:
    """Delete every folder concurrently and wait for all of them to settle."""
    limiter = asyncio.Semaphore(max_concurrency) if max_concurrency else None
    outcomes = await asyncio.gather(
        *(delete_one(storage, folder, limiter) for folder in folders)
    )
    return CleanupTally.from_outcomes(outcomes)


async def cleanup_perma_cache(
    storage: StorageZone,
    max_concurrency: int | None = None,
) -> CleanupTally:
    """
    List the perma-cache folders of a storage zone and delete all of them.
    Listing failures raise UpstreamListError before any delete is issued.
    """
    log.info("Starting Perma-Cache folder cleanup")
    folders = await storage.list_perma_cache_folders()
    log.info("Number of folders found: %d", len(folders))

    tally = await delete_all(storage, folders, max_concurrency)
    log.info(tally.summary())
    return tally

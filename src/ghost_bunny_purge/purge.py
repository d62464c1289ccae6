"""Full purge pipeline: authorize, purge the pull zone, clean up perma-cache."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

import httpx

from ghost_bunny_purge.auth import require_authorized
from ghost_bunny_purge.cleanup import cleanup_perma_cache
from ghost_bunny_purge.models.purge import CleanupTally, PurgeRequest
from ghost_bunny_purge.models.settings import EnvSettings
from ghost_bunny_purge.storage import StorageZone
from ghost_bunny_purge.utils.bunny_cache import purge_pull_zone

log = logging.getLogger(__name__)

CleanupFunc = Callable[..., Awaitable[CleanupTally]]


def storage_zone(settings: EnvSettings, client: httpx.AsyncClient) -> StorageZone:
    return StorageZone(
        client,
        hostname=settings.bunny_storage_zone_hostname,
        zone_name=settings.bunny_storage_zone_name,
        password=settings.bunny_storage_zone_password,
    )


async def run_full_purge(
    settings: EnvSettings,
    client: httpx.AsyncClient,
    cleanup: CleanupFunc = cleanup_perma_cache,
) -> CleanupTally:
    """
    Purge the pull zone, then clean up perma-cache folders.
    Cleanup only runs after a successful purge.
    """
    log.info("Purging BunnyCDN pull zone cache")
    await purge_pull_zone(
        client,
        pull_zone_id=settings.bunny_pullzone_id,
        api_key=settings.bunny_api_key,
        api_base=settings.bunny_api_base,
    )

    log.info("Cleaning up Perma-Cache folders")
    return await cleanup(storage_zone(settings, client), settings.max_concurrent_deletes)


async def handle_purge_request(
    request: PurgeRequest,
    settings: EnvSettings,
    client: httpx.AsyncClient,
    cleanup: CleanupFunc = cleanup_perma_cache,
    now: int | None = None,
) -> CleanupTally:
    """Authorize a webhook request and run the full purge. No remote call happens on denial."""
    require_authorized(
        request,
        bypass_token=settings.manual_trigger_token,
        secret=settings.ghost_webhook_secret,
        now=now,
    )
    return await run_full_purge(settings, client, cleanup=cleanup)


def new_client(settings: EnvSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.purge_relay_http_timeout)

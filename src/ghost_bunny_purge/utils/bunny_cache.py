"""Bunny pull zone cache management."""
import logging

import httpx

from ghost_bunny_purge.errors import UpstreamPurgeError
from ghost_bunny_purge.utils import uris

log = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.bunny.net"


async def purge_pull_zone(
    client: httpx.AsyncClient,
    pull_zone_id: str,
    api_key: str,
    api_base: str = DEFAULT_API_BASE,
) -> httpx.Response:
    """Purge the entire cache of a pull zone. Raises UpstreamPurgeError on non-2xx."""
    api_url = uris.purge_cache_url(api_base, pull_zone_id)
    headers = {
        "AccessKey": api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    res = await client.post(api_url, headers=headers)
    if not res.is_success:
        log.error("Cache purge failed with status %s", res.status_code)
        raise UpstreamPurgeError(res.status_code)

    log.info("Pull zone cache cleared for zone ID: %s", pull_zone_id)
    return res

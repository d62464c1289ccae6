from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from ghost_bunny_purge.errors import UpstreamListError
from ghost_bunny_purge.models.purge import CacheFolderEntry
from ghost_bunny_purge.utils import uris

log = logging.getLogger(__name__)

_folder_list = TypeAdapter(list[CacheFolderEntry])


class StorageZone:
    def __init__(self, client: httpx.AsyncClient, hostname: str, zone_name: str, password: str):
        """Binds a Bunny storage zone to an http client."""
        self.client = client
        self.hostname = hostname
        self.zone_name = zone_name
        self._password = password

    @property
    def headers(self) -> dict[str, str]:
        return {"AccessKey": self._password, "Accept": "application/json"}

    def folder_url(self, object_name: str | None = None) -> str:
        return uris.perma_cache_url(self.hostname, self.zone_name, object_name)

    async def list_perma_cache_folders(self) -> list[CacheFolderEntry]:
        """Lists all folders under the perma-cache root."""
        res = await self.client.get(self.folder_url(), headers=self.headers)
        if not res.is_success:
            raise UpstreamListError(status=res.status_code)

        try:
            return _folder_list.validate_json(res.content)
        except ValidationError as e:
            raise UpstreamListError(reason=f"unexpected listing payload ({e.error_count()} errors)")

    async def delete_folder(self, object_name: str) -> httpx.Response:
        """Deletes one perma-cache folder. Transport errors propagate."""
        log.debug("Attempting to delete folder: %s", object_name)
        return await self.client.delete(self.folder_url(object_name), headers=self.headers)

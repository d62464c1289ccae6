import asyncio

import httpx
import pytest

from ghost_bunny_purge.models.settings import load_settings

SECRET = "ghost-webhook-secret"
TRIGGER_TOKEN = "operator-trigger-token"
PULL_ZONE_ID = "12345"
STORAGE_HOST = "ny.storage.bunnycdn.com"
STORAGE_ZONE = "blog-cache"


class FakeBunny:
    """In-memory stand-in for the Bunny control and storage APIs."""

    def __init__(
        self,
        folders=(),
        purge_status=204,
        list_status=200,
        list_payload=None,
        delete_status=None,
        delete_raises=(),
        delete_delays=None,
    ):
        self.folders = list(folders)
        self.purge_status = purge_status
        self.list_status = list_status
        self.list_payload = list_payload
        self.delete_status = delete_status or {}
        self.delete_raises = set(delete_raises)
        self.delete_delays = delete_delays or {}
        self.requests: list[httpx.Request] = []
        self.completed_deletes: list[str] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def count(self, method: str) -> int:
        return sum(1 for r in self.requests if r.method == method)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == "api.bunny.net":
            return httpx.Response(self.purge_status)

        if request.method == "GET":
            if self.list_payload is not None:
                return httpx.Response(self.list_status, json=self.list_payload)
            return httpx.Response(
                self.list_status,
                json=[
                    {"ObjectName": name, "IsDirectory": True, "Path": f"/{STORAGE_ZONE}/__bcdn_perma_cache__/"}
                    for name in self.folders
                ],
            )

        if request.method == "DELETE":
            name = request.url.path.rstrip("/").rsplit("/", 1)[-1]
            await asyncio.sleep(self.delete_delays.get(name, 0))
            if name in self.delete_raises:
                raise httpx.ConnectError("connection reset", request=request)
            self.completed_deletes.append(name)
            return httpx.Response(self.delete_status.get(name, 200))

        return httpx.Response(405)


@pytest.fixture
def settings():
    return load_settings(
        _env_file=None,
        ghost_webhook_secret=SECRET,
        bunny_pullzone_id=PULL_ZONE_ID,
        bunny_api_key="bunny-api-key",
        bunny_storage_zone_hostname=STORAGE_HOST,
        bunny_storage_zone_name=STORAGE_ZONE,
        bunny_storage_zone_password="storage-password",
        manual_trigger_token=TRIGGER_TOKEN,
    )

import pytest

from conftest import PULL_ZONE_ID, SECRET, TRIGGER_TOKEN, FakeBunny
from ghost_bunny_purge.errors import AuthenticationError, UpstreamListError, UpstreamPurgeError
from ghost_bunny_purge.models.purge import CleanupTally, PurgeRequest
from ghost_bunny_purge.purge import handle_purge_request, run_full_purge
from ghost_bunny_purge.utils import signing
from ghost_bunny_purge.utils.bunny_cache import purge_pull_zone


class CleanupSpy:
    def __init__(self):
        self.calls = []

    async def __call__(self, storage, max_concurrency):
        self.calls.append((storage, max_concurrency))
        return CleanupTally()


@pytest.mark.asyncio
async def test_purge_pull_zone_request_shape():
    fake = FakeBunny()
    await purge_pull_zone(fake.client(), PULL_ZONE_ID, "api-key")

    (request,) = fake.requests
    assert request.method == "POST"
    assert str(request.url) == f"https://api.bunny.net/pullzone/{PULL_ZONE_ID}/purgeCache"
    assert request.headers["AccessKey"] == "api-key"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 500, 503])
async def test_purge_pull_zone_non_success_raises(status):
    fake = FakeBunny(purge_status=status)
    with pytest.raises(UpstreamPurgeError) as exc_info:
        await purge_pull_zone(fake.client(), PULL_ZONE_ID, "api-key")
    assert exc_info.value.status == status
    assert str(exc_info.value) == f"Failed to purge cache. Status: {status}"


@pytest.mark.asyncio
async def test_run_full_purge_purges_then_cleans_up(settings):
    fake = FakeBunny(folders=["a", "b"])
    tally = await run_full_purge(settings, fake.client())

    assert tally == CleanupTally(total=2, deleted=2, failed=0)
    assert [r.method for r in fake.requests[:2]] == ["POST", "GET"]


@pytest.mark.asyncio
async def test_failed_purge_never_invokes_cleanup(settings):
    fake = FakeBunny(purge_status=503, folders=["a"])
    spy = CleanupSpy()

    with pytest.raises(UpstreamPurgeError):
        await run_full_purge(settings, fake.client(), cleanup=spy)

    assert spy.calls == []
    assert fake.count("GET") == 0
    assert fake.count("DELETE") == 0


@pytest.mark.asyncio
async def test_cleanup_receives_configured_concurrency(settings):
    spy = CleanupSpy()
    await run_full_purge(settings, FakeBunny().client(), cleanup=spy)

    ((storage, max_concurrency),) = spy.calls
    assert storage.zone_name == settings.bunny_storage_zone_name
    assert max_concurrency == settings.purge_relay_max_concurrent_deletes


@pytest.mark.asyncio
async def test_listing_failure_propagates(settings):
    fake = FakeBunny(list_status=500)
    with pytest.raises(UpstreamListError):
        await run_full_purge(settings, fake.client())


@pytest.mark.asyncio
async def test_denied_request_makes_no_remote_calls(settings):
    fake = FakeBunny(folders=["a"])
    with pytest.raises(AuthenticationError):
        await handle_purge_request(PurgeRequest(body=b"{}"), settings, fake.client())
    assert fake.requests == []


@pytest.mark.asyncio
async def test_expired_signature_makes_no_remote_calls(settings):
    fake = FakeBunny(folders=["a"])
    now = signing.now_ms()
    header = signing.sign_payload(b"{}", SECRET, now=now - signing.REPLAY_WINDOW_MS - 1000)

    with pytest.raises(AuthenticationError):
        await handle_purge_request(
            PurgeRequest(body=b"{}", signature_header=header), settings, fake.client(), now=now
        )
    assert fake.requests == []


@pytest.mark.asyncio
async def test_signed_request_runs_pipeline(settings):
    fake = FakeBunny(folders=["a", "b", "c"], delete_status={"c": 500})
    body = b'{"post":{}}'
    request = PurgeRequest(body=body, signature_header=signing.sign_payload(body, SECRET))

    tally = await handle_purge_request(request, settings, fake.client())
    assert tally == CleanupTally(total=3, deleted=2, failed=1)


@pytest.mark.asyncio
async def test_bypass_with_failing_purge_skips_cleanup(settings):
    fake = FakeBunny(purge_status=503, folders=["a"])
    spy = CleanupSpy()
    request = PurgeRequest(body=b"", trigger_token=TRIGGER_TOKEN)

    with pytest.raises(UpstreamPurgeError):
        await handle_purge_request(request, settings, fake.client(), cleanup=spy)

    assert spy.calls == []
    assert fake.count("POST") == 1

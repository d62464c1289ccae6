import pytest

from ghost_bunny_purge.utils import uris


@pytest.mark.parametrize(
    "expected,parts",
    [
        # No slashes
        ("https://example.org/abc", ("https://example.org/", "abc")),
        # Trailing slash on base
        ("https://example.org/abc", ("https://example.org", "abc")),
        # Leading slash on part
        ("https://example.org/abc", ("https://example.org", "/abc")),
        # Both slashes on part
        ("https://example.org/abc", ("https://example.org", "/abc/")),
        # Multiple parts
        ("https://example.org/abc/def", ("https://example.org", "abc", "def")),
    ],
)
def test_join(expected, parts):
    assert uris.join(*parts) == expected


def test_join_quotes_parts():
    assert uris.join("https://example.org", "a b", quote=True) == "https://example.org/a%20b"


def test_join_directory():
    assert uris.join("https://example.org", "abc", directory=True) == "https://example.org/abc/"


def test_purge_cache_url():
    assert (
        uris.purge_cache_url("https://api.bunny.net", "12345")
        == "https://api.bunny.net/pullzone/12345/purgeCache"
    )


@pytest.mark.parametrize("hostname", ["ny.storage.bunnycdn.com", "https://ny.storage.bunnycdn.com/"])
def test_perma_cache_root_url(hostname):
    assert (
        uris.perma_cache_url(hostname, "zone")
        == "https://ny.storage.bunnycdn.com/zone/__bcdn_perma_cache__/"
    )


def test_perma_cache_folder_url():
    assert (
        uris.perma_cache_url("ny.storage.bunnycdn.com", "zone", "pullzone__blog__123")
        == "https://ny.storage.bunnycdn.com/zone/__bcdn_perma_cache__/pullzone__blog__123/"
    )

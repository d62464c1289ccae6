"""Uri helpers for the Bunny control and storage APIs."""
from urllib import parse

__all__ = ["join", "purge_cache_url", "perma_cache_url", "PERMA_CACHE_ROOT"]

PERMA_CACHE_ROOT = "__bcdn_perma_cache__"


def join(*parts: str, quote: bool = False, directory: bool = False) -> str:
    """
    Join uri parts onto a base, stripping duplicate slashes.
    With directory=True the result ends in a slash, as Bunny storage
    expects for folder listing and deletion.
    """
    if not parts:
        return ""

    base = parts[0].rstrip("/")
    tail = [
        parse.quote(part.strip("/"), safe="/") if quote else part.strip("/")
        for part in parts[1:]
    ]
    result = "/".join([base, *(p for p in tail if p)])
    if directory:
        result += "/"
    return result


def _with_scheme(host: str) -> str:
    if "://" in host:
        return host
    return f"https://{host}"


def purge_cache_url(api_base: str, pull_zone_id: str) -> str:
    return join(api_base, "pullzone", pull_zone_id, "purgeCache", quote=True)


def perma_cache_url(hostname: str, zone_name: str, object_name: str | None = None) -> str:
    """Storage url of the perma-cache root, or of one folder under it."""
    parts = [_with_scheme(hostname), zone_name, PERMA_CACHE_ROOT]
    if object_name is not None:
        parts.append(object_name)
    return join(*parts, quote=True, directory=True)

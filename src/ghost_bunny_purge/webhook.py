"""Webhook signing and manual triggers."""
from typing import Annotated, Optional

import httpx
import pyperclip
import typer
from rich import print as cp
from typer import Option

from ghost_bunny_purge.auth import TRIGGER_TOKEN_HEADER
from ghost_bunny_purge.errors import SignatureFormatError
from ghost_bunny_purge.models.keyring_config import ConfigKey, KeyringConfig
from ghost_bunny_purge.server import PURGE_PATH
from ghost_bunny_purge.utils import signing, uris

app = typer.Typer(no_args_is_help=True)

SecretType = Annotated[
    str,
    Option("--secret", envvar="GHOST_WEBHOOK_SECRET", help="Webhook shared secret"),
]


@app.command()
def sign(body: str, secret: SecretType, copy: Annotated[bool, Option("--copy")] = False):
    """Print an X-Ghost-Signature header value for BODY, signed now."""
    header = signing.sign_payload(body.encode("utf-8"), secret)
    print(header)
    if copy:
        pyperclip.copy(header)
        cp("✅  Signature copied to clipboard.")


@app.command()
def verify(body: str, header: str, secret: SecretType):
    """Verify an X-Ghost-Signature header value against BODY."""
    try:
        token = signing.parse_signature_header(header)
    except SignatureFormatError as e:
        cp(f"❌  Malformed signature header: {e}")
        raise SystemExit(1)

    if not signing.verify_signature(body.encode("utf-8"), header, secret):
        age_s = (signing.now_ms() - token.timestamp) / 1000
        cp(f"❌  Signature verification failed (signed {age_s:.0f}s ago).")
        raise SystemExit(1)

    cp("✅  Signature verified.")


@app.command()
def trigger(
    url: Annotated[Optional[str], Option("--url", help="Relay base url")] = None,
    body: Annotated[str, Option("--body")] = "",
):
    """Trigger a full purge on a deployed relay with the manual trigger token."""
    cfg = KeyringConfig.load_from_keyring()
    token = cfg.get_with_prompt(ConfigKey.MANUAL_TRIGGER_TOKEN)
    base = url or cfg.get_with_prompt(ConfigKey.RELAY_URL)

    target = uris.join(base, PURGE_PATH)
    cp(f"Triggering full purge at {target!r}...")
    try:
        res = httpx.post(
            target,
            content=body.encode("utf-8"),
            headers={TRIGGER_TOKEN_HEADER: token},
            timeout=None,
        )
    except httpx.HTTPError as e:
        cp(f"❌  Request failed: {e}")
        raise SystemExit(1)

    if not res.is_success:
        cp(f"❌  ({res.status_code}) {res.text}")
        raise SystemExit(1)

    cp(f"✅  ({res.status_code}) {res.text}")

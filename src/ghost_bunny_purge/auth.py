"""Trigger authorization: bypass token or Ghost signature."""
from __future__ import annotations

import hmac
import logging

from ghost_bunny_purge.errors import AuthenticationError
from ghost_bunny_purge.models.purge import AuthDecision, AuthReason, PurgeRequest
from ghost_bunny_purge.utils import signing

log = logging.getLogger(__name__)

TRIGGER_TOKEN_HEADER = "manualtriggertoken"


def bypass_matches(provided: str | None, expected: str | None) -> bool:
    """Constant-time bypass token check. An unset token never matches."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def authorize_with_reason(
    request: PurgeRequest,
    bypass_token: str | None,
    secret: str | None,
    now: int | None = None,
) -> tuple[AuthDecision, AuthReason]:
    if bypass_matches(request.trigger_token, bypass_token):
        return AuthDecision.ALLOWED, AuthReason.BYPASS

    if signing.verify_signature(request.body, request.signature_header, secret, now=now):
        return AuthDecision.ALLOWED, AuthReason.SIGNATURE

    return AuthDecision.DENIED, AuthReason.REJECTED


def authorize(
    request: PurgeRequest,
    bypass_token: str | None,
    secret: str | None,
    now: int | None = None,
) -> AuthDecision:
    """Decide whether a purge request may proceed."""
    decision, _ = authorize_with_reason(request, bypass_token, secret, now=now)
    return decision


def require_authorized(
    request: PurgeRequest,
    bypass_token: str | None,
    secret: str | None,
    now: int | None = None,
) -> AuthReason:
    """Like authorize, but raises AuthenticationError on denial."""
    decision, reason = authorize_with_reason(request, bypass_token, secret, now=now)
    if not decision.allowed:
        log.warning("Invalid signature")
        raise AuthenticationError()

    if reason is AuthReason.BYPASS:
        log.info("Manual trigger token accepted, skipping signature check")
    else:
        log.info("Signature verified successfully")
    return reason

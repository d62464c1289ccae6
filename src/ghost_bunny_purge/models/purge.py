from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ghost_bunny_purge.errors import UpstreamDeleteFailure


@dataclass(frozen=True)
class SignatureToken:
    """Parsed ``X-Ghost-Signature`` header."""

    hash: str
    timestamp: int


@dataclass(frozen=True)
class PurgeRequest:
    """
    Inbound purge request as seen below the HTTP layer.
    The body is captured exactly once at the boundary and passed down as bytes.
    """

    body: bytes
    signature_header: str | None = None
    trigger_token: str | None = None


class AuthReason(enum.Enum):
    BYPASS = "bypass"
    SIGNATURE = "signature"
    REJECTED = "rejected"


class AuthDecision(enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"

    @property
    def allowed(self) -> bool:
        return self is AuthDecision.ALLOWED


class CacheFolderEntry(BaseModel):
    """One directory under the storage zone's perma-cache root."""

    object_name: str = Field(alias="ObjectName", min_length=1)
    is_directory: bool | None = Field(alias="IsDirectory", default=None)
    path: str | None = Field(alias="Path", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


@dataclass(frozen=True)
class DeleteOutcome:
    object_name: str
    ok: bool
    status: int | None = None
    error: UpstreamDeleteFailure | None = None


@dataclass(frozen=True)
class CleanupTally:
    total: int = 0
    deleted: int = 0
    failed: int = 0
    outcomes: tuple[DeleteOutcome, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[DeleteOutcome]) -> CleanupTally:
        outcomes = tuple(outcomes)
        deleted = sum(1 for o in outcomes if o.ok)
        return cls(
            total=len(outcomes),
            deleted=deleted,
            failed=len(outcomes) - deleted,
            outcomes=outcomes,
        )

    @property
    def failed_folders(self) -> list[str]:
        return [o.object_name for o in self.outcomes if not o.ok]

    def summary(self) -> str:
        return (
            f"Cleanup completed. Total folders: {self.total}, "
            f"Deleted: {self.deleted}, Failed: {self.failed}"
        )

    def __str__(self) -> str:
        return self.summary()

"""Session issuing and resolution for credential-based login."""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Mapping

from backoffice.models.user import User
from backoffice.models.validation import format_rfc3339_utc, utc_now

from .model import SessionRecord
from .repository import SessionStore

logger = logging.getLogger(__name__)

TokenFactory = Callable[[], str]
DEFAULT_TTL_HOURS = 24


class SessionIssueError(ValueError):
    """Raised when session configuration or the issuing flow is invalid."""


@dataclass(frozen=True)
class SessionConfig:
    """How long issued sessions stay valid."""

    ttl_hours: int = DEFAULT_TTL_HOURS

    def __post_init__(self) -> None:
        if not isinstance(self.ttl_hours, int) or self.ttl_hours <= 0:
            raise SessionIssueError("SESSION_TTL_HOURS must be a positive integer")

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "SessionConfig":
        source = os.environ if env is None else env
        raw = source.get("SESSION_TTL_HOURS", "").strip()
        if not raw:
            return cls()
        try:
            ttl_hours = int(raw)
        except ValueError as exc:
            raise SessionIssueError("SESSION_TTL_HOURS must be a positive integer") from exc
        return cls(ttl_hours=ttl_hours)


def default_token_factory() -> str:
    """Generate a random opaque token suitable for bearer headers and cookies."""
    return secrets.token_urlsafe(32)


def issue_session(
    *,
    user: User,
    store: SessionStore,
    config: SessionConfig,
    token_factory: TokenFactory = default_token_factory,
    now: datetime | None = None,
) -> SessionRecord:
    """Issue and persist a session for an authenticated user."""
    token = token_factory()
    if not isinstance(token, str) or not token.strip():
        raise SessionIssueError("token factory produced an empty token")

    record = SessionRecord.issue(
        token=token,
        user_id=user.email,
        role=user.role,
        issued_at=now or utc_now(),
        ttl=config.ttl,
    )
    store.save(record)
    logger.info("Issued %s session for %s", record.role.value, record.user_id)
    return record


def resolve_session(
    token: str | None,
    *,
    store: SessionStore,
    now: datetime | None = None,
) -> SessionRecord | None:
    """Return the active session for a token; revoked or expired ones are None."""
    if not token or not token.strip():
        return None
    record = store.get(token.strip())
    if record is None or not record.is_active(now or utc_now()):
        return None
    return record


def revoke_session(token: str, *, store: SessionStore, now: datetime | None = None) -> bool:
    """Revoke a session when the store supports it; True when one was revoked."""
    revoke = getattr(store, "revoke", None)
    if not callable(revoke):
        raise SessionIssueError("session store does not support revocation")
    record = revoke(token, revoked_at=format_rfc3339_utc(now or utc_now()))
    if record is None:
        return False
    logger.info("Revoked session for %s", record.user_id)
    return True

"""Session persistence and issuing for the back office."""

from .issuing import (
    SessionConfig,
    SessionIssueError,
    issue_session,
    resolve_session,
    revoke_session,
)
from .model import SessionRecord
from .repository import DynamoDbSessionStore, SessionStore

__all__ = [
    "DynamoDbSessionStore",
    "SessionConfig",
    "SessionIssueError",
    "SessionRecord",
    "SessionStore",
    "issue_session",
    "resolve_session",
    "revoke_session",
]

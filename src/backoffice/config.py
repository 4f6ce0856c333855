"""Environment-driven settings for the back office runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from .sessions.issuing import SessionConfig, SessionIssueError

DEFAULT_ADMIN_EMAIL = "admin@ddmrp.com"
DEFAULT_ADMIN_NAME = "Admin User"


class ConfigurationError(RuntimeError):
    """Raised when required runtime configuration is missing or invalid."""


class Collection(str, Enum):
    """Document collections, one DynamoDB table each."""

    COURSES = "courses"
    EVENTS = "events"
    INQUIRIES = "inquiries"
    DEMO_BOOKINGS = "demoBookings"
    EVENT_REGISTRATIONS = "eventRegistrations"
    USERS = "users"
    SESSIONS = "sessions"
    CONTACTS = "contacts"
    IMAGES = "images"


TABLE_ENV_VARS: dict[Collection, str] = {
    Collection.COURSES: "COURSES_TABLE",
    Collection.EVENTS: "EVENTS_TABLE",
    Collection.INQUIRIES: "INQUIRIES_TABLE",
    Collection.DEMO_BOOKINGS: "DEMO_BOOKINGS_TABLE",
    Collection.EVENT_REGISTRATIONS: "EVENT_REGISTRATIONS_TABLE",
    Collection.USERS: "USERS_TABLE",
    Collection.SESSIONS: "SESSIONS_TABLE",
    Collection.CONTACTS: "CONTACTS_TABLE",
    Collection.IMAGES: "IMAGES_TABLE",
}


@dataclass(frozen=True)
class Settings:
    """Runtime wiring for tables, buckets, admin bootstrap and sessions."""

    table_names: Mapping[Collection, str]
    images_bucket: str | None = None
    sessions: SessionConfig = field(default_factory=SessionConfig)
    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_name: str = DEFAULT_ADMIN_NAME
    admin_password: str | None = None
    cors_allow_origin: str = "*"
    log_level: str = "INFO"
    aws_region: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        source = os.environ if env is None else env

        table_names: dict[Collection, str] = {}
        for collection, var_name in TABLE_ENV_VARS.items():
            value = source.get(var_name, "").strip()
            if not value:
                raise ConfigurationError(f"server misconfiguration: {var_name} missing")
            table_names[collection] = value

        log_level = source.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if log_level not in logging.getLevelNamesMapping():
            raise ConfigurationError(f"LOG_LEVEL '{log_level}' is not a logging level")

        try:
            sessions = SessionConfig.from_env(source)
        except SessionIssueError as exc:
            raise ConfigurationError(str(exc)) from exc

        return cls(
            table_names=table_names,
            images_bucket=source.get("IMAGES_BUCKET", "").strip() or None,
            sessions=sessions,
            admin_email=source.get("ADMIN_EMAIL", "").strip().lower() or DEFAULT_ADMIN_EMAIL,
            admin_name=source.get("ADMIN_NAME", "").strip() or DEFAULT_ADMIN_NAME,
            admin_password=source.get("ADMIN_PASSWORD") or None,
            cors_allow_origin=source.get("CORS_ALLOW_ORIGIN", "*").strip() or "*",
            log_level=log_level,
            aws_region=source.get("AWS_REGION", "").strip() or None,
        )

    def table_name(self, collection: Collection) -> str:
        try:
            return self.table_names[collection]
        except KeyError as exc:
            raise ConfigurationError(
                f"server misconfiguration: {TABLE_ENV_VARS[collection]} missing"
            ) from exc

"""User accounts and bootstrap of the initial admin."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from backoffice.models.user import Role, User, normalize_email

from .base import DocumentRepository

logger = logging.getLogger(__name__)


class UserRepository(DocumentRepository):
    label = "user"
    key_attribute = "email"

    def _hydrate(self, item: Mapping[str, Any]) -> User:
        return User.from_item(item)

    def find_by_email(self, email: str) -> User | None:
        if not isinstance(email, str) or not email.strip():
            return None
        return self.get(normalize_email(email))

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches its stored hash."""
        user = self.find_by_email(email)
        if user is None or not user.check_password(password):
            return None
        return user

    def create(self, *, email: str, password: str, name: str, role: Role = Role.MEMBER) -> User | None:
        """Create an account; None when the email is already taken."""
        user = User.register(email=email, password=password, name=name, role=role, now=self._now())
        if not self._documents.put_if_absent(user.to_item()):
            return None
        return user

    def ensure_admin(self, *, email: str, password: str | None, name: str) -> bool:
        """Create the bootstrap admin unless it exists; True when created."""
        if self.find_by_email(email) is not None:
            logger.info("Admin user already exists")
            return False
        if not password:
            logger.warning("ADMIN_PASSWORD not set; skipping admin bootstrap")
            return False

        created = self.create(email=email, password=password, name=name, role=Role.ADMIN)
        if created is None:
            logger.info("Admin user already exists")
            return False
        logger.info("Admin user created successfully")
        return True

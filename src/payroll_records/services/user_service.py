"""Application users (audit identities and role checks)."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_records.errors import ConflictError, NotFoundError, ValidationError
from payroll_records.models import User, UserRole
from payroll_records.store import RecordStore
from payroll_records.validation import is_null_or_empty, is_valid_email, sanitize_input

logger = logging.getLogger(__name__)


class UserService:
    """Creates users with unique usernames and resolves acting users."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store = RecordStore(session)

    async def create_user(
        self,
        username: str,
        full_name: str,
        role: str = UserRole.HR.value,
        email: str | None = None,
    ) -> User:
        username = sanitize_input(username)
        if len(username) < 3:
            raise ValidationError("username", "must be at least 3 characters")
        if is_null_or_empty(full_name):
            raise ValidationError("full_name", "is required")
        if email is not None and not is_valid_email(email):
            raise ValidationError("email", "is not a valid email address")
        try:
            role = UserRole(role).value
        except ValueError as e:
            raise ValidationError("role", f"must be one of {[r.value for r in UserRole]}") from e

        if await self.store.exists_unique_conflict("user", "username", username):
            raise ConflictError("user", "username", username)

        user = User(
            username=username,
            full_name=sanitize_input(full_name),
            email=sanitize_input(email) or None,
            role=role,
            is_active=True,
        )
        await self.store.add(user, "user")
        logger.info("Created user %s (%s)", user.username, user.role)
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.store.find_user_by_id(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("user", user_id)
        return user

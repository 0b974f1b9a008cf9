# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from shift_scheduler.models.enums import UserRole


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers.

    Passed into the scheduling core as the acting capability; the core never
    looks identity up on its own.
    """

    user_id: uuid.UUID
    role: UserRole = UserRole.EMPLOYEE

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    def resolve_target(self, target_user_id: uuid.UUID | None) -> uuid.UUID | None:
        """Return the user the caller may act on, or None when not permitted."""
        if target_user_id is None or target_user_id == self.user_id:
            return self.user_id
        if self.is_manager:
            return target_user_id
        return None

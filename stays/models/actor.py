"""The authenticated user on whose behalf an operation runs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    GUEST = "guest"
    HOST = "host"
    ADMIN = "admin"


class Actor(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    role: Role = Role.GUEST

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

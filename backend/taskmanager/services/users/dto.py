# taskmanager/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass

from taskmanager.services._shared.dto import PageMeta
from taskmanager.services.auth.dto import UserPublicOut


@dataclass(frozen=True, slots=True)
class UserListOut:
    users: list[UserPublicOut]
    pagination: PageMeta

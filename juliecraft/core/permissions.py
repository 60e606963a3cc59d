# juliecraft/core/permissions.py

import enum
from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from juliecraft.models.auth import Profile, ROLE_SUPER_ADMIN, STATUS_INACTIVE


@dataclass(frozen=True)
class AuthenticatedCaller:
    """The verified identity behind a bearer token."""
    id: UUID
    email: str
    role: str
    is_admin: bool

    @classmethod
    def from_profile(cls, profile: Profile) -> "AuthenticatedCaller":
        return cls(
            id=profile.id,
            email=profile.email,
            role=profile.role,
            is_admin=bool(profile.is_admin),
        )


class AdminLevel(enum.IntEnum):
    ADMIN = 1
    SUPER_ADMIN = 2


@dataclass(frozen=True)
class Authorized:
    level: AdminLevel
    caller: AuthenticatedCaller


@dataclass(frozen=True)
class Denied:
    reason: str


Capability = Union[Authorized, Denied]


def check_admin_capability(profile: Optional[Profile]) -> Capability:
    """
    The one admin predicate every protected endpoint goes through.

    The is_admin flag decides access; the role string only tells a super
    admin apart from a regular admin and never grants access on its own.
    """
    if profile is None:
        return Denied("Profile not found")
    if profile.status == STATUS_INACTIVE:
        return Denied("Account is deactivated")
    if not profile.is_admin:
        return Denied("Admin flag not set")

    level = AdminLevel.SUPER_ADMIN if profile.role == ROLE_SUPER_ADMIN else AdminLevel.ADMIN
    return Authorized(level=level, caller=AuthenticatedCaller.from_profile(profile))

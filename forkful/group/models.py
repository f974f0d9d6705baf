"""Data models for the group blueprint."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypedDict

from forkful.core.types import FirestoreDocument
from forkful.errors import ConflictError


class Role(str, Enum):
    """A member's role within a group, ordered by privilege."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    @property
    def rank(self) -> int:
        """Return the privilege rank; higher outranks lower."""
        return _ROLE_RANKS[self]

    def outranks(self, other: Role) -> bool:
        """Return True if this role is strictly more privileged than ``other``."""
        return self.rank > other.rank

    @classmethod
    def parse(cls, value: Any) -> Role:
        """Convert a stored role value, rejecting anything outside the enum."""
        try:
            return cls(value)
        except ValueError:
            raise ConflictError(f"Unknown group role: {value!r}.") from None


_ROLE_RANKS = {Role.OWNER: 3, Role.ADMIN: 2, Role.MEMBER: 1}


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    ownerId: str
    members: list[str]
    roles: dict[str, str]
    isPrivate: bool
    imageUrl: str


class MemberEntry(TypedDict):
    """A member profile paired with the member's role."""

    user: dict[str, Any]
    role: Role

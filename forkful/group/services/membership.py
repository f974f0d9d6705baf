"""In-memory view of a group's members and roles."""

from __future__ import annotations

from typing import Any

from forkful.errors import ConflictError
from forkful.group.models import Role


class Membership:
    """Members and roles of one group, read from a single snapshot.

    Loading normalizes what is stored: role entries without a membership are
    dropped, and members without a role entry get MEMBER (the owner gets
    OWNER). Groups written before roles existed only carried ``members``.
    """

    def __init__(self, group_id: str, data: dict[str, Any]) -> None:
        """Parse the ``members`` and ``roles`` fields of a group document."""
        self.group_id = group_id
        self.owner_id: str | None = data.get("ownerId")
        self.members: list[str] = []
        for uid in data.get("members") or []:
            if uid not in self.members:
                self.members.append(uid)

        stored = {
            uid: Role.parse(value) for uid, value in (data.get("roles") or {}).items()
        }
        self.roles: dict[str, Role] = {}
        for uid in self.members:
            default = Role.OWNER if uid == self.owner_id else Role.MEMBER
            self.roles[uid] = stored.get(uid, default)

        self.changed = stored != self.roles or len(self.members) != len(
            data.get("members") or []
        )

    @classmethod
    def from_snapshot(cls, snapshot: Any) -> Membership:
        """Build a membership view from a group document snapshot."""
        return cls(snapshot.id, snapshot.to_dict() or {})

    def is_member(self, user_id: str) -> bool:
        """Return True if the user belongs to the group."""
        return user_id in self.roles

    def role_of(self, user_id: str) -> Role | None:
        """Return the user's role, or None for a non-member."""
        return self.roles.get(user_id)

    def add(self, user_id: str, role: Role = Role.MEMBER) -> None:
        """Add a member with the given role."""
        self.members.append(user_id)
        self.roles[user_id] = role
        self.changed = True

    def set_role(self, user_id: str, role: Role) -> None:
        """Change the role of an existing member."""
        self.roles[user_id] = role
        self.changed = True

    def remove(self, user_id: str) -> None:
        """Remove a member together with their role entry."""
        self.members.remove(user_id)
        del self.roles[user_id]
        self.changed = True

    def validate(self) -> None:
        """Raise ConflictError if the membership breaks a group invariant."""
        owners = [uid for uid, role in self.roles.items() if role is Role.OWNER]
        if len(owners) != 1:
            raise ConflictError(
                f"Group {self.group_id} must have exactly one owner, found {len(owners)}."
            )
        if self.owner_id is not None and owners[0] != self.owner_id:
            raise ConflictError(f"Group {self.group_id} owner does not hold the owner role.")
        if set(self.members) != set(self.roles):
            raise ConflictError(f"Group {self.group_id} members and roles disagree.")

    def to_update(self) -> dict[str, Any]:
        """Return the field update that stores members and roles together."""
        return {
            "members": list(self.members),
            "roles": {uid: role.value for uid, role in self.roles.items()},
        }

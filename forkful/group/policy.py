"""Role policy for group membership actions.

Every function here is pure: it decides from the roles and ids it is given
and never touches Firestore. ``actor_role`` is ``None`` for someone who is
not a member of the group, and a non-member is never allowed to act.
"""

from __future__ import annotations

from forkful.errors import PermissionDenied

from .models import Role

PROMOTE = "promote"
ADD_MEMBER = "add members to the group"
REMOVE_MEMBER = "remove"


def can_promote(actor_role: Role | None) -> bool:
    """Only the owner may promote a member to admin."""
    return actor_role is Role.OWNER


def can_add_member(actor_role: Role | None) -> bool:
    """Owners and admins may add members."""
    return actor_role in (Role.OWNER, Role.ADMIN)


def can_remove_member(
    actor_role: Role | None,
    target_role: Role | None,
    actor_id: str,
    target_id: str,
) -> bool:
    """Decide whether ``actor_id`` may remove ``target_id`` from a group.

    Removing yourself is never allowed here, whatever your role; that is
    what leaving the group is for. The owner may remove anyone else, an
    admin may remove plain members only, and members may remove nobody.
    """
    if actor_id == target_id:
        return False
    if actor_role is Role.OWNER:
        return True
    if actor_role is Role.ADMIN:
        return target_role is Role.MEMBER
    return False


def require_promote(actor_role: Role | None, target_role: Role | None = None) -> None:
    """Raise PermissionDenied unless the actor may promote."""
    if not can_promote(actor_role):
        raise PermissionDenied(PROMOTE, actor_role, target_role)


def require_add_member(actor_role: Role | None) -> None:
    """Raise PermissionDenied unless the actor may add members."""
    if not can_add_member(actor_role):
        raise PermissionDenied(ADD_MEMBER, actor_role)


def require_remove_member(
    actor_role: Role | None,
    target_role: Role | None,
    actor_id: str,
    target_id: str,
) -> None:
    """Raise PermissionDenied unless the actor may remove the target."""
    if actor_id == target_id:
        raise PermissionDenied(
            REMOVE_MEMBER,
            actor_role,
            target_role,
            message="Use leave to remove yourself from a group.",
        )
    if not can_remove_member(actor_role, target_role, actor_id, target_id):
        raise PermissionDenied(REMOVE_MEMBER, actor_role, target_role)

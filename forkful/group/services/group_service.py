"""Service layer for group membership and role management."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from firebase_admin import firestore
from flask import current_app

from forkful.constants import GROUPS_COLLECTION
from forkful.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from forkful.group import policy
from forkful.group.models import Group, MemberEntry, Role
from forkful.user.services import get_user_by_id, get_users_by_ids

from .membership import Membership

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

T = TypeVar("T")


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def create_group(
        db: Client,
        name: str,
        owner_id: str,
        is_private: bool = False,
        image_url: str | None = None,
    ) -> str:
        """Create a group owned by ``owner_id`` and return its ID."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name cannot be empty.")

        group_data: dict[str, Any] = {
            "name": name,
            "ownerId": owner_id,
            "members": [owner_id],  # Owner is the first member
            "roles": {owner_id: Role.OWNER.value},
            "isPrivate": bool(is_private),
            "createdAt": datetime.datetime.now(datetime.timezone.utc),
        }
        if image_url:
            group_data["imageUrl"] = image_url

        _, group_ref = db.collection(GROUPS_COLLECTION).add(group_data)
        current_app.logger.info(f"User {owner_id} created group {group_ref.id}")
        return group_ref.id

    @staticmethod
    def get_group(db: Client, group_id: str) -> Group | None:
        """Fetch a group by ID, or None if it does not exist."""
        snapshot = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        membership = Membership.from_snapshot(snapshot)
        data.update(membership.to_update())
        data["id"] = snapshot.id
        return data  # type: ignore[return-value]

    @staticmethod
    def get_user_groups(db: Client, user_id: str) -> list[Group]:
        """Fetch all groups the user is a member of."""
        groups_query = (
            db.collection(GROUPS_COLLECTION)
            .where(filter=firestore.FieldFilter("members", "array_contains", user_id))
            .stream()
        )
        groups = []
        for doc in groups_query:
            data = doc.to_dict()
            if data:
                data.update(Membership.from_snapshot(doc).to_update())
                data["id"] = doc.id
                groups.append(data)
        groups.sort(key=lambda g: g.get("name", "").lower())
        return groups

    @staticmethod
    def delete_group(db: Client, group_id: str, actor_id: str) -> None:
        """Delete a group. Only its owner may do this."""
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)
        snapshot = group_ref.get()
        if not snapshot.exists:
            raise NotFoundError("Group not found.")

        membership = Membership.from_snapshot(snapshot)
        actor_role = membership.role_of(actor_id)
        if actor_role is not Role.OWNER:
            raise PermissionDenied("delete the group", actor_role)

        group_ref.delete()
        current_app.logger.info(f"User {actor_id} deleted group {group_id}")

    @staticmethod
    def join(db: Client, group_id: str, user_id: str) -> Role:
        """Add the user to the group as a member, keeping any existing role.

        Joining is idempotent: an admin who follows the invite link again
        stays an admin. Returns the user's role after the call.
        """

        def change(membership: Membership) -> Role:
            if not membership.is_member(user_id):
                membership.add(user_id, Role.MEMBER)
            return membership.roles[user_id]

        role, changed = GroupService._update_membership(db, group_id, change)
        if changed:
            current_app.logger.info(f"User {user_id} joined group {group_id}")
        return role

    @staticmethod
    def add_member(db: Client, group_id: str, actor_id: str, user_id: str) -> Role:
        """Add another user to the group on behalf of an owner or admin."""
        if get_user_by_id(db, user_id) is None:
            raise NotFoundError("User not found.")

        def change(membership: Membership) -> Role:
            policy.require_add_member(membership.role_of(actor_id))
            if not membership.is_member(user_id):
                membership.add(user_id, Role.MEMBER)
            return membership.roles[user_id]

        role, changed = GroupService._update_membership(db, group_id, change)
        if changed:
            current_app.logger.info(
                f"User {actor_id} added {user_id} to group {group_id}"
            )
        return role

    @staticmethod
    def remove_member(db: Client, group_id: str, actor_id: str, user_id: str) -> None:
        """Remove a member from the group, enforcing the role policy."""

        def change(membership: Membership) -> Role:
            target_role = membership.role_of(user_id)
            if target_role is None and membership.is_member(actor_id):
                raise NotFoundError("User is not a member of this group.")
            policy.require_remove_member(
                membership.role_of(actor_id), target_role, actor_id, user_id
            )
            membership.remove(user_id)
            return target_role

        target_role, _ = GroupService._update_membership(db, group_id, change)
        current_app.logger.info(
            f"User {actor_id} removed {user_id} ({target_role.value}) "
            f"from group {group_id}"
        )

    @staticmethod
    def promote(db: Client, group_id: str, actor_id: str, user_id: str) -> None:
        """Promote a member to admin. Only the owner may promote."""

        def change(membership: Membership) -> None:
            target_role = membership.role_of(user_id)
            policy.require_promote(membership.role_of(actor_id), target_role)
            if target_role is None:
                raise NotFoundError("User is not a member of this group.")
            if target_role is not Role.MEMBER:
                raise ConflictError(f"User is already a {target_role.value}.")
            membership.set_role(user_id, Role.ADMIN)

        GroupService._update_membership(db, group_id, change)
        current_app.logger.info(
            f"User {actor_id} promoted {user_id} to admin in group {group_id}"
        )

    @staticmethod
    def leave(db: Client, group_id: str, user_id: str) -> None:
        """Remove the user from the group at their own request.

        The owner cannot leave: a group always keeps exactly one owner, and
        there is no rule for picking a successor. The owner deletes the
        group instead.
        """

        def change(membership: Membership) -> None:
            role = membership.role_of(user_id)
            if role is None:
                raise NotFoundError("User is not a member of this group.")
            if role is Role.OWNER:
                raise PermissionDenied(
                    "leave",
                    role,
                    message="The owner cannot leave the group; delete it instead.",
                )
            membership.remove(user_id)

        GroupService._update_membership(db, group_id, change)
        current_app.logger.info(f"User {user_id} left group {group_id}")

    @staticmethod
    def list_members(db: Client, group_id: str) -> list[MemberEntry]:
        """Return member profiles with their roles, most privileged first.

        Members whose profile cannot be found are left out of the list.
        """
        snapshot = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not snapshot.exists:
            raise NotFoundError("Group not found.")
        membership = Membership.from_snapshot(snapshot)

        profiles = get_users_by_ids(db, membership.members)
        entries: list[MemberEntry] = []
        for uid in membership.members:
            profile = profiles.get(uid)
            if profile is None:
                current_app.logger.warning(
                    f"Skipping member {uid} of group {group_id}: profile not found"
                )
                continue
            entries.append({"user": profile, "role": membership.roles[uid]})

        # sort() is stable, so members of equal rank keep their join order
        entries.sort(key=lambda entry: entry["role"].rank, reverse=True)
        return entries

    @staticmethod
    def _update_membership(
        db: Client, group_id: str, change: Callable[[Membership], T]
    ) -> tuple[T, bool]:
        """Apply ``change`` to the group's membership inside a transaction.

        ``change`` may run more than once if Firestore retries the
        transaction, so it must only touch the ``Membership`` it is given.
        Returns the value of ``change`` and whether anything was written.
        """
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)

        @firestore.transactional
        def _update_in_transaction(transaction: Any) -> tuple[T, bool]:
            snapshot = group_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Group not found.")

            membership = Membership.from_snapshot(snapshot)
            result = change(membership)
            if membership.changed:
                membership.validate()
                transaction.update(group_ref, membership.to_update())
            return result, membership.changed

        return _update_in_transaction(db.transaction())

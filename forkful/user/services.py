"""Read-only access to user profiles stored in Firestore."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from forkful.constants import USERS_COLLECTION

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def get_user_by_id(db: Client, user_id: str) -> dict[str, Any] | None:
    """Fetch a user by their ID."""
    user_ref = db.collection(USERS_COLLECTION).document(user_id)
    user_doc = cast("DocumentSnapshot", user_ref.get())
    if not user_doc.exists:
        return None
    data = user_doc.to_dict()
    if data is None:
        return None
    data["id"] = user_id
    return data


def get_users_by_ids(db: Client, user_ids: list[str]) -> dict[str, dict[str, Any]]:
    """Batch fetch user profiles and return the ones that exist, keyed by ID."""
    if not user_ids:
        return {}
    refs = [db.collection(USERS_COLLECTION).document(uid) for uid in user_ids]
    docs = cast(list["DocumentSnapshot"], db.get_all(refs))
    users = {}
    for doc in docs:
        if doc.exists:
            data = doc.to_dict()
            if data is not None:
                users[doc.id] = {"id": doc.id, **data}
    return users

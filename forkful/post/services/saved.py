"""Per-user bookmarks of posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore

from forkful.constants import POSTS_COLLECTION, SAVED_POSTS_COLLECTION
from forkful.errors import NotFoundError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class SavedPostService:
    """Service class for saved posts, one bookmark document per user."""

    @staticmethod
    def save_post(db: Client, user_id: str, post_id: str) -> None:
        """Bookmark a post for the user."""
        if not db.collection(POSTS_COLLECTION).document(post_id).get().exists:
            raise NotFoundError("Post not found.")

        saved_ref = db.collection(SAVED_POSTS_COLLECTION).document(user_id)
        if saved_ref.get().exists:
            saved_ref.update({"posts": firestore.ArrayUnion([post_id])})
        else:
            saved_ref.set({"posts": [post_id]})

    @staticmethod
    def unsave_post(db: Client, user_id: str, post_id: str) -> None:
        """Remove a bookmark; removing one that does not exist is a no-op."""
        saved_ref = db.collection(SAVED_POSTS_COLLECTION).document(user_id)
        if saved_ref.get().exists:
            saved_ref.update({"posts": firestore.ArrayRemove([post_id])})

    @staticmethod
    def is_post_saved(db: Client, user_id: str, post_id: str) -> bool:
        """Check whether the user has bookmarked the post."""
        return post_id in SavedPostService.get_saved_posts(db, user_id)

    @staticmethod
    def get_saved_posts(db: Client, user_id: str) -> list[str]:
        """Return the IDs of the user's bookmarked posts."""
        doc = db.collection(SAVED_POSTS_COLLECTION).document(user_id).get()
        if not doc.exists:
            return []
        return list((doc.to_dict() or {}).get("posts") or [])

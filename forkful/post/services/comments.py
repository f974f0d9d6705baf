"""Service layer for comments and their nested replies."""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import NotFound

from forkful.constants import COMMENTS_COLLECTION, POSTS_COLLECTION
from forkful.errors import NotFoundError, PermissionDenied, ValidationError
from forkful.post.models import Comment, Reply

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class CommentService:
    """Service class for comment-related operations."""

    @staticmethod
    def create_comment(  # noqa: PLR0913
        db: Client,
        post_id: str,
        user_id: str,
        display_name: str,
        photo_url: str | None,
        content: str,
    ) -> str:
        """Create a comment on a post and bump the post's comment count."""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment cannot be empty.")

        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        comment_ref = db.collection(COMMENTS_COLLECTION).document()
        comment_data: Comment = {
            "commentId": comment_ref.id,
            "postId": post_id,
            "userId": user_id,
            "userDisplayName": display_name,
            "userPhotoUrl": photo_url,
            "content": content,
            "createdAt": datetime.datetime.now(datetime.timezone.utc),
            "replies": [],
        }

        @firestore.transactional
        def _create_in_transaction(transaction: Any) -> None:
            post_snapshot = post_ref.get(transaction=transaction)
            if not post_snapshot.exists:
                raise NotFoundError("Post not found.")
            count = (post_snapshot.to_dict() or {}).get("commentCount") or 0
            transaction.set(comment_ref, comment_data)
            transaction.update(post_ref, {"commentCount": count + 1})

        _create_in_transaction(db.transaction())
        current_app.logger.info(
            f"User {user_id} commented {comment_ref.id} on post {post_id}"
        )
        return comment_ref.id

    @staticmethod
    def delete_comment(
        db: Client, comment_id: str, actor_id: str | None = None
    ) -> None:
        """Delete a comment with all of its replies.

        When ``actor_id`` is given it must be the comment's author or the
        author of the post it was left on.
        """
        comment_ref = db.collection(COMMENTS_COLLECTION).document(comment_id)

        @firestore.transactional
        def _delete_in_transaction(transaction: Any) -> str:
            comment_snapshot = comment_ref.get(transaction=transaction)
            if not comment_snapshot.exists:
                raise NotFoundError("Comment not found.")
            comment_data = comment_snapshot.to_dict() or {}
            post_id = comment_data.get("postId")
            post_ref = post_snapshot = None
            if post_id:
                post_ref = db.collection(POSTS_COLLECTION).document(post_id)
                post_snapshot = post_ref.get(transaction=transaction)

            if actor_id is not None and actor_id != comment_data.get("userId"):
                post_author = None
                if post_snapshot is not None and post_snapshot.exists:
                    post_author = (post_snapshot.to_dict() or {}).get("authorId")
                if actor_id != post_author:
                    raise PermissionDenied(
                        "delete", message="You cannot delete this comment."
                    )

            transaction.delete(comment_ref)
            if post_snapshot is not None and post_snapshot.exists:
                count = (post_snapshot.to_dict() or {}).get("commentCount") or 0
                transaction.update(post_ref, {"commentCount": max(0, count - 1)})
            return post_id

        post_id = _delete_in_transaction(db.transaction())
        current_app.logger.info(f"Deleted comment {comment_id} from post {post_id}")

    @staticmethod
    def add_reply(db: Client, comment_id: str, user_id: str, text: str) -> str:
        """Append a reply to a comment and return the new reply's ID."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("Reply cannot be empty.")

        comment_ref = db.collection(COMMENTS_COLLECTION).document(comment_id)
        if not comment_ref.get().exists:
            raise NotFoundError("Comment not found.")

        reply: Reply = {
            "replyId": str(uuid.uuid4()),
            "userId": user_id,
            "text": text,
            "createdAt": datetime.datetime.now(datetime.timezone.utc),
        }
        try:
            comment_ref.update({"replies": firestore.ArrayUnion([reply])})
        except NotFound:
            # Deleted between the read and the write
            raise NotFoundError("Comment not found.") from None
        return reply["replyId"]

    @staticmethod
    def delete_reply(
        db: Client, comment_id: str, reply_id: str, actor_id: str | None = None
    ) -> None:
        """Remove a single reply, matched by its ID.

        When ``actor_id`` is given it must be the reply's or the comment's author.
        """
        comment_ref = db.collection(COMMENTS_COLLECTION).document(comment_id)
        comment_doc = comment_ref.get()
        if not comment_doc.exists:
            raise NotFoundError("Comment not found.")

        comment_data = comment_doc.to_dict() or {}
        replies = comment_data.get("replies") or []
        reply = next((r for r in replies if r.get("replyId") == reply_id), None)
        if reply is None:
            raise NotFoundError("Reply not found.")
        if actor_id is not None and actor_id not in (
            reply.get("userId"),
            comment_data.get("userId"),
        ):
            raise PermissionDenied("delete", message="You cannot delete this reply.")

        # ArrayRemove matches whole elements, so pass the stored reply itself.
        try:
            comment_ref.update({"replies": firestore.ArrayRemove([reply])})
        except NotFound:
            raise NotFoundError("Comment not found.") from None

    @staticmethod
    def get_comment(db: Client, comment_id: str) -> Comment | None:
        """Fetch a comment by ID, or None if it does not exist."""
        doc = db.collection(COMMENTS_COLLECTION).document(comment_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data.setdefault("commentId", doc.id)
        data.setdefault("replies", [])
        return data  # type: ignore[return-value]

    @staticmethod
    def list_comments(db: Client, post_id: str) -> list[Comment]:
        """Return a post's comments, oldest first."""
        comments_query = (
            db.collection(COMMENTS_COLLECTION)
            .where(filter=firestore.FieldFilter("postId", "==", post_id))
            .order_by("createdAt")
            .stream()
        )
        comments = []
        for doc in comments_query:
            data = doc.to_dict()
            if data:
                data.setdefault("commentId", doc.id)
                data.setdefault("replies", [])
                comments.append(data)
        return comments

    @staticmethod
    def count_comments(db: Client, post_id: str) -> int:
        """Count the comment documents that belong to a post."""
        comments_query = (
            db.collection(COMMENTS_COLLECTION)
            .where(filter=firestore.FieldFilter("postId", "==", post_id))
            .stream()
        )
        return sum(1 for _ in comments_query)

    @staticmethod
    def recount(db: Client, post_id: str) -> int:
        """Rebuild the post's cached ``commentCount`` from the comments."""
        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        if not post_ref.get().exists:
            raise NotFoundError("Post not found.")
        count = CommentService.count_comments(db, post_id)
        post_ref.update({"commentCount": count})
        current_app.logger.info(f"Recounted comments on post {post_id}: {count}")
        return count

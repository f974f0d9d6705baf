"""Service layer for review posts."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import current_app

from forkful.constants import (
    COMMENTS_COLLECTION,
    DEFAULT_FEED_LIMIT,
    FIRESTORE_BATCH_LIMIT,
    MAX_POST_LENGTH,
    MAX_RATING,
    POST_VISIBILITIES,
    POSTS_COLLECTION,
    RATING_CATEGORIES,
    REACTIONS_COLLECTION,
)
from forkful.errors import NotFoundError, PermissionDenied, ValidationError
from forkful.group.services import GroupService
from forkful.post.models import Post

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def _clean_ratings(ratings: dict[str, Any] | None) -> dict[str, int]:
    """Validate star ratings: known categories, whole stars from 0 to MAX_RATING."""
    cleaned = {}
    for category, value in (ratings or {}).items():
        if category not in RATING_CATEGORIES:
            raise ValidationError(f"Unknown rating category: {category}.")
        try:
            stars = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Rating for {category} must be a number.") from None
        if not 0 <= stars <= MAX_RATING:
            raise ValidationError(
                f"Rating for {category} must be between 0 and {MAX_RATING}."
            )
        cleaned[category] = stars
    return cleaned


class PostService:
    """Service class for post-related operations."""

    @staticmethod
    def create_post(  # noqa: PLR0913
        db: Client,
        author_id: str,
        content: str,
        images: list[str] | None = None,
        ratings: dict[str, Any] | None = None,
        visibility: str = "public",
        group_id: str | None = None,
    ) -> str:
        """Create a review post and return its ID."""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Post cannot be empty.")
        if len(content) > MAX_POST_LENGTH:
            raise ValidationError(
                f"Post cannot be longer than {MAX_POST_LENGTH} characters."
            )
        if visibility not in POST_VISIBILITIES:
            raise ValidationError(f"Unknown visibility: {visibility}.")

        post_data: dict[str, Any] = {
            "authorId": author_id,
            "content": content,
            "images": list(images or []),
            "ratings": _clean_ratings(ratings),
            "visibility": visibility,
            "createdAt": datetime.datetime.now(datetime.timezone.utc),
            "reactionCount": {},
            "commentCount": 0,
        }

        if visibility == "group":
            if not group_id:
                raise ValidationError("Group posts need a group.")
            group = GroupService.get_group(db, group_id)
            if group is None:
                raise NotFoundError("Group not found.")
            if author_id not in group.get("members", []):
                raise PermissionDenied(
                    "post",
                    message="Only group members can post in a group.",
                )
            post_data["groupId"] = group_id

        _, post_ref = db.collection(POSTS_COLLECTION).add(post_data)
        current_app.logger.info(f"User {author_id} created post {post_ref.id}")
        return post_ref.id

    @staticmethod
    def get_post(db: Client, post_id: str) -> Post | None:
        """Fetch a post by ID, or None if it does not exist."""
        doc = db.collection(POSTS_COLLECTION).document(post_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data  # type: ignore[return-value]

    @staticmethod
    def get_public_feed(db: Client, limit: int = DEFAULT_FEED_LIMIT) -> list[Post]:
        """Fetch the newest public posts."""
        query = (
            db.collection(POSTS_COLLECTION)
            .where(filter=firestore.FieldFilter("visibility", "==", "public"))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return PostService._collect(query)

    @staticmethod
    def get_user_posts(db: Client, author_id: str) -> list[Post]:
        """Fetch a user's posts, newest first."""
        query = (
            db.collection(POSTS_COLLECTION)
            .where(filter=firestore.FieldFilter("authorId", "==", author_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        return PostService._collect(query)

    @staticmethod
    def get_group_posts(db: Client, group_id: str, viewer_id: str) -> list[Post]:
        """Fetch a group's posts, newest first.

        Posts of a private group are only visible to its members.
        """
        group = GroupService.get_group(db, group_id)
        if group is None:
            raise NotFoundError("Group not found.")
        if group.get("isPrivate") and viewer_id not in group.get("members", []):
            raise PermissionDenied(
                "view", message="Only members can view posts in a private group."
            )

        query = (
            db.collection(POSTS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        return PostService._collect(query)

    @staticmethod
    def delete_post(db: Client, post_id: str, actor_id: str) -> None:
        """Delete a post together with its reactions and comments."""
        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        post_doc = post_ref.get()
        if not post_doc.exists:
            raise NotFoundError("Post not found.")
        if (post_doc.to_dict() or {}).get("authorId") != actor_id:
            raise PermissionDenied(
                "delete", message="Only the author can delete a post."
            )

        refs = []
        for collection in (REACTIONS_COLLECTION, COMMENTS_COLLECTION):
            docs = (
                db.collection(collection)
                .where(filter=firestore.FieldFilter("postId", "==", post_id))
                .stream()
            )
            refs.extend(doc.reference for doc in docs)

        # The post goes last, so an interrupted delete can be retried.
        refs.append(post_ref)
        for i in range(0, len(refs), FIRESTORE_BATCH_LIMIT):
            batch = db.batch()
            for ref in refs[i : i + FIRESTORE_BATCH_LIMIT]:
                batch.delete(ref)
            batch.commit()
        current_app.logger.info(
            f"User {actor_id} deleted post {post_id} and {len(refs) - 1} children"
        )

    @staticmethod
    def _collect(query: Any) -> list[Post]:
        posts = []
        for doc in query.stream():
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                posts.append(data)
        return posts

"""Reaction ledger: one reaction per user per post, plus per-type counters.

Each reaction lives at ``reactions/{postId}_{userId}``, so the pair is the
document key and a second insert for the same pair overwrites rather than
duplicates. The post's ``reactionCount`` map is a cache of the grouped rows
and is only written inside the toggle transaction or by ``recount``.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Mapping

from firebase_admin import firestore
from flask import current_app

from forkful.constants import POSTS_COLLECTION, REACTION_TYPES, REACTIONS_COLLECTION
from forkful.errors import NotFoundError, ValidationError
from forkful.post.models import ADDED, REMOVED, SWITCHED, Reaction, ToggleResult

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


def reaction_id(post_id: str, user_id: str) -> str:
    """Return the document ID of a user's reaction on a post."""
    return f"{post_id}_{user_id}"


def total_reactions(counts: Mapping[str, Any] | None) -> int:
    """Sum a reaction count map; missing or empty maps count as zero."""
    if not counts:
        return 0
    return sum(int(value or 0) for value in counts.values())


def _adjust(counts: dict[str, int], reaction_type: str, delta: int) -> None:
    counts[reaction_type] = max(0, int(counts.get(reaction_type) or 0) + delta)


class ReactionService:
    """Service class for reactions on posts."""

    @staticmethod
    def toggle(
        db: Client, post_id: str, user_id: str, reaction_type: str
    ) -> ToggleResult:
        """Add, remove or switch the user's reaction on a post.

        Reacting with the type you already have removes it; reacting with a
        different type replaces it. The reaction and the post's counters are
        written in one transaction, so a double click cannot leave two
        reactions or a half-updated count behind.
        """
        if reaction_type not in REACTION_TYPES:
            raise ValidationError(f"Unknown reaction type: {reaction_type}.")

        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        reaction_ref = db.collection(REACTIONS_COLLECTION).document(
            reaction_id(post_id, user_id)
        )

        toggle_in_transaction = firestore.transactional(
            ReactionService._toggle_transaction
        )
        result = toggle_in_transaction(
            db.transaction(), post_ref, reaction_ref, user_id, reaction_type
        )
        current_app.logger.info(
            f"User {user_id} {result.action} reaction {reaction_type} on post {post_id}"
        )
        return result

    @staticmethod
    def _toggle_transaction(
        transaction: Transaction,
        post_ref: DocumentReference,
        reaction_ref: DocumentReference,
        user_id: str,
        reaction_type: str,
    ) -> ToggleResult:
        """Read the post and reaction, then queue the writes for a toggle."""
        # All reads must happen before the first write in a transaction.
        post_snapshot = post_ref.get(transaction=transaction)
        if not post_snapshot.exists:
            raise NotFoundError("Post not found.")
        reaction_snapshot = reaction_ref.get(transaction=transaction)

        post_data = post_snapshot.to_dict() or {}
        counts = dict(post_data.get("reactionCount") or {})
        previous_type = None
        if reaction_snapshot.exists:
            previous_type = (reaction_snapshot.to_dict() or {}).get("type")

        if previous_type == reaction_type:
            transaction.delete(reaction_ref)
            _adjust(counts, reaction_type, -1)
            result = ToggleResult(REMOVED, None, previous_type)
        else:
            transaction.set(
                reaction_ref,
                {
                    "postId": post_ref.id,
                    "userId": user_id,
                    "type": reaction_type,
                    "createdAt": datetime.datetime.now(datetime.timezone.utc),
                },
            )
            # Switching moves one count between buckets: two separate adjustments.
            if previous_type is not None:
                _adjust(counts, previous_type, -1)
            _adjust(counts, reaction_type, 1)
            action = SWITCHED if previous_type is not None else ADDED
            result = ToggleResult(action, reaction_type, previous_type)

        transaction.update(post_ref, {"reactionCount": counts})
        return result

    @staticmethod
    def get_user_reaction(db: Client, post_id: str, user_id: str) -> Reaction | None:
        """Return the user's reaction on a post, or None."""
        doc = (
            db.collection(REACTIONS_COLLECTION)
            .document(reaction_id(post_id, user_id))
            .get()
        )
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data  # type: ignore[return-value]

    @staticmethod
    def get_counts(db: Client, post_id: str) -> dict[str, int]:
        """Count the post's reactions by type from the reaction documents."""
        counts = {reaction_type: 0 for reaction_type in REACTION_TYPES}
        reactions_query = (
            db.collection(REACTIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("postId", "==", post_id))
            .stream()
        )
        for doc in reactions_query:
            reaction_type = (doc.to_dict() or {}).get("type")
            if reaction_type:
                counts[reaction_type] = counts.get(reaction_type, 0) + 1
        return counts

    @staticmethod
    def recount(db: Client, post_id: str) -> dict[str, int]:
        """Rebuild the post's cached ``reactionCount`` from the reactions.

        A toggle that commits between the count and the write is lost from
        the cache; running recount again repairs it.
        """
        post_ref = db.collection(POSTS_COLLECTION).document(post_id)
        if not post_ref.get().exists:
            raise NotFoundError("Post not found.")
        counts = ReactionService.get_counts(db, post_id)
        post_ref.update({"reactionCount": counts})
        current_app.logger.info(f"Recounted reactions on post {post_id}: {counts}")
        return counts

    total_reactions = staticmethod(total_reactions)

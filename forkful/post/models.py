"""Data models for the post blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict

from forkful.core.types import FirestoreDocument


class Post(FirestoreDocument, total=False):
    """A restaurant review post document in Firestore."""

    authorId: str
    content: str
    images: list[str]
    ratings: dict[str, int]
    visibility: str
    groupId: str
    reactionCount: dict[str, int]
    commentCount: int


class Reaction(TypedDict, total=False):
    """A reaction document, stored under the ID ``{postId}_{userId}``."""

    id: str
    postId: str
    userId: str
    type: str
    createdAt: Any


class Reply(TypedDict):
    """A reply nested inside a comment."""

    replyId: str
    userId: str
    text: str
    createdAt: Any


class Comment(TypedDict, total=False):
    """A comment document in Firestore."""

    commentId: str
    postId: str
    userId: str
    userDisplayName: str
    userPhotoUrl: str | None
    content: str
    createdAt: Any
    replies: list[Reply]


ADDED = "added"
REMOVED = "removed"
SWITCHED = "switched"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of toggling a reaction."""

    action: str
    type: str | None
    previous_type: str | None = None

    @property
    def added(self) -> bool:
        """Return True if the user has a reaction on the post afterwards."""
        return self.action != REMOVED

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result for a JSON response."""
        return {
            "action": self.action,
            "added": self.added,
            "type": self.type,
            "previousType": self.previous_type,
        }

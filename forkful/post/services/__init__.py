"""Post services: posts, reactions, comments and bookmarks."""

from .comments import CommentService
from .posts import PostService
from .reactions import ReactionService, total_reactions
from .saved import SavedPostService

__all__ = [
    "CommentService",
    "PostService",
    "ReactionService",
    "SavedPostService",
    "total_reactions",
]

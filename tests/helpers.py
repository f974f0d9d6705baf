"""Base test cases wired to an in-memory Firestore."""

import unittest
from unittest.mock import patch

from forkful import create_app
from tests.mock_utils import build_firestore_module, build_mock_db, patch_mockfirestore

# Every module that talks to Firestore through ``firestore.client()`` or the
# module-level helpers (FieldFilter, transactional, ArrayUnion).
FIRESTORE_MODULES = (
    "forkful",
    "forkful.group.routes",
    "forkful.group.services.group_service",
    "forkful.post.routes",
    "forkful.post.services.comments",
    "forkful.post.services.posts",
    "forkful.post.services.reactions",
    "forkful.post.services.saved",
)

OWNER_ID = "owner1"
ADMIN_ID = "admin1"
MEMBER_ID = "member1"
OUTSIDER_ID = "outsider1"


class FirestoreTestCase(unittest.TestCase):
    """Test case with a mock Firestore, an app and a pushed app context."""

    csrf_enabled = False

    def setUp(self) -> None:
        """Set up the mock database and patch Firestore everywhere."""
        patch_mockfirestore()
        self.db = build_mock_db()
        self.mock_firestore = build_firestore_module(self.db)

        patchers = [patch("firebase_admin.initialize_app")] + [
            patch(f"{module}.firestore", new=self.mock_firestore)
            for module in FIRESTORE_MODULES
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app(
            {
                "TESTING": True,
                "WTF_CSRF_ENABLED": self.csrf_enabled,
                "SERVER_NAME": "localhost",
            }
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def add_user(self, user_id: str, name: str | None = None) -> None:
        """Store a user profile."""
        self.db.collection("users").document(user_id).set(
            {"name": name or user_id.title(), "email": f"{user_id}@example.com"}
        )

    def add_group(
        self,
        group_id: str = "group1",
        roles: dict[str, str] | None = None,
        is_private: bool = False,
    ) -> None:
        """Store a group with the given roles; the owner is the OWNER entry."""
        roles = roles or {
            OWNER_ID: "owner",
            ADMIN_ID: "admin",
            MEMBER_ID: "member",
        }
        owner_id = next(uid for uid, role in roles.items() if role == "owner")
        self.db.collection("groups").document(group_id).set(
            {
                "name": "Taco Tuesday",
                "ownerId": owner_id,
                "members": list(roles),
                "roles": dict(roles),
                "isPrivate": is_private,
            }
        )

    def add_post(self, post_id: str = "post1", author_id: str = OWNER_ID, **fields):
        """Store a post with empty counters."""
        data = {
            "authorId": author_id,
            "content": "Great tacos.",
            "visibility": "public",
            "reactionCount": {},
            "commentCount": 0,
        }
        data.update(fields)
        self.db.collection("posts").document(post_id).set(data)

    def group_data(self, group_id: str = "group1") -> dict:
        """Read a stored group document."""
        return self.db.collection("groups").document(group_id).get().to_dict()

    def post_data(self, post_id: str = "post1") -> dict:
        """Read a stored post document."""
        return self.db.collection("posts").document(post_id).get().to_dict()


class RouteTestCase(FirestoreTestCase):
    """Firestore test case with a signed-in user for the JSON routes."""

    def login(self, user_id: str = OWNER_ID) -> None:
        """Store the user's profile and put them in the session."""
        if not self.db.collection("users").document(user_id).get().exists:
            self.add_user(user_id)
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id

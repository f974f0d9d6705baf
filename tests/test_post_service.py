"""Tests for review posts using mockfirestore."""

from __future__ import annotations

import datetime

from forkful.errors import NotFoundError, PermissionDenied, ValidationError
from forkful.post.services import CommentService, PostService, ReactionService
from tests.helpers import MEMBER_ID, OUTSIDER_ID, OWNER_ID, FirestoreTestCase


def _at(day: int) -> datetime.datetime:
    return datetime.datetime(2024, 5, day, tzinfo=datetime.timezone.utc)


class PostServiceTestCase(FirestoreTestCase):
    """Tests for PostService."""

    def test_create_post(self) -> None:
        post_id = PostService.create_post(
            self.db,
            OWNER_ID,
            " Best ramen in town. ",
            images=["https://example.com/ramen.jpg"],
            ratings={"food": 5, "ambiance": "3"},
        )
        post = PostService.get_post(self.db, post_id)
        self.assertEqual(post["id"], post_id)
        self.assertEqual(post["content"], "Best ramen in town.")
        self.assertEqual(post["ratings"], {"food": 5, "ambiance": 3})
        self.assertEqual(post["reactionCount"], {})
        self.assertEqual(post["commentCount"], 0)
        self.assertEqual(post["visibility"], "public")

    def test_create_post_validation(self) -> None:
        bad_calls = [
            {"content": ""},
            {"content": "x" * 501},
            {"content": "ok", "visibility": "secret"},
            {"content": "ok", "ratings": {"service": 4}},
            {"content": "ok", "ratings": {"food": 6}},
            {"content": "ok", "ratings": {"food": "great"}},
            {"content": "ok", "visibility": "group"},
        ]
        for kwargs in bad_calls:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValidationError):
                    PostService.create_post(self.db, OWNER_ID, **kwargs)

    def test_group_post_requires_membership(self) -> None:
        self.add_group()
        post_id = PostService.create_post(
            self.db, MEMBER_ID, "Team lunch", visibility="group", group_id="group1"
        )
        self.assertEqual(PostService.get_post(self.db, post_id)["groupId"], "group1")

        with self.assertRaises(PermissionDenied):
            PostService.create_post(
                self.db, OUTSIDER_ID, "Sneaky", visibility="group", group_id="group1"
            )
        with self.assertRaises(NotFoundError):
            PostService.create_post(
                self.db, MEMBER_ID, "Lost", visibility="group", group_id="nope"
            )

    def test_get_post_missing(self) -> None:
        self.assertIsNone(PostService.get_post(self.db, "nope"))

    def test_public_feed_newest_first(self) -> None:
        self.add_post("old", createdAt=_at(1))
        self.add_post("new", createdAt=_at(3))
        self.add_post("mid", createdAt=_at(2))
        self.add_post("hidden", createdAt=_at(4), visibility="private")

        feed = PostService.get_public_feed(self.db)
        self.assertEqual([p["id"] for p in feed], ["new", "mid", "old"])
        self.assertEqual(len(PostService.get_public_feed(self.db, limit=1)), 1)

    def test_user_posts(self) -> None:
        self.add_post("a", author_id=OWNER_ID, createdAt=_at(1))
        self.add_post("b", author_id=MEMBER_ID, createdAt=_at(2))
        self.add_post("c", author_id=OWNER_ID, createdAt=_at(3))
        posts = PostService.get_user_posts(self.db, OWNER_ID)
        self.assertEqual([p["id"] for p in posts], ["c", "a"])

    def test_private_group_posts_are_members_only(self) -> None:
        self.add_group(is_private=True)
        self.add_post("gp", visibility="group", groupId="group1", createdAt=_at(1))

        posts = PostService.get_group_posts(self.db, "group1", MEMBER_ID)
        self.assertEqual([p["id"] for p in posts], ["gp"])
        with self.assertRaises(PermissionDenied):
            PostService.get_group_posts(self.db, "group1", OUTSIDER_ID)
        with self.assertRaises(NotFoundError):
            PostService.get_group_posts(self.db, "nope", MEMBER_ID)

    def test_delete_post_cascades(self) -> None:
        self.add_post()
        ReactionService.toggle(self.db, "post1", MEMBER_ID, "like")
        ReactionService.toggle(self.db, "post1", OUTSIDER_ID, "sad")
        CommentService.create_comment(self.db, "post1", MEMBER_ID, "M", None, "Yum")

        PostService.delete_post(self.db, "post1", OWNER_ID)

        self.assertIsNone(PostService.get_post(self.db, "post1"))
        self.assertEqual(ReactionService.get_counts(self.db, "post1")["like"], 0)
        self.assertEqual(CommentService.list_comments(self.db, "post1"), [])
        self.db.batch.assert_called_once()

    def test_delete_post_author_only(self) -> None:
        self.add_post()
        with self.assertRaises(PermissionDenied):
            PostService.delete_post(self.db, "post1", MEMBER_ID)
        with self.assertRaises(NotFoundError):
            PostService.delete_post(self.db, "nope", OWNER_ID)

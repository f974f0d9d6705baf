"""Tests for saved post bookmarks."""

from __future__ import annotations

from forkful.errors import NotFoundError
from forkful.post.services import SavedPostService
from tests.helpers import MEMBER_ID, FirestoreTestCase


class SavedPostServiceTestCase(FirestoreTestCase):
    """Tests for SavedPostService."""

    def setUp(self) -> None:
        """Store two posts."""
        super().setUp()
        self.add_post("post1")
        self.add_post("post2")

    def test_save_and_list(self) -> None:
        self.assertEqual(SavedPostService.get_saved_posts(self.db, MEMBER_ID), [])
        SavedPostService.save_post(self.db, MEMBER_ID, "post1")
        SavedPostService.save_post(self.db, MEMBER_ID, "post2")
        SavedPostService.save_post(self.db, MEMBER_ID, "post1")
        self.assertEqual(
            SavedPostService.get_saved_posts(self.db, MEMBER_ID), ["post1", "post2"]
        )
        self.assertTrue(SavedPostService.is_post_saved(self.db, MEMBER_ID, "post2"))

    def test_unsave(self) -> None:
        SavedPostService.save_post(self.db, MEMBER_ID, "post1")
        SavedPostService.unsave_post(self.db, MEMBER_ID, "post1")
        self.assertFalse(SavedPostService.is_post_saved(self.db, MEMBER_ID, "post1"))

    def test_unsave_without_bookmarks_is_a_no_op(self) -> None:
        SavedPostService.unsave_post(self.db, MEMBER_ID, "post1")
        self.assertEqual(SavedPostService.get_saved_posts(self.db, MEMBER_ID), [])

    def test_save_missing_post(self) -> None:
        with self.assertRaises(NotFoundError):
            SavedPostService.save_post(self.db, MEMBER_ID, "nope")

"""Tests for the reaction toggle transaction body."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from forkful.errors import NotFoundError
from forkful.post.models import ADDED, REMOVED, SWITCHED
from forkful.post.services import ReactionService


def _snapshot(data):
    snap = MagicMock()
    snap.exists = data is not None
    snap.to_dict.return_value = data
    return snap


class ReactionTransactionTestCase(unittest.TestCase):
    """Call _toggle_transaction directly with a MagicMock transaction."""

    def setUp(self) -> None:
        self.transaction = MagicMock()
        self.post_ref = MagicMock()
        self.post_ref.id = "post1"
        self.reaction_ref = MagicMock()

    def run_toggle(self, counts, existing_type, new_type):
        self.post_ref.get.return_value = _snapshot({"reactionCount": counts})
        existing = {"type": existing_type} if existing_type else None
        self.reaction_ref.get.return_value = _snapshot(existing)
        return ReactionService._toggle_transaction(
            self.transaction, self.post_ref, self.reaction_ref, "u1", new_type
        )

    def test_reads_happen_inside_the_transaction(self) -> None:
        self.run_toggle({}, None, "like")
        self.post_ref.get.assert_called_with(transaction=self.transaction)
        self.reaction_ref.get.assert_called_with(transaction=self.transaction)

    def test_add(self) -> None:
        result = self.run_toggle({}, None, "like")
        self.assertEqual(result.action, ADDED)
        set_ref, set_data = self.transaction.set.call_args[0]
        self.assertIs(set_ref, self.reaction_ref)
        self.assertEqual(set_data["postId"], "post1")
        self.assertEqual(set_data["userId"], "u1")
        self.assertEqual(set_data["type"], "like")
        self.transaction.update.assert_called_once_with(
            self.post_ref, {"reactionCount": {"like": 1}}
        )
        self.transaction.delete.assert_not_called()

    def test_remove_floors_at_zero(self) -> None:
        result = self.run_toggle({"like": 0}, "like", "like")
        self.assertEqual(result.action, REMOVED)
        self.assertIsNone(result.type)
        self.transaction.delete.assert_called_once_with(self.reaction_ref)
        self.transaction.set.assert_not_called()
        self.transaction.update.assert_called_once_with(
            self.post_ref, {"reactionCount": {"like": 0}}
        )

    def test_switch_adjusts_both_buckets(self) -> None:
        result = self.run_toggle({"like": 2, "love": 1}, "like", "love")
        self.assertEqual(result.action, SWITCHED)
        self.assertEqual(result.to_dict()["previousType"], "like")
        self.transaction.update.assert_called_once_with(
            self.post_ref, {"reactionCount": {"like": 1, "love": 2}}
        )

    def test_missing_post_writes_nothing(self) -> None:
        self.post_ref.get.return_value = _snapshot(None)
        with self.assertRaises(NotFoundError):
            ReactionService._toggle_transaction(
                self.transaction, self.post_ref, self.reaction_ref, "u1", "like"
            )
        self.transaction.set.assert_not_called()
        self.transaction.update.assert_not_called()


if __name__ == "__main__":
    unittest.main()

"""Tests for CSRF protection on the JSON API."""

from __future__ import annotations

from tests.helpers import OUTSIDER_ID, RouteTestCase


class CsrfTestCase(RouteTestCase):
    """Write routes with CSRF protection switched on."""

    csrf_enabled = True

    def setUp(self) -> None:
        """Store a group the outsider can join."""
        super().setUp()
        self.add_group()
        self.login(OUTSIDER_ID)

    def test_write_without_token_is_rejected(self) -> None:
        response = self.client.post("/groups/group1/join")
        self.assertEqual(response.status_code, 400)
        self.assertIn("CSRF", response.get_json()["error"])
        self.assertNotIn(OUTSIDER_ID, self.group_data()["members"])

    def test_token_from_endpoint_is_accepted(self) -> None:
        response = self.client.get("/csrf-token")
        self.assertEqual(response.status_code, 200)
        token = response.get_json()["csrfToken"]

        response = self.client.post(
            "/groups/group1/join", headers={"X-CSRFToken": token}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"role": "member"})

    def test_token_endpoint_needs_no_login(self) -> None:
        with self.client.session_transaction() as sess:
            sess.clear()
        response = self.client.get("/csrf-token")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()["csrfToken"])

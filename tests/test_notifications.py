from juliecraft.models.notifications import Notification

from tests.helpers import ApiTestCase


class NotificationsTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.shopper = self.make_profile()
        self.other = self.make_profile(email="other@example.com")
        self.admin = self.make_admin()

    def _notify(self, recipient_type="customer", user=None, **extra):
        return self.save(Notification(
            recipient_type=recipient_type,
            user_id=user.id if user else None,
            type="order_status",
            title="Order update",
            message="Your order moved",
            **extra,
        ))

    # ---------- Listing ----------

    def test_customer_sees_only_own_notifications(self):
        self._notify(user=self.shopper)
        self._notify(user=self.shopper, is_read=True)
        self._notify(user=self.other)
        self._notify(recipient_type="admin")

        resp = self.client.get("/api/notifications/", headers=self.auth_headers(self.shopper))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["unread_count"], 1)

        unread = self.client.get(
            "/api/notifications/", params={"unread_only": True}, headers=self.auth_headers(self.shopper),
        ).json()
        self.assertEqual(len(unread["notifications"]), 1)

    def test_guest_gets_empty_list(self):
        resp = self.client.get("/api/notifications/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"notifications": [], "unread_count": 0, "total": 0})

    def test_admin_scope_requires_admin(self):
        self._notify(recipient_type="admin")
        params = {"recipient_type": "admin"}

        self.assertEqual(self.client.get("/api/notifications/", params=params).status_code, 403)
        self.assertEqual(
            self.client.get("/api/notifications/", params=params, headers=self.auth_headers(self.shopper)).status_code,
            403,
        )

        resp = self.client.get("/api/notifications/", params=params, headers=self.auth_headers(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["unread_count"], 1)

    # ---------- Read state ----------

    def test_mark_one_read(self):
        notice = self._notify(user=self.shopper)
        resp = self.client.patch(
            f"/api/notifications/{notice.id}", json={"is_read": True}, headers=self.auth_headers(self.shopper),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["is_read"])
        self.assertIsNotNone(resp.json()["read_at"])

    def test_cannot_touch_someone_elses_notification(self):
        notice = self._notify(user=self.other)
        headers = self.auth_headers(self.shopper)
        self.assertEqual(
            self.client.patch(f"/api/notifications/{notice.id}", json={"is_read": True}, headers=headers).status_code,
            403,
        )
        self.assertEqual(self.client.delete(f"/api/notifications/{notice.id}", headers=headers).status_code, 403)

    def test_unknown_notification_is_404(self):
        resp = self.client.delete(
            "/api/notifications/7f1c1f0e-0a4e-4d7b-9a55-2f3c2f6b9c11", headers=self.auth_headers(self.shopper),
        )
        self.assertEqual(resp.status_code, 404)

    def test_mark_all_read_is_scoped(self):
        self._notify(user=self.shopper)
        self._notify(user=self.shopper)
        theirs = self._notify(user=self.other)

        resp = self.client.post(
            "/api/notifications/mark-all-read",
            json={"recipient_type": "customer"},
            headers=self.auth_headers(self.shopper),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Marked 2 notifications as read")
        self.assertFalse(self.fetch(Notification, theirs.id).is_read)

    def test_delete(self):
        notice = self._notify(user=self.shopper)
        resp = self.client.delete(f"/api/notifications/{notice.id}", headers=self.auth_headers(self.shopper))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self.fetch(Notification, notice.id))

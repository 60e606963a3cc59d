from juliecraft.models.cart import UserCart

from tests.helpers import ApiTestCase


class CartTestCase(ApiTestCase):

    # ---------- Save & load ----------

    def test_last_write_wins(self):
        first = [{"id": "p1", "quantity": 1}, {"id": "p2", "quantity": 4}]
        second = [{"id": "p3", "quantity": 2}]

        self.assertEqual(self.client.post("/api/cart/save", json={"user_id": "u1", "cart_data": first}).status_code, 200)
        self.assertEqual(self.client.post("/api/cart/save", json={"user_id": "u1", "cart_data": second}).status_code, 200)

        resp = self.client.get("/api/cart/load", params={"user_id": "u1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["cart_data"], second)
        self.assertIsNotNone(resp.json()["updated_at"])

        with self.SessionLocal() as db:
            self.assertEqual(db.query(UserCart).count(), 1)

    def test_user_and_session_keys_are_disjoint(self):
        cart = [{"id": "p1", "quantity": 1}]
        resp = self.client.post("/api/cart/save", json={"user_id": "u1", "session_id": "s1", "cart_data": cart})
        self.assertEqual(resp.status_code, 200)

        by_session = self.client.get("/api/cart/load", params={"session_id": "s1"}).json()
        self.assertIsNone(by_session["cart_data"])

        by_user = self.client.get("/api/cart/load", params={"user_id": "u1"}).json()
        self.assertEqual(by_user["cart_data"], cart)

    def test_guest_cart_by_session(self):
        cart = {"items": [{"id": "p9", "quantity": 3}], "coupon": None}
        self.client.post("/api/cart/save", json={"session_id": "anon-123", "cart_data": cart})
        self.assertEqual(self.client.get("/api/cart/load", params={"session_id": "anon-123"}).json()["cart_data"], cart)

    def test_empty_cart_can_be_saved(self):
        resp = self.client.post("/api/cart/save", json={"user_id": "u1", "cart_data": []})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/cart/load", params={"user_id": "u1"}).json()["cart_data"], [])

    def test_load_unknown_key_returns_nulls(self):
        resp = self.client.get("/api/cart/load", params={"user_id": "nobody"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"cart_data": None, "updated_at": None})

    def test_bad_input(self):
        resp = self.client.get("/api/cart/load")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "User ID or Session ID required"})

        resp = self.client.post("/api/cart/save", json={"user_id": "u1"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Cart data required"})

        resp = self.client.post("/api/cart/save", json={"cart_data": [{"id": "p1"}]})
        self.assertEqual(resp.status_code, 400)

    # ---------- Migrate guest cart on login ----------

    def test_migrate_merges_quantities(self):
        shopper = self.make_profile()
        self.client.post("/api/cart/save", json={
            "user_id": str(shopper.id),
            "cart_data": [{"id": "p1", "quantity": 1}, {"id": "p2", "quantity": 2}],
        })
        guest = [{"id": "p2", "quantity": 3}, {"id": "p3", "quantity": 1}]
        self.client.post("/api/cart/save", json={"session_id": "s1", "cart_data": guest})

        resp = self.client.post(
            "/api/cart/migrate",
            json={"session_id": "s1", "guest_cart_data": guest},
            headers=self.auth_headers(shopper),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Guest cart merged with user cart")
        self.assertEqual(resp.json()["cart_data"], [
            {"id": "p1", "quantity": 1},
            {"id": "p2", "quantity": 5},
            {"id": "p3", "quantity": 1},
        ])

        self.assertIsNone(self.client.get("/api/cart/load", params={"session_id": "s1"}).json()["cart_data"])
        stored = self.client.get("/api/cart/load", params={"user_id": str(shopper.id)}).json()["cart_data"]
        self.assertEqual(stored, resp.json()["cart_data"])

    def test_migrate_transfers_when_user_has_no_cart(self):
        shopper = self.make_profile()
        guest = [{"id": "p1", "quantity": 2}]
        self.client.post("/api/cart/save", json={"session_id": "s1", "cart_data": guest})

        resp = self.client.post(
            "/api/cart/migrate",
            json={"session_id": "s1", "guest_cart_data": guest},
            headers=self.auth_headers(shopper),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Guest cart transferred to user")

        self.assertIsNone(self.client.get("/api/cart/load", params={"session_id": "s1"}).json()["cart_data"])
        self.assertEqual(
            self.client.get("/api/cart/load", params={"user_id": str(shopper.id)}).json()["cart_data"],
            guest,
        )

    def test_migrate_requires_token(self):
        resp = self.client.post("/api/cart/migrate", json={"session_id": "s1", "guest_cart_data": [{"id": "p1"}]})
        self.assertEqual(resp.status_code, 401)

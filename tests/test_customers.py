from tests.helpers import ApiTestCase


class AdminCustomersTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.headers = self.auth_headers(self.admin)
        self.ana = self.make_profile(email="ana@example.com", first_name="Ana", last_name="Silva")
        self.rui = self.make_profile(email="rui@example.com", first_name="Rui", status="inactive")

        self.make_order("ORD-1", status="delivered", total="40.00", user_id=self.ana.id)
        self.make_order("ORD-2", status="pending", total="20.00", user_id=self.ana.id)
        self.make_order("ORD-3", status="cancelled", total="99.00", user_id=self.ana.id)
        self.make_order("ORD-4", status="shipped", total="75.00", user_id=self.rui.id)
        # Guest orders belong to nobody
        self.make_order("ORD-5", status="delivered", total="500.00")

    def test_list_excludes_admins_and_counts_orders(self):
        resp = self.client.get("/api/admin/customers/", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total"], 2)

        ana = next(c for c in body["customers"] if c["email"] == "ana@example.com")
        self.assertEqual(ana["full_name"], "Ana Silva")
        self.assertEqual(ana["total_orders"], 2)
        self.assertAlmostEqual(ana["total_spent"], 60.0)
        self.assertIsNotNone(ana["last_order_date"])

    def test_customer_without_orders_has_zero_totals(self):
        self.make_profile(email="new@example.com")
        body = self.client.get(
            "/api/admin/customers/", params={"search": "new@"}, headers=self.headers,
        ).json()
        self.assertEqual(body["total"], 1)
        self.assertEqual(body["customers"][0]["total_orders"], 0)
        self.assertEqual(body["customers"][0]["total_spent"], 0)
        self.assertIsNone(body["customers"][0]["last_order_date"])

    def test_sort_and_filter(self):
        body = self.client.get(
            "/api/admin/customers/", params={"sort_by": "total_spent", "sort_order": "desc"}, headers=self.headers,
        ).json()
        self.assertEqual([c["email"] for c in body["customers"]], ["rui@example.com", "ana@example.com"])

        body = self.client.get("/api/admin/customers/", params={"min_orders": 2}, headers=self.headers).json()
        self.assertEqual([c["email"] for c in body["customers"]], ["ana@example.com"])

        body = self.client.get("/api/admin/customers/", params={"status": "inactive"}, headers=self.headers).json()
        self.assertEqual([c["email"] for c in body["customers"]], ["rui@example.com"])

        body = self.client.get("/api/admin/customers/", params={"search": "silva"}, headers=self.headers).json()
        self.assertEqual(body["total"], 1)

    def test_invalid_sort_field(self):
        resp = self.client.get("/api/admin/customers/", params={"sort_by": "password_hash"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_stats(self):
        resp = self.client.get("/api/admin/customers/stats", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total_customers"], 2)
        self.assertEqual(body["active_customers"], 1)
        self.assertEqual(body["inactive_customers"], 1)
        self.assertAlmostEqual(body["total_revenue"], 135.0)
        self.assertAlmostEqual(body["average_order_value"], 45.0)

    def test_read_customer(self):
        resp = self.client.get(f"/api/admin/customers/{self.rui.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total_orders"], 1)
        self.assertAlmostEqual(resp.json()["total_spent"], 75.0)

    def test_admins_and_unknown_ids_are_not_customers(self):
        for customer_id in (self.admin.id, "7f1c1f0e-0a4e-4d7b-9a55-2f3c2f6b9c11"):
            resp = self.client.get(f"/api/admin/customers/{customer_id}", headers=self.headers)
            self.assertEqual(resp.status_code, 404)
            self.assertEqual(resp.json(), {"error": "Customer not found"})

    def test_customer_orders_include_cancelled(self):
        resp = self.client.get(f"/api/admin/customers/{self.ana.id}/orders", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["customer_name"], "Ana Silva")
        self.assertEqual(len(body["orders"]), 3)
        self.assertEqual(body["total_orders"], 2)

        resp = self.client.get(
            f"/api/admin/customers/{self.ana.id}/orders", params={"limit": 1}, headers=self.headers,
        )
        self.assertEqual(len(resp.json()["orders"]), 1)

    def test_requires_admin(self):
        self.assertEqual(self.client.get("/api/admin/customers/").status_code, 401)
        resp = self.client.get("/api/admin/customers/", headers=self.auth_headers(self.ana))
        self.assertEqual(resp.status_code, 403)

from juliecraft.models.catalog import Category
from juliecraft.models.inventory import Product

from tests.helpers import ApiTestCase


class CategoriesTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.headers = self.auth_headers(self.make_admin())
        self.ceramics = self.save(Category(name="Ceramics", slug="ceramics", sort_order=1))
        self.textiles = self.save(Category(name="Textiles", slug="textiles", sort_order=0))
        self.archive = self.save(Category(name="Archive", slug="archive", is_active=False))

    # ---------- Storefront ----------

    def test_public_list_shows_active_in_display_order(self):
        resp = self.client.get("/api/categories/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total"], 2)
        self.assertEqual([c["slug"] for c in body["categories"]], ["textiles", "ceramics"])

    def test_public_read_by_slug_or_id(self):
        by_slug = self.client.get("/api/categories/ceramics")
        self.assertEqual(by_slug.status_code, 200)
        self.assertEqual(by_slug.json()["category"]["name"], "Ceramics")

        by_id = self.client.get(f"/api/categories/{self.ceramics.id}")
        self.assertEqual(by_id.json()["category"]["slug"], "ceramics")

    def test_inactive_and_unknown_categories_are_hidden(self):
        self.assertEqual(self.client.get("/api/categories/archive").status_code, 404)
        resp = self.client.get("/api/categories/nothing-here")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Category not found"})

    def test_catalogue_filters_by_category(self):
        self.make_product("MUG-1", category_id=self.ceramics.id)
        self.make_product("SCARF-1", category_id=self.textiles.id)

        resp = self.client.get("/api/products/", params={"category_id": str(self.ceramics.id)})
        self.assertEqual(resp.json()["total"], 1)
        self.assertEqual(resp.json()["products"][0]["sku"], "MUG-1")

    # ---------- Management ----------

    def test_admin_list_includes_inactive(self):
        resp = self.client.get("/api/admin/categories/", headers=self.headers)
        self.assertEqual(resp.json()["total"], 3)

    def test_admin_routes_require_admin(self):
        self.assertEqual(self.client.get("/api/admin/categories/").status_code, 401)
        shopper = self.auth_headers(self.make_profile())
        resp = self.client.post("/api/admin/categories/", json={"name": "Jewellery"}, headers=shopper)
        self.assertEqual(resp.status_code, 403)

    def test_create_derives_slug(self):
        resp = self.client.post(
            "/api/admin/categories/", json={"name": "Hand-made  Jewellery!", "tags": ["gifts"]}, headers=self.headers,
        )
        self.assertEqual(resp.status_code, 201)
        category = resp.json()["category"]
        self.assertEqual(category["slug"], "hand-made-jewellery")
        self.assertEqual(category["tags"], ["gifts"])

    def test_duplicate_name_or_slug_conflicts(self):
        resp = self.client.post("/api/admin/categories/", json={"name": "Ceramics"}, headers=self.headers)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"error": "A category with this name or slug already exists"})

        resp = self.client.patch(
            f"/api/admin/categories/{self.textiles.id}", json={"slug": "ceramics"}, headers=self.headers,
        )
        self.assertEqual(resp.status_code, 409)

    def test_invalid_slug_is_rejected(self):
        resp = self.client.post(
            "/api/admin/categories/", json={"name": "Bags", "slug": "Bags & More"}, headers=self.headers,
        )
        self.assertEqual(resp.status_code, 400)

    def test_update(self):
        resp = self.client.patch(
            f"/api/admin/categories/{self.archive.id}",
            json={"is_active": True, "description": "Past collections"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["category"]["is_active"])
        self.assertEqual(self.client.get("/api/categories/archive").status_code, 200)

    def test_delete_keeps_products_uncategorised(self):
        mug = self.make_product("MUG-1", category_id=self.ceramics.id)

        resp = self.client.delete(f"/api/admin/categories/{self.ceramics.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "message": "Category deleted successfully"})

        self.assertIsNone(self.fetch(Category, self.ceramics.id))
        self.assertIsNone(self.fetch(Product, mug.id).category_id)

        resp = self.client.delete(f"/api/admin/categories/{self.ceramics.id}", headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_stats(self):
        self.make_product("MUG-1", stock=4, price="12.50", category_id=self.ceramics.id)
        self.make_product("BOWL-1", stock=20, price="5.00", category_id=self.ceramics.id, is_active=False)
        self.make_product("LOOSE-1")

        resp = self.client.get("/api/admin/categories/stats", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()

        ceramics = next(c for c in body["categories"] if c["name"] == "Ceramics")
        self.assertEqual(ceramics["total_products"], 2)
        self.assertEqual(ceramics["active_products"], 1)
        self.assertEqual(ceramics["inactive_products"], 1)
        self.assertEqual(ceramics["low_stock_products"], 1)
        self.assertAlmostEqual(ceramics["total_inventory_value"], 150.0)

        summary = body["summary"]
        self.assertEqual(summary["total_categories"], 3)
        self.assertEqual(summary["active_categories"], 2)
        self.assertEqual(summary["total_products"], 2)

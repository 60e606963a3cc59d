from juliecraft.models.content import FooterContent

from tests.helpers import ApiTestCase


class SiteContentTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.admin_headers = self.auth_headers(self.make_admin())

    # ---------- Homepage sections ----------

    def test_section_lifecycle(self):
        resp = self.client.post("/api/site-content/homepage-sections", json={
            "section_type": "hero",
            "title": "Handmade with love",
            "content": {"subtitle": "Knitwear and ceramics"},
            "sort_order": 1,
        }, headers=self.admin_headers)
        self.assertEqual(resp.status_code, 201)
        section_id = resp.json()["section"]["id"]

        self.client.post("/api/site-content/homepage-sections", json={
            "section_type": "featured", "title": "Featured", "sort_order": 0,
        }, headers=self.admin_headers)

        sections = self.client.get("/api/site-content/homepage-sections").json()["sections"]
        self.assertEqual([s["section_type"] for s in sections], ["featured", "hero"])

        resp = self.client.patch(
            f"/api/site-content/homepage-sections/{section_id}",
            json={"title": "Made by hand", "is_active": False},
            headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["section"]["title"], "Made by hand")
        self.assertFalse(resp.json()["section"]["is_active"])

        resp = self.client.delete(f"/api/site-content/homepage-sections/{section_id}", headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(self.client.get("/api/site-content/homepage-sections").json()["sections"]), 1)

    def test_unknown_section_is_404(self):
        resp = self.client.delete(
            "/api/site-content/homepage-sections/7f1c1f0e-0a4e-4d7b-9a55-2f3c2f6b9c11", headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Section not found"})

    def test_editing_requires_admin(self):
        customer = self.make_profile()
        body = {"section_type": "hero", "title": "Nope"}
        self.assertEqual(self.client.post("/api/site-content/homepage-sections", json=body).status_code, 401)
        self.assertEqual(
            self.client.post(
                "/api/site-content/homepage-sections", json=body, headers=self.auth_headers(customer),
            ).status_code,
            403,
        )

    # ---------- Footer ----------

    def test_footer_replace_and_read(self):
        self.save(FooterContent(section_key="old", title="Old block"))

        resp = self.client.post("/api/site-content/footer", json={"sections": [
            {"section_key": "contact", "title": "Contact", "content": {"email": "hi@juliecraft.pt"}, "sort_order": 2},
            {"section_key": "about", "title": "About", "sort_order": 1},
            {"section_key": "hidden", "is_active": False},
        ]}, headers=self.admin_headers)
        self.assertEqual(resp.status_code, 200)

        footer = self.client.get("/api/site-content/footer").json()["footer"]
        self.assertEqual([b["section_key"] for b in footer], ["about", "contact"])
        self.assertEqual(footer[1]["content"], {"email": "hi@juliecraft.pt"})

        with self.SessionLocal() as db:
            self.assertEqual(db.query(FooterContent).count(), 3)

    def test_footer_requires_sections(self):
        resp = self.client.post("/api/site-content/footer", json={}, headers=self.admin_headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Sections array is required"})

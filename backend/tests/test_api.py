import unittest


CATALOG = [
    {"id": f"{zone}-{n}", "zone": zone, "grade": grade, "number": n}
    for zone, grade, count in (("A", 3, 31), ("B", 2, 39), ("C", 2, 26), ("D", 2, 32))
    for n in range(1, count + 1)
]


class TestStudySeatsAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        from fastapi.testclient import TestClient

        from backend.app.catalog import init_catalog
        from backend.app.main import app

        init_catalog()
        cls.client = TestClient(app)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"ok": True})

    def test_layouts(self):
        layouts = self.client.get("/layouts").json()
        self.assertEqual([l["zone"] for l in layouts], ["A", "B", "C", "D"])
        grade2 = self.client.get("/layouts", params={"grade": 2}).json()
        self.assertEqual([l["zone"] for l in grade2], ["B", "C", "D"])

        c = self.client.get("/layouts/C").json()
        self.assertEqual(c["columns"], 7)
        self.assertEqual(c["slots"][-7:], [None, 22, 23, 24, 25, 26, None])

        self.assertEqual(self.client.get("/layouts/Z").status_code, 404)

    def test_legend(self):
        legend = self.client.get("/legend").json()
        self.assertEqual(len(legend), 4)
        self.assertIn({"status": "empty", "color": "none"}, legend)

    def test_zone_slots_default_catalog(self):
        r = self.client.get("/zones/B/slots", params={"grade": 2, "date": "2024-05-01"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(len(body["slots"]), 40)
        self.assertEqual(body["slots"][-1], {"kind": "gap"})
        self.assertTrue(all(s["status"] == "empty" for s in body["slots"][:-1]))

        hidden = self.client.get("/zones/B/slots", params={"grade": 3, "date": "2024-05-01"}).json()
        self.assertEqual(hidden["slots"], [])

    def test_render_posted_snapshot(self):
        payload = {
            "grade": 2,
            "date": "2024-05-01",
            "mode": "select",
            "selected_seat_id": "C-1",
            "seats": CATALOG,
            "reservations": [
                {"seat_id": "C-2", "date": "2024-05-01", "status": "checked-in"},
                {"seat_id": "C-3", "date": "2024-05-01", "status": "퇴실완료"},
            ],
        }
        r = self.client.post("/zones/C/render", json=payload)
        self.assertEqual(r.status_code, 200)
        slots = r.json()["slots"]
        self.assertEqual(slots[0]["color"], "selected")
        self.assertTrue(slots[0]["selected"])
        self.assertFalse(slots[1]["selectable"])
        self.assertEqual(slots[1]["color"], "blocked")
        self.assertTrue(slots[2]["selectable"])

    def test_render_grade(self):
        r = self.client.post("/render", json={"grade": 3, "date": "2024-05-01"})
        self.assertEqual(r.status_code, 200)
        zones = r.json()
        self.assertEqual([z["zone"] for z in zones], ["A"])
        self.assertEqual(sum(1 for s in zones[0]["slots"] if s["kind"] == "seat"), 31)

    def test_inconsistent_catalog_rejected(self):
        payload = {"grade": 2, "date": "2024-05-01", "seats": CATALOG[:-1]}
        r = self.client.post("/zones/B/render", json=payload)
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["detail"]["zone"], "D")

    def test_unknown_zone_and_bad_status(self):
        r = self.client.post("/zones/Z/render", json={"grade": 2, "date": "2024-05-01"})
        self.assertEqual(r.status_code, 404)
        r = self.client.post(
            "/render",
            json={"grade": 2, "date": "2024-05-01", "reservations": [{"seat_id": "B-1", "date": "2024-05-01", "status": "lost"}]},
        )
        self.assertEqual(r.status_code, 422)

    def test_seat_state(self):
        r = self.client.get("/seats/A-1/state", params={"date": "2024-05-01", "mode": "select"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["color"], "available")
        self.assertTrue(r.json()["selectable"])
        self.assertEqual(self.client.get("/seats/A-99/state", params={"date": "2024-05-01"}).status_code, 404)

    def test_summary(self):
        r = self.client.post(
            "/summary",
            json={
                "date": "2024-05-01",
                "zone": "B",
                "reservations": [{"seat_id": "B-1", "date": "2024-05-01", "status": "no-show"}],
            },
        )
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["seats_total"], 39)
        self.assertEqual(body["counts"]["no-show"], 1)
        self.assertEqual(body["counts"]["empty"], 38)

        self.assertEqual(self.client.get("/summary", params={"date": "2024-05-01"}).json()["seats_total"], 128)


if __name__ == "__main__":
    unittest.main()

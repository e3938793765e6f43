import datetime as dt
import json
import pathlib
import tempfile
import unittest

from lotto_archive import create_app
from tests.payloads import ScriptedFetcher, glo_envelope, glo_result

MARCH_1 = dt.date(2024, 3, 1)
MARCH_16 = dt.date(2024, 3, 16)


class RoutesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = pathlib.Path(self._tmp.name)
        self.fetcher = ScriptedFetcher(
            {
                MARCH_1: glo_result("2024-03-01"),
                MARCH_16: glo_result(
                    "2024-03-16",
                    data={"first": {"price": "6000000.00", "number": [{"round": 1, "value": "777120"}]}},
                ),
            }
        )
        self.app = create_app(
            {
                "TESTING": True,
                "DATABASE_URL": f"sqlite:///{self.tmp_path / 'lottery.db'}",
                "REPORT_PATH": str(self.tmp_path / "reports"),
                "MAX_BATCH_SIZE": 5,
            },
            fetcher=self.fetcher,
        )
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        self.app.extensions["engine"].dispose()
        self._tmp.cleanup()

    def _ingest(self, *dates):
        return self.client.post("/ingest/batch", json={"dates": [list(d) for d in dates]})

    def _seed(self) -> None:
        resp = self._ingest(("01", "03", "2024"), ("16", "03", "2024"))
        self.assertEqual(resp.status_code, 200)


class HealthTests(RoutesTestCase):
    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"], {"status": "ok", "stored_draws": 0})

    def test_unknown_route_uses_error_envelope(self):
        resp = self.client.get("/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"]["code"], "not_found")


class IngestRoutesTests(RoutesTestCase):
    def test_batch_returns_one_outcome_per_date(self):
        resp = self._ingest(("01", "03", "2024"), ("01", "03", "2567"), ("31", "02", "2024"))

        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()["data"]
        self.assertEqual(
            [(o["date"], o["outcome"]) for o in data],
            [
                ("2024-03-01", "fetched_and_stored"),
                ("2024-03-01", "already_present"),
                ("31/02/2024", "parse_failed"),
            ],
        )
        self.assertEqual(self.fetcher.calls, [MARCH_1])

    def test_batch_with_unparseable_digits_still_answers(self):
        resp = self._ingest(("²", "03", "2024"), ("01", "03", "2024"))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            [o["outcome"] for o in resp.get_json()["data"]],
            ["parse_failed", "fetched_and_stored"],
        )

    def test_batch_accepts_day_month_year_objects(self):
        resp = self.client.post("/ingest/batch", json={"dates": [{"day": 16, "month": 3, "year": 2567}]})
        self.assertEqual(resp.get_json()["data"][0]["outcome"], "fetched_and_stored")

    def test_empty_batch_is_rejected(self):
        resp = self.client.post("/ingest/batch", json={"dates": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"]["code"], "validation_error")

    def test_oversized_batch_is_rejected(self):
        resp = self.client.post("/ingest/batch", json={"dates": [["01", "01", "2024"]] * 6})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.fetcher.calls, [])

    def test_year(self):
        resp = self.client.post("/ingest/year", json={"year": 2024})
        data = resp.get_json()["data"]
        self.assertEqual(len(data), 24)
        self.assertEqual(sum(1 for o in data if o["outcome"] == "fetched_and_stored"), 2)

    def test_year_out_of_range(self):
        resp = self.client.post("/ingest/year", json={"year": 1066})
        self.assertEqual(resp.status_code, 400)

    def test_raw_insert_then_replace(self):
        raw = json.dumps(glo_envelope(glo_result("2024-04-01")))

        first = self.client.post("/ingest/raw", json={"raw_json": raw})
        second = self.client.post("/ingest/raw", json=glo_result("2024-04-01", period=[3]))

        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.get_json()["data"]["status"], "inserted")
        self.assertEqual(second.get_json()["data"]["status"], "replaced")
        self.assertEqual(second.get_json()["data"]["draw_date"], "2024-04-01")

    def test_raw_insert_rejects_unknown_category(self):
        payload = glo_result("2024-04-01")
        payload["data"]["sixth"] = {}

        resp = self.client.post("/ingest/raw", json={"raw_json": json.dumps(payload)})

        self.assertEqual(resp.status_code, 422)
        error = resp.get_json()["error"]
        self.assertEqual(error["code"], "parse_error")
        self.assertEqual(error["details"]["field"], "data.sixth")
        self.assertEqual(self.client.get("/draws/2024-04-01").status_code, 404)


class DrawRoutesTests(RoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._seed()

    def test_get_draw_with_prizes(self):
        resp = self.client.get("/draws/2024-03-01")
        self.assertEqual(resp.status_code, 200)
        draw = resp.get_json()["data"]
        self.assertEqual(draw["draw_date"], "2024-03-01")
        self.assertEqual(len(draw["prizes"]), 6)

    def test_missing_draw(self):
        resp = self.client.get("/draws/2024-05-01")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"]["code"], "not_found")

    def test_bad_date_text(self):
        resp = self.client.get("/draws/2024-02-31")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"]["code"], "invalid_date")

    def test_latest(self):
        resp = self.client.get("/draws/latest?limit=1")
        self.assertEqual([d["draw_date"] for d in resp.get_json()["data"]], ["2024-03-16"])

    def test_range_year_and_month(self):
        for url in ["/draws?start=2024-03-01&end=2024-03-31", "/draws/year/2567", "/draws/year/2024/month/3"]:
            with self.subTest(url=url):
                data = self.client.get(url).get_json()["data"]
                self.assertEqual([d["draw_date"] for d in data], ["2024-03-16", "2024-03-01"])

    def test_range_must_be_ordered(self):
        resp = self.client.get("/draws?start=2024-03-31&end=2024-03-01")
        self.assertEqual(resp.status_code, 400)

    def test_after_and_before(self):
        after = self.client.get("/draws/after/2024-03-02").get_json()["data"]
        before = self.client.get("/draws/before/2024-03-02").get_json()["data"]
        self.assertEqual([d["draw_date"] for d in after], ["2024-03-16"])
        self.assertEqual([d["draw_date"] for d in before], ["2024-03-01"])

    def test_prizes_by_category(self):
        data = self.client.get("/prizes/first").get_json()["data"]
        self.assertEqual([p["number_value"] for p in data], ["777120", "123456"])

    def test_unknown_category(self):
        resp = self.client.get("/prizes/sixth")
        self.assertEqual(resp.status_code, 400)

    def test_search(self):
        data = self.client.get("/search?number=12").get_json()["data"]
        self.assertEqual(
            {(hit["draw"]["draw_date"], hit["prize"]["number_value"]) for hit in data},
            {
                ("2024-03-16", "777120"),
                ("2024-03-01", "123456"),
                ("2024-03-01", "123457"),
                ("2024-03-01", "123455"),
                ("2024-03-01", "512"),
                ("2024-03-01", "12"),
            },
        )

    def test_search_requires_digits(self):
        for term in ["1%25", "%E0%B9%91%E0%B9%92"]:  # "1%" and Thai "๑๒"
            with self.subTest(term=term):
                resp = self.client.get(f"/search?number={term}")
                self.assertEqual(resp.status_code, 400)

    def test_health_counts_draws(self):
        self.assertEqual(self.client.get("/health").get_json()["data"]["stored_draws"], 2)


class ReportRoutesTests(RoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._seed()

    def test_render_report(self):
        resp = self.client.get("/reports/2024-03-01")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.mimetype, "text/html")
        page = resp.get_data(as_text=True)
        self.assertIn("รางวัลที่ 1", page)
        self.assertIn("123456", page)
        self.assertIn("6,000,000 บาท", page)
        # first prize is shown before the adjacent numbers, last-two digits at the end
        self.assertLess(page.index('id="prize-first"'), page.index('id="prize-near1"'))
        self.assertLess(page.index('id="prize-last3f"'), page.index('id="prize-last2"'))

    def test_report_for_missing_draw(self):
        resp = self.client.get("/reports/2024-05-01")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"]["code"], "not_found")

    def test_save_report(self):
        resp = self.client.post("/reports/2024-03-16")
        self.assertEqual(resp.status_code, 201)
        path = pathlib.Path(resp.get_json()["data"]["path"])
        self.assertEqual(path.name, "lottery_report_2024-03-16.html")
        self.assertIn("777120", path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()

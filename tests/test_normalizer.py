import datetime as dt
import json
import unittest

from lotto_archive.domain.draw import PrizeCategory
from lotto_archive.errors import ParseError
from lotto_archive.services.normalizer import PayloadNormalizer
from tests.payloads import glo_envelope, glo_result

INGESTED_AT = dt.datetime(2024, 3, 1, 16, 0, 0)


class NormalizeResultTests(unittest.TestCase):
    def setUp(self) -> None:
        self.normalizer = PayloadNormalizer(clock=lambda: INGESTED_AT)

    def test_normalizes_a_fetched_result(self):
        result = self.normalizer.normalize_result(glo_result(period=[1, 2]))

        self.assertEqual(result.draw_date, dt.date(2024, 3, 1))
        self.assertEqual(result.period_label, "1,2")
        self.assertEqual(result.ingested_at, INGESTED_AT)
        self.assertEqual(
            [p.category for p in result.prizes],
            [PrizeCategory.FIRST, PrizeCategory.LAST2, PrizeCategory.LAST3F, PrizeCategory.NEAR1],
        )
        near1 = result.prizes[-1]
        self.assertEqual([n.round for n in near1.numbers], [1, 2])
        self.assertEqual(near1.numbers[0].value, "123455")
        self.assertEqual(result.number_count, 6)
        self.assertEqual(result.warnings(), [])

    def test_unknown_category_is_rejected(self):
        payload = glo_result()
        payload["data"]["sixth"] = {"price": "10.00", "number": [{"round": 1, "value": "1"}]}

        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_result(payload)
        self.assertEqual(ctx.exception.field, "data.sixth")

    def test_missing_fields(self):
        for key in ("date", "period", "data"):
            payload = glo_result()
            del payload[key]
            with self.subTest(missing=key):
                with self.assertRaises(ParseError) as ctx:
                    self.normalizer.normalize_result(payload)
                self.assertEqual(ctx.exception.field, key)

    def test_bad_number_value(self):
        payload = glo_result(data={"first": {"price": "6000000.00", "number": [{"round": 1, "value": "12a456"}]}})
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_result(payload)
        self.assertTrue(ctx.exception.field.startswith("data.first.number"))

    def test_non_ascii_digits_in_number_value(self):
        for value in ["๑๒๓๔๕๖", "123456\n"]:
            payload = glo_result(data={"first": {"price": "6000000.00", "number": [{"round": 1, "value": value}]}})
            with self.subTest(value=value):
                with self.assertRaises(ParseError) as ctx:
                    self.normalizer.normalize_result(payload)
                self.assertTrue(ctx.exception.field.startswith("data.first.number"))

    def test_bad_date(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_result(glo_result(date="2024-02-31"))
        self.assertEqual(ctx.exception.field, "date")

    def test_zero_prizes_is_a_warning_not_an_error(self):
        result = self.normalizer.normalize_result(glo_result(data={}))
        self.assertEqual(result.prizes, ())
        self.assertEqual(result.warnings(), ["no prize numbers in payload"])

    def test_numeric_amounts_are_kept_as_text(self):
        result = self.normalizer.normalize_result(
            glo_result(data={"last2": {"price": 2000, "number": [{"round": 1, "value": "07"}]}})
        )
        self.assertEqual(result.prizes[0].amount, "2000")
        self.assertEqual(result.prizes[0].numbers[0].value, "07")

    def test_non_object(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_result(["2024-03-01"])
        self.assertEqual(ctx.exception.field, "result")


class NormalizeRawJsonTests(unittest.TestCase):
    def setUp(self) -> None:
        self.normalizer = PayloadNormalizer(clock=lambda: INGESTED_AT)

    def test_envelope_and_bare_result_agree(self):
        from_envelope = self.normalizer.normalize_raw_json(json.dumps(glo_envelope(glo_result())))
        from_result = self.normalizer.normalize_raw_json(json.dumps(glo_result()))
        from_mapping = self.normalizer.normalize_raw_json(glo_result())
        self.assertEqual(from_envelope, from_result)
        self.assertEqual(from_result, from_mapping)

    def test_invalid_json(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_raw_json("{not json")
        self.assertEqual(ctx.exception.field, "raw_json")

    def test_json_must_be_an_object(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_raw_json("[1, 2, 3]")
        self.assertEqual(ctx.exception.field, "raw_json")

    def test_envelope_without_result(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_raw_json(json.dumps(glo_envelope(None)))
        self.assertEqual(ctx.exception.field, "response.result")

    def test_failed_envelope(self):
        with self.assertRaises(ParseError) as ctx:
            self.normalizer.normalize_raw_json(glo_envelope(glo_result(), status=False, status_code=500))
        self.assertEqual(ctx.exception.field, "status")


if __name__ == "__main__":
    unittest.main()

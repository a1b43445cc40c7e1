"""
Tests for batch assessment of JSON files and ZIP archives, error
classification and DataFrame export.
"""

import io
import json
import os
import tempfile
import unittest
import zipfile
from datetime import date

from assessment_batch_processor import USAGE, AssessmentBatchProcessor, BatchResult, parse_args


GOOD_RECORDS = {
    "user_id": "user-1",
    "incomes": [{"source": "Salary", "amount": 8000, "frequency": "monthly"}],
    "expenses": [{"category": "housing", "name": "Rent", "amount": 3200, "frequency": "monthly"}],
    "loans": [{"lender": "Bank", "type": "auto", "principal": 30000,
               "remaining_balance": 20000, "monthly_payment": 1266.71, "interest_rate": 5}],
}

POOR_RECORDS = {
    "incomes": [{"source": "Salary", "amount": 2000, "frequency": "monthly"}],
    "expenses": [{"category": "housing", "name": "Rent", "amount": 2500, "frequency": "monthly"}],
}


def to_bytes(data):
    return json.dumps(data).encode("utf-8")


class TestBatchProcessor(unittest.TestCase):

    def setUp(self):
        self.processor = AssessmentBatchProcessor(as_of=date(2025, 6, 1))

    def test_successful_batch(self):
        batch = self.processor.process_batch([
            ("good.json", to_bytes(GOOD_RECORDS)),
            ("poor.json", to_bytes(POOR_RECORDS)),
        ])

        self.assertEqual(batch.stats.total_files, 2)
        self.assertEqual(batch.stats.successful, 2)
        self.assertEqual(batch.stats.failed, 0)
        self.assertEqual(batch.stats.excellent, 1)
        self.assertEqual(batch.stats.poor, 1)
        self.assertAlmostEqual(batch.stats.max_affordable, 12366.515)
        self.assertEqual(batch.stats.min_affordable, 0.0)
        self.assertAlmostEqual(batch.stats.average_affordable, 12366.515 / 2)
        self.assertEqual(batch.stats.success_rate, 100.0)

        self.assertEqual(batch.results[0].user_ref, "user-1")
        self.assertEqual(batch.results[1].user_ref, "poor")

    def test_error_classification(self):
        missing_amount = {"incomes": [{"source": "Salary", "frequency": "monthly"}]}
        bad_frequency = {"incomes": [{"source": "Salary", "amount": 100, "frequency": "sometimes"}]}
        negative_income = {"incomes": [{"source": "Salary", "amount": -100, "frequency": "monthly"}]}

        batch = self.processor.process_batch([
            ("broken.json", b"{not json"),
            ("list.json", b"[1, 2, 3]"),
            ("missing.json", to_bytes(missing_amount)),
            ("frequency.json", to_bytes(bad_frequency)),
            ("negative.json", to_bytes(negative_income)),
            ("unrelated.json", to_bytes({"hello": "world"})),
        ])

        self.assertEqual(batch.stats.successful, 0)
        self.assertEqual(batch.stats.failed, 6)
        self.assertEqual(batch.stats.min_affordable, 0.0)

        error_types = {e.file_name: e.error_type for e in batch.errors}
        self.assertEqual(error_types["broken.json"], "JSON_PARSE_ERROR")
        self.assertEqual(error_types["list.json"], "INVALID_JSON_STRUCTURE")
        self.assertEqual(error_types["missing.json"], "MISSING_DATA")
        self.assertEqual(error_types["frequency.json"], "UNRECOGNIZED_FREQUENCY")
        self.assertEqual(error_types["negative.json"], "DATA_VALIDATION_ERROR")
        self.assertEqual(error_types["unrelated.json"], "INVALID_JSON_STRUCTURE")
        self.assertEqual(batch.error_summary["INVALID_JSON_STRUCTURE"], 2)

    def test_file_without_incomes_is_assessed_as_poor(self):
        batch = self.processor.process_batch([
            ("expenses_only.json", to_bytes({"expenses": GOOD_RECORDS["expenses"]})),
        ])

        self.assertEqual(batch.stats.successful, 1)
        self.assertEqual(batch.errors, [])
        self.assertEqual(batch.stats.poor, 1)
        self.assertEqual(batch.stats.max_affordable, 0.0)

        summary = batch.results[0].assessment["finance_summary"]
        self.assertEqual(summary["financial_health"], "Poor")
        self.assertEqual(summary["monthly_income"], 0)

    def test_records_wrapper_and_fallback_encoding(self):
        wrapped = {"user_id": "user-9", "records": POOR_RECORDS}
        content = json.dumps(wrapped).encode("utf-8")
        latin = json.dumps(GOOD_RECORDS, ensure_ascii=False).replace("Rent", "Loyer été").encode("latin-1")

        batch = self.processor.process_batch([("wrapped.json", content), ("latin.json", latin)])
        self.assertEqual(batch.stats.successful, 2)
        self.assertEqual(batch.results[0].user_ref, "user-9")

    def test_progress_callback(self):
        calls = []
        self.processor.process_batch(
            [("a.json", to_bytes(GOOD_RECORDS)), ("b.json", to_bytes(POOR_RECORDS))],
            progress_callback=lambda current, total, message: calls.append((current, total)),
        )
        self.assertEqual(calls, [(1, 2), (2, 2)])

    def test_load_files_from_paths(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = io.BytesIO()
            with zipfile.ZipFile(archive, "w") as zf:
                zf.writestr("users/one.json", to_bytes(GOOD_RECORDS))
                zf.writestr("users/two.json", to_bytes(POOR_RECORDS))
                zf.writestr("users/readme.txt", b"not a record")
            with open(os.path.join(temp_dir, "batch.zip"), "wb") as f:
                f.write(archive.getvalue())
            with open(os.path.join(temp_dir, "three.json"), "wb") as f:
                f.write(to_bytes(GOOD_RECORDS))
            with open(os.path.join(temp_dir, "notes.csv"), "wb") as f:
                f.write(b"a,b")

            files = self.processor.load_files_from_paths([temp_dir])

        self.assertEqual(sorted(name for name, _ in files), ["one.json", "three.json", "two.json"])

        batch = self.processor.process_batch(files)
        self.assertEqual(batch.stats.successful, 3)

    def test_dataframes(self):
        batch = self.processor.process_batch([
            ("good.json", to_bytes(GOOD_RECORDS)),
            ("broken.json", b"{oops"),
        ])

        results_df = self.processor.results_to_dataframe(batch.results)
        self.assertEqual(len(results_df), 1)
        self.assertEqual(results_df.iloc[0]["Financial Health"], "Excellent")
        self.assertAlmostEqual(results_df.iloc[0]["Max Affordable Amount"], 12366.515, places=1)
        self.assertIn("Health Risk Score", results_df.columns)

        errors_df = self.processor.errors_to_dataframe(batch.errors)
        self.assertEqual(list(errors_df.columns), ["File Name", "Error Type", "Error Message", "Timestamp"])
        self.assertEqual(errors_df.iloc[0]["Error Type"], "JSON_PARSE_ERROR")

    def test_merge_results(self):
        first = self.processor.process_batch([("good.json", to_bytes(GOOD_RECORDS))])
        second = self.processor.process_batch([("broken.json", b"{oops"), ("poor.json", to_bytes(POOR_RECORDS))])

        merged = BatchResult.merge_results(first, second)
        self.assertEqual(merged.stats.total_files, 3)
        self.assertEqual(merged.stats.successful, 2)
        self.assertEqual(merged.stats.failed, 1)
        self.assertEqual(merged.stats.min_affordable, 0.0)
        self.assertAlmostEqual(merged.stats.max_affordable, 12366.515)
        self.assertEqual(len(merged.results), 2)
        self.assertEqual(merged.error_summary, {"JSON_PARSE_ERROR": 1})


class TestParseArgs(unittest.TestCase):

    def test_paths_and_output(self):
        self.assertEqual(parse_args(["a.json", "--out", "r.csv", "b.zip"]), (["a.json", "b.zip"], "r.csv"))
        self.assertEqual(parse_args(["data"]), (["data"], "assessments.csv"))

    def test_out_without_value_exits_with_usage(self):
        with self.assertRaises(SystemExit) as ctx:
            parse_args(["a.json", "--out"])
        self.assertEqual(ctx.exception.code, USAGE)

    def test_no_paths_exits_with_usage(self):
        with self.assertRaises(SystemExit) as ctx:
            parse_args(["--out", "r.csv"])
        self.assertEqual(ctx.exception.code, USAGE)


if __name__ == "__main__":
    unittest.main()

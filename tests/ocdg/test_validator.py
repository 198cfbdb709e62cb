import os
import tempfile
import unittest

from test_setup import RESULTS_DIR

from ocdg.objects.ocel import validate_ocel, validate_ocel_verbose
from ocdg.objects.ocel.validator import validate_content


def minimal_log():
    return {
        "ocel:global-log": {"ocel:version": "1.0"},
        "ocel:events": {
            "e1": {"ocel:activity": "Create Order", "ocel:timestamp": "2023-01-01T09:00:00", "ocel:omap": ["o1"]},
        },
        "ocel:objects": {"o1": {"ocel:type": "Order"}},
    }


class TestValidator(unittest.TestCase):

    def test_complete_log_has_no_violations(self):
        path = os.path.join(RESULTS_DIR, "jsonocel/test_log.jsonocel")
        self.assertEqual(validate_ocel_verbose(path), [])
        self.assertTrue(validate_ocel(path))

    def test_missing_event_field_yields_one_violation(self):
        path = os.path.join(RESULTS_DIR, "jsonocel/test_log_missing_field.jsonocel")
        violations = validate_ocel_verbose(path)

        self.assertEqual(len(violations), 1)
        message, location = violations[0]
        self.assertEqual(location, "ocel:events/e2")
        self.assertIn("ocel:activity", message)
        self.assertFalse(validate_ocel(path))

    def test_undefined_object_is_reported(self):
        path = os.path.join(RESULTS_DIR, "jsonocel/test_log_dangling.jsonocel")
        violations = validate_ocel_verbose(path)

        self.assertEqual(violations, [("Object 'o9' is referenced but not defined", "ocel:events/e1/ocel:omap/1")])

    def test_invalid_timestamp_is_reported(self):
        log = minimal_log()
        log["ocel:events"]["e1"]["ocel:timestamp"] = "not a time"

        violations = validate_content(log)
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0][1], "ocel:events/e1/ocel:timestamp")

    def test_missing_section_is_reported_at_root(self):
        log = minimal_log()
        del log["ocel:objects"]

        violations = validate_content(log)
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0][1], "root")

    def test_wrong_types_are_reported(self):
        log = minimal_log()
        log["ocel:objects"]["o1"]["ocel:type"] = 3
        log["ocel:events"]["e1"]["ocel:omap"] = "o1"

        locations = [location for _, location in validate_content(log)]
        # ordered by location
        self.assertEqual(locations, ["ocel:events/e1/ocel:omap", "ocel:objects/o1/ocel:type"])

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "broken.jsonocel")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{")
            violations = validate_ocel_verbose(path)
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0][1], "root")

    def test_invalid_encoding_is_reported_at_root(self):
        violations = validate_ocel_verbose(os.path.join(RESULTS_DIR, "jsonocel/test_log_invalid_encoding.jsonocel"))
        self.assertEqual(len(violations), 1)
        message, location = violations[0]
        self.assertEqual(location, "root")
        self.assertIn("UTF-8", message)

    def test_missing_file_raises(self):
        with self.assertRaises(OSError):
            validate_ocel(os.path.join(RESULTS_DIR, "jsonocel/does_not_exist.jsonocel"))


if __name__ == '__main__':
    unittest.main()

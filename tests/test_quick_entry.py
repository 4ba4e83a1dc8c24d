import math
import unittest

from trainai.quick_entry import (
    QuickEntry,
    build_set_logs,
    is_quick_entry,
    parse_quick_entry,
)


class QuickEntryDetectionTests(unittest.TestCase):
    def test_accepts_semicolon_and_newline_separated_triplets(self):
        self.assertTrue(is_quick_entry("1,5,225;2,5,230"))
        self.assertTrue(is_quick_entry("1, 5, 225\n2, 5, 230"))
        self.assertTrue(is_quick_entry("  3,8,60  "))

    def test_rejects_extra_characters_or_short_entries(self):
        self.assertFalse(is_quick_entry("1,5"))
        self.assertFalse(is_quick_entry("1,5,225 lbs"))
        self.assertFalse(is_quick_entry("1,5,225;"))
        self.assertFalse(is_quick_entry(""))
        self.assertFalse(is_quick_entry(None))


class QuickEntryParsingTests(unittest.TestCase):
    def test_parses_two_entries(self):
        entries = parse_quick_entry("1,5,225;2,5,230")
        self.assertEqual(
            entries,
            [QuickEntry(1, 5, 225), QuickEntry(2, 5, 230)],
        )
        self.assertEqual(entries[0].set_number, 1)
        self.assertEqual(entries[1].weight, 230)

    def test_malformed_field_becomes_nan(self):
        entries = parse_quick_entry("1,x,225")
        self.assertEqual(len(entries), 1)
        self.assertTrue(math.isnan(entries[0].reps))
        self.assertEqual(entries[0].weight, 225)

    def test_missing_field_becomes_nan(self):
        entries = parse_quick_entry("4,10")
        self.assertTrue(math.isnan(entries[0].weight))


class BuildSetLogsTests(unittest.TestCase):
    def test_skips_entries_with_nan(self):
        entries = parse_quick_entry("1,5,225;2,x,230;3,5,235")
        logs = build_set_logs(entries, "Barbell Back Squat")
        self.assertEqual([log["set_number"] for log in logs], [1, 3])
        self.assertTrue(all(log["exercise_name"] == "Barbell Back Squat" for log in logs))
        self.assertTrue(all(log["completed"] for log in logs))

    def test_infinite_values_are_rejected(self):
        entries = parse_quick_entry("1,5,inf;2,1e400,230;3,5,235")
        self.assertTrue(math.isnan(entries[0].weight))
        self.assertTrue(math.isnan(entries[1].reps))

        logs = build_set_logs(entries, "Barbell Back Squat")
        self.assertEqual([log["set_number"] for log in logs], [3])

    def test_directly_built_infinite_entry_is_skipped(self):
        logs = build_set_logs(
            [QuickEntry(1, math.inf, 225), QuickEntry(2, 5, 230)],
            "Barbell Back Squat",
        )
        self.assertEqual([log["set_number"] for log in logs], [2])

    def test_requires_an_exercise(self):
        with self.assertRaises(ValueError):
            build_set_logs(parse_quick_entry("1,5,225"), "  ")


if __name__ == "__main__":
    unittest.main()

import unittest

from trainai.training_rules import (
    Split,
    canonical_split,
    enforce_main_lift,
    is_main_lift_for_split,
    pick_core_lift,
    pick_first_allowed_main,
)


class CanonicalSplitTests(unittest.TestCase):
    def test_case_insensitive_exact_match(self):
        self.assertIs(canonical_split("HIIT"), Split.HIIT)
        self.assertIs(canonical_split("Legs"), Split.LEGS)
        self.assertEqual(canonical_split("push"), "push")

    def test_unknown_values_return_none(self):
        self.assertIsNone(canonical_split("crossfit"))
        self.assertIsNone(canonical_split(""))
        self.assertIsNone(canonical_split(None))
        self.assertIsNone(canonical_split(3))


class MainLiftTests(unittest.TestCase):
    def test_match_ignores_case_and_whitespace(self):
        self.assertTrue(is_main_lift_for_split("barbell back squat", "legs"))
        self.assertTrue(is_main_lift_for_split("  Barbell Back Squat ", "LEGS"))

    def test_other_split_lifts_are_rejected(self):
        self.assertFalse(is_main_lift_for_split("Barbell Bench Press", "legs"))
        self.assertFalse(is_main_lift_for_split("Barbell Bench Press", "unknown"))

    def test_hiit_has_no_main_lifts(self):
        self.assertFalse(is_main_lift_for_split("Barbell Back Squat", Split.HIIT))
        self.assertIsNone(pick_first_allowed_main("hiit"))

    def test_first_allowed_main_ignores_equipment(self):
        self.assertEqual(pick_first_allowed_main("push"), "Barbell Bench Press")
        self.assertEqual(pick_first_allowed_main("push", ["Dumbbells"]), "Barbell Bench Press")
        self.assertEqual(pick_first_allowed_main("upper"), "Shoulder Press")
        self.assertIsNone(pick_first_allowed_main("core"))


class PickCoreLiftTests(unittest.TestCase):
    def test_legs_ladder(self):
        self.assertEqual(pick_core_lift("legs", ["Olympic Barbell"]), "Barbell Back Squat")
        self.assertEqual(pick_core_lift("legs", ["Kettlebell 16kg"]), "Kettlebell Goblet Squat")
        self.assertEqual(pick_core_lift("legs", ["Adjustable Dumbbells"]), "Dumbbell Goblet Squat")
        self.assertEqual(pick_core_lift("legs", []), "Bodyweight Walking Lunge")

    def test_back_maps_to_pull_ladder(self):
        self.assertEqual(pick_core_lift("back", ["Barbell", "Trap Bar"]), "Trap Bar Deadlift")
        self.assertEqual(pick_core_lift("back", ["BARBELL"]), "Barbell Deadlift")
        self.assertEqual(pick_core_lift("pull", None), "Kettlebell Deadlift")

    def test_chest_maps_to_push_ladder(self):
        self.assertEqual(pick_core_lift("chest", ["Dumbbells"]), "Dumbbell Bench Press")
        self.assertEqual(pick_core_lift("push", []), "Ring Push-Up")

    def test_unmapped_focus_returns_none(self):
        self.assertIsNone(pick_core_lift("core", ["Barbell"]))
        self.assertIsNone(pick_core_lift(None, ["Barbell"]))


class EnforceMainLiftTests(unittest.TestCase):
    def test_allowed_flagged_item_is_kept(self):
        shape = {"main": [
            {"name": "Barbell Back Squat", "is_main": True},
            {"name": "Leg Curl", "is_main": False},
        ]}
        result, substitution = enforce_main_lift(shape, "legs", ["Barbell"])
        self.assertIsNone(substitution)
        self.assertEqual(result["main"][0]["name"], "Barbell Back Squat")
        self.assertTrue(result["main"][0]["is_main"])

    def test_flag_moves_to_allowed_item(self):
        shape = {"main": [
            {"name": "Leg Curl", "is_main": True},
            {"name": "Belt Squat", "is_main": False},
        ]}
        result, substitution = enforce_main_lift(shape, "legs", [])
        self.assertIsNone(substitution)
        self.assertEqual([item["is_main"] for item in result["main"]], [False, True])
        self.assertEqual(result["main"][0]["name"], "Leg Curl")

    def test_substitutes_equipment_appropriate_lift(self):
        shape = {"main": [{"name": "Push-Up", "sets": 3, "reps": "12", "is_main": True}]}
        result, substitution = enforce_main_lift(shape, "push", ["Dumbbells"])
        primary = result["main"][0]
        self.assertEqual(
            substitution,
            {"from": "Push-Up", "to": "Dumbbell Bench Press", "outside_split_list": False},
        )
        self.assertEqual(primary["name"], "Dumbbell Bench Press")
        self.assertEqual(primary["substituted_from"], "Push-Up")
        self.assertEqual(primary["sets"], 3)
        self.assertEqual(primary["reps"], "12")

    def test_ladder_pick_off_the_split_list_is_flagged(self):
        shape = {"main": [{"name": "Leg Extension", "sets": 3, "reps": "12", "is_main": True}]}
        result, substitution = enforce_main_lift(shape, "legs", ["Dumbbells"])
        self.assertEqual(substitution["to"], "Dumbbell Goblet Squat")
        self.assertTrue(substitution["outside_split_list"])
        self.assertFalse(is_main_lift_for_split(result["main"][0]["name"], "legs"))

    def test_upper_falls_back_to_first_configured_lift(self):
        shape = {"main": [{"name": "Plank", "is_main": True}]}
        result, substitution = enforce_main_lift(shape, "upper", ["Barbell"])
        self.assertEqual(substitution["to"], "Shoulder Press")
        self.assertFalse(substitution["outside_split_list"])
        self.assertEqual(result["main"][0]["name"], "Shoulder Press")

    def test_hiit_and_unknown_split_are_untouched(self):
        shape = {"main": [{"name": "Burpee", "is_main": True}]}
        self.assertEqual(enforce_main_lift(shape, "hiit", []), (shape, None))
        self.assertEqual(enforce_main_lift(shape, None, []), (shape, None))
        self.assertEqual(shape["main"][0]["name"], "Burpee")


if __name__ == "__main__":
    unittest.main()

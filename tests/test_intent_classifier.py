import unittest

from trainai.intent_classifier import (
    IntentKind,
    Modality,
    classify,
    classify_with_model,
    extract_program_hints,
    ordinal_to_number,
    should_use_template,
)
from trainai.training_rules import Split


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt, system=None, max_tokens=None, temperature=None):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class ClassifyTests(unittest.TestCase):
    def test_gibberish_is_unknown_with_empty_slots(self):
        intent = classify("asdkjasd")
        self.assertIs(intent.kind, IntentKind.UNKNOWN)
        self.assertIsNone(intent.duration_minutes)
        self.assertIsNone(intent.modality)
        self.assertIsNone(intent.split)

    def test_make_workout_with_duration_and_split(self):
        intent = classify("Give me a 45 minute push workout")
        self.assertIs(intent.kind, IntentKind.MAKE_WORKOUT)
        self.assertEqual(intent.duration_minutes, 45)
        self.assertIs(intent.split, Split.PUSH)
        self.assertEqual(intent.focus, "push")

    def test_plural_workout_words_are_workout_requests(self):
        self.assertIs(classify("give me 2 workouts for this week").kind, IntentKind.MAKE_WORKOUT)
        intent = classify("any good wods for 30 minutes?")
        self.assertIs(intent.kind, IntentKind.MAKE_WORKOUT)
        self.assertEqual(intent.duration_minutes, 30)
        self.assertIs(classify("two sessions this week").kind, IntentKind.MAKE_WORKOUT)
        self.assertIs(classify("new programs to try").kind, IntentKind.MAKE_WORKOUT)

    def test_duration_is_clamped(self):
        self.assertEqual(classify("200 minutes session").duration_minutes, 120)
        self.assertEqual(classify("a 09 min session").duration_minutes, 10)

    def test_modality_precedence(self):
        self.assertIs(classify("kettlebell and barbell workout").modality, Modality.KETTLEBELL)
        self.assertIs(classify("dumbbell or barbell workout").modality, Modality.BARBELL)

    def test_later_categories_override_earlier_ones(self):
        self.assertIs(classify("swap the squats in my workout").kind, IntentKind.MODIFY_WORKOUT)
        self.assertIs(classify("explain the workout").kind, IntentKind.EXPLAIN_OR_COACH)
        self.assertIs(classify("show my workout history").kind, IntentKind.LOG_OR_HISTORY)

    def test_negation_is_a_modification(self):
        self.assertIs(classify("no burpees please").kind, IntentKind.MODIFY_WORKOUT)

    def test_explain_and_log_phrases(self):
        self.assertIs(classify("how to do a deadlift").kind, IntentKind.EXPLAIN_OR_COACH)
        self.assertIs(classify("what did i do last week").kind, IntentKind.LOG_OR_HISTORY)

    def test_slots_are_extracted_for_non_workout_intents(self):
        intent = classify("why is my 30 min kettlebell routine hard")
        self.assertIs(intent.kind, IntentKind.EXPLAIN_OR_COACH)
        self.assertEqual(intent.duration_minutes, 30)
        self.assertIs(intent.modality, Modality.KETTLEBELL)

    def test_persona_short_circuits(self):
        intent = classify("45 min workout like Chris Hemsworth")
        self.assertIs(intent.kind, IntentKind.CELEBRITY_INSPIRED)
        self.assertEqual(intent.referenced_name, "chris hemsworth")
        self.assertIsNone(intent.duration_minutes)
        self.assertFalse(intent.wants_workout)

    def test_to_dict_uses_plain_values(self):
        data = classify("30 min legs workout").to_dict()
        self.assertEqual(data["intent"], "make_workout")
        self.assertEqual(data["split"], "legs")
        self.assertEqual(data["duration_minutes"], 30)


class ProgramReferenceTests(unittest.TestCase):
    def test_ordinal_to_number(self):
        self.assertEqual(ordinal_to_number("the second one"), 2)
        self.assertEqual(ordinal_to_number("3rd please"), 3)
        self.assertEqual(ordinal_to_number("tenth"), 10)
        self.assertEqual(ordinal_to_number("number 7"), 7)
        self.assertIsNone(ordinal_to_number("hello there"))

    def test_extract_program_hints(self):
        hints = extract_program_hints("the second upper body nike workout")
        self.assertEqual(hints["index"], 2)
        self.assertEqual(hints["type_hint"], "upper body")
        self.assertIn("upper body", hints["keywords"])

    def test_should_use_template(self):
        self.assertTrue(should_use_template("nike workout 3"))
        self.assertTrue(should_use_template("Do NTC #2"))
        self.assertFalse(should_use_template("ntc style session"))
        self.assertFalse(should_use_template("push day please"))


class ClassifyWithModelTests(unittest.TestCase):
    def test_split_reply_is_canonicalized(self):
        client = FakeClient('```json {"intent": "split", "split": "Legs"} ```')
        self.assertEqual(classify_with_model(client, "leg day"), {"intent": "split", "split": "legs"})
        self.assertIn("leg day", client.prompts[0])

    def test_nike_reply_keeps_details(self):
        client = FakeClient('{"intent": "nike", "nike": {"index": 2, "type": "push"}}')
        result = classify_with_model(client, "the second push one")
        self.assertEqual(result["intent"], "nike")
        self.assertEqual(result["nike"]["index"], 2)

    def test_failures_fall_back_to_chat(self):
        self.assertEqual(classify_with_model(FakeClient("not json"), "x"), {"intent": "chat"})
        self.assertEqual(classify_with_model(FakeClient('{"intent": "dance"}'), "x"), {"intent": "chat"})
        self.assertEqual(
            classify_with_model(FakeClient(error=RuntimeError("boom")), "x"),
            {"intent": "chat"},
        )


if __name__ == "__main__":
    unittest.main()

"""
Intent classification for chat messages.

Fast regex heuristics run first; a single model call is available for
callers that need to resolve references such as "the second one".
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from trainai.prompt_builder import build_intent_prompt
from trainai.safe_json import try_parse
from trainai.training_rules import Split, canonical_split


class IntentKind(str, Enum):
    MAKE_WORKOUT = "make_workout"
    MODIFY_WORKOUT = "modify_workout"
    EXPLAIN_OR_COACH = "explain_or_coach"
    CELEBRITY_INSPIRED = "celebrity_inspired"
    LOG_OR_HISTORY = "log_or_history"
    UNKNOWN = "unknown"


class Modality(str, Enum):
    KETTLEBELL = "kettlebell"
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    BODYWEIGHT = "bodyweight"
    MIXED = "mixed"


@dataclass
class Intent:
    kind: IntentKind
    duration_minutes: Optional[int] = None
    modality: Optional[Modality] = None
    focus: Optional[str] = None
    referenced_name: Optional[str] = None
    split: Optional[Split] = None

    @property
    def wants_workout(self):
        return self.kind in (IntentKind.MAKE_WORKOUT, IntentKind.MODIFY_WORKOUT)

    def to_dict(self):
        return {
            "intent": self.kind.value,
            "duration_minutes": self.duration_minutes,
            "modality": self.modality.value if self.modality else None,
            "focus": self.focus,
            "referenced_name": self.referenced_name,
            "split": self.split.value if self.split else None,
        }


PERSONAS = [
    "joe holder",
    "david goggins",
    "chris hemsworth",
    "pavel tsatsouline",
    "rob gronkowski",
    "gronk",
    "chris bumstead",
    "arnold",
    "mark rippetoe",
]

FALLBACK_STYLES = [
    "Joe Holder (mobility + strength + conditioning)",
    "David Goggins (engine + mental toughness)",
    "Chris Hemsworth (hypertrophy + circuits)",
    "Pavel Tsatsouline (kettlebell strength)",
    "Wendler 5/3/1 (barbell strength)",
]

# Precedence order matters: the first modality found wins.
MODALITY_ORDER = [
    Modality.KETTLEBELL,
    Modality.BARBELL,
    Modality.DUMBBELL,
    Modality.BODYWEIGHT,
]

DURATION_RE = re.compile(r"(\d{2,3})\s?(min|minutes|minute)")
MIN_DURATION = 10
MAX_DURATION = 120

# Checked in order; a later match overwrites an earlier one.
INTENT_PATTERNS = [
    (IntentKind.MAKE_WORKOUT, re.compile(r"\b(workouts?|wods?|sessions?|programs?)\b")),
    (IntentKind.MODIFY_WORKOUT, re.compile(r"\b(swap|replace|shorter|longer|change)\b|\bno ")),
    (IntentKind.EXPLAIN_OR_COACH, re.compile(r"\b(how to|what is|why|explain|form)\b")),
    (IntentKind.LOG_OR_HISTORY, re.compile(r"\b(log|history)\b|what did i do")),
]

SPLIT_RE = re.compile(r"\b(push|pull|legs|upper|full|hiit)\b")

ORDINAL_RE = re.compile(
    r"\b(1st|first|2nd|second|3rd|third|4th|fourth|5th|fifth|6th|sixth|"
    r"7th|seventh|8th|eighth|9th|ninth|10th|tenth|\d+)\b"
)
ORDINALS = {
    "first": 1, "1st": 1,
    "second": 2, "2nd": 2,
    "third": 3, "3rd": 3,
    "fourth": 4, "4th": 4,
    "fifth": 5, "5th": 5,
    "sixth": 6, "6th": 6,
    "seventh": 7, "7th": 7,
    "eighth": 8, "8th": 8,
    "ninth": 9, "9th": 9,
    "tenth": 10, "10th": 10,
}

TEMPLATE_RES = [
    re.compile(r"\b(ntc|nike training club|nike app|nike workout|nike wod)\b"),
    re.compile(r"\bnike\s*#?\s*\d+\b"),
    re.compile(r"\bnike-?workout\b"),
]
STYLE_RE = re.compile(r"\b(style|in the style of|inspired by|coach|program|custom)\b")

PROGRAM_TYPE_HINTS = {
    "upper body": "upper body",
    "lower body": "lower body",
    "legs": "lower body",
    "push": "push",
    "pull": "pull",
    "hiit": "hiit",
    "strength": "strength",
    "power": "power",
    "eccentrics": "eccentric",
    "eccentric": "eccentric",
}
PRIMARY_TYPE_HINTS = ["upper body", "lower body", "push", "pull", "hiit", "strength", "power"]

MODEL_INTENTS = {"nike", "split", "chat"}


def clamp_duration(minutes):
    return max(MIN_DURATION, min(MAX_DURATION, int(minutes)))


def detect_persona(text):
    lowered = (text or "").lower().strip()
    return next((name for name in PERSONAS if name in lowered), None)


def detect_modality(text):
    lowered = (text or "").lower()
    return next((m for m in MODALITY_ORDER if m.value in lowered), None)


def extract_duration(text):
    match = DURATION_RE.search((text or "").lower())
    if not match:
        return None
    return clamp_duration(match.group(1))


def ordinal_to_number(text):
    """Map "second", "2nd" or a bare integer to a number; None when absent."""
    match = ORDINAL_RE.search((text or "").lower())
    if not match:
        return None
    token = match.group(1)
    if token in ORDINALS:
        return ORDINALS[token]
    return int(token)


def extract_program_hints(text):
    """Pull an index and a type hint out of a reference to a programmed template."""
    lowered = (text or "").lower()
    keywords = [hint for key, hint in PROGRAM_TYPE_HINTS.items() if key in lowered]
    type_hint = next((k for k in keywords if k in PRIMARY_TYPE_HINTS), None)
    return {
        "index": ordinal_to_number(lowered),
        "type_hint": type_hint,
        "keywords": keywords,
    }


def should_use_template(text):
    """True when the user explicitly asks for a programmed template, not a custom plan."""
    lowered = (text or "").lower()
    explicit = any(pattern.search(lowered) for pattern in TEMPLATE_RES)
    return explicit and not STYLE_RE.search(lowered)


def classify(text):
    """
    Classify a chat message into an Intent using heuristics only.

    Persona mentions return immediately. Otherwise modality and duration are
    extracted regardless of the branch, and the category predicates run in a
    fixed order where the most specific (last) match wins.
    """
    lowered = (text or "").lower()

    persona = detect_persona(lowered)
    if persona:
        return Intent(kind=IntentKind.CELEBRITY_INSPIRED, referenced_name=persona)

    split_match = SPLIT_RE.search(lowered)
    split = canonical_split(split_match.group(1)) if split_match else None
    intent = Intent(
        kind=IntentKind.UNKNOWN,
        duration_minutes=extract_duration(lowered),
        modality=detect_modality(lowered),
        split=split,
        focus=split.value if split else None,
    )

    for candidate, pattern in INTENT_PATTERNS:
        if pattern.search(lowered):
            intent.kind = candidate
    return intent


def classify_with_model(client, text):
    """
    Ask the model for {intent, nike?, split?}. Returns {"intent": "chat"} on
    any failure; never raises.
    """
    fallback = {"intent": "chat"}
    try:
        raw = client.complete(build_intent_prompt(text), max_tokens=300, temperature=0)
    except Exception as exc:
        print(f"  Intent model call failed ({exc}), treating as chat.")
        return fallback

    parsed = try_parse(raw)
    if not isinstance(parsed, dict) or parsed.get("intent") not in MODEL_INTENTS:
        return fallback

    result = {"intent": parsed["intent"]}
    if isinstance(parsed.get("nike"), dict):
        result["nike"] = parsed["nike"]
    split = canonical_split(parsed.get("split"))
    if split is not None:
        result["split"] = split.value
    return result

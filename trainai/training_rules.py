"""
Static training rulebook: splits, main lifts per split, equipment-aware picks.

Pure functions only. Nothing here touches the store or the model.
"""

from enum import Enum


class Split(str, Enum):
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    UPPER = "upper"
    FULL = "full"
    HIIT = "hiit"


MAIN_LIFTS = {
    Split.PUSH: [
        "Barbell Bench Press",
        "Barbell Incline Press",
        "Dumbbell Bench Press",
        "Dumbbell Incline Bench Press",
    ],
    Split.PULL: [
        "Barbell Deadlift",
        "Trap Bar Deadlift",
    ],
    Split.LEGS: [
        "Barbell Back Squat",
        "Belt Squat",
        "Barbell Front Squat",
    ],
    Split.UPPER: [
        "Shoulder Press",
    ],
    Split.FULL: [
        "Barbell Back Squat",
        "Barbell Deadlift",
        "Trap Bar Deadlift",
        "Barbell Bench Press",
        "Dumbbell Bench Press",
        "Shoulder Press",
    ],
}

# (equipment keyword, lift) ladders; the last rung has no requirement.
CORE_LIFT_LADDERS = {
    "legs": [
        ("barbell", "Barbell Back Squat"),
        ("kettlebell", "Kettlebell Goblet Squat"),
        ("dumbbell", "Dumbbell Goblet Squat"),
        (None, "Bodyweight Walking Lunge"),
    ],
    "pull": [
        ("trap bar", "Trap Bar Deadlift"),
        ("barbell", "Barbell Deadlift"),
        (None, "Kettlebell Deadlift"),
    ],
    "push": [
        ("barbell", "Barbell Bench Press"),
        ("dumbbell", "Dumbbell Bench Press"),
        (None, "Ring Push-Up"),
    ],
}

FOCUS_ALIASES = {
    "legs": "legs",
    "back": "pull",
    "pull": "pull",
    "chest": "push",
    "push": "push",
}


def canonical_split(raw):
    """Exact, case-insensitive match against the six splits; None otherwise."""
    if isinstance(raw, Split):
        return raw
    value = (raw or "").lower() if isinstance(raw, str) else ""
    try:
        return Split(value)
    except ValueError:
        return None


def is_hiit(split):
    return canonical_split(split) is Split.HIIT


def same_lift(a, b):
    return (a or "").strip().lower() == (b or "").strip().lower()


def is_main_lift_for_split(name, split):
    resolved = canonical_split(split)
    if resolved is None or resolved is Split.HIIT:
        return False
    return any(same_lift(lift, name) for lift in MAIN_LIFTS[resolved])


def pick_first_allowed_main(split, equipment_names=None):
    """
    Return the first configured main lift for the split.

    equipment_names is accepted for an equipment-aware choice later on
    (e.g. only offer Belt Squat when one is on file); today the first list
    entry is returned regardless.
    """
    resolved = canonical_split(split)
    if resolved is None or resolved is Split.HIIT:
        return None
    lifts = MAIN_LIFTS[resolved]
    return lifts[0] if lifts else None


def has_equipment(equipment, keyword):
    return any(keyword in (item or "").lower() for item in equipment or [])


def pick_core_lift(focus, equipment):
    """
    Walk the preference ladder for a body-region focus.

    Returns None for unmapped foci so the model can choose instead.
    """
    ladder = CORE_LIFT_LADDERS.get(FOCUS_ALIASES.get((focus or "").lower()))
    if not ladder:
        return None
    for keyword, lift in ladder:
        if keyword is None or has_equipment(equipment, keyword):
            return lift
    return None


def focus_for_split(split):
    resolved = canonical_split(split)
    if resolved in (Split.PUSH, Split.PULL, Split.LEGS):
        return resolved.value
    return None


def enforce_main_lift(shape, split, equipment=None):
    """
    Make sure the primary main item is an allowed main lift for the split.

    Keeps the flagged item when it is allowed, moves the flag to another
    allowed item when there is one, and otherwise renames the flagged item
    to an equipment-appropriate lift while keeping its prescription.

    Returns:
        (shape, substitution) where substitution is None or a dict with
        "from" and "to" names and an "outside_split_list" flag.
    """
    resolved = canonical_split(split)
    main = shape.get("main") or []
    if resolved is None or resolved is Split.HIIT or not main:
        return shape, None

    primary_index = next(
        (i for i, item in enumerate(main) if item.get("is_main")),
        0,
    )
    if is_main_lift_for_split(main[primary_index].get("name"), resolved):
        return shape, None

    for i, item in enumerate(main):
        if is_main_lift_for_split(item.get("name"), resolved):
            for j, other in enumerate(main):
                other["is_main"] = j == i
            main[i]["is_accessory"] = False
            return shape, None

    # Ladder picks follow the user's equipment, not MAIN_LIFTS, so the
    # substitute may itself fail is_main_lift_for_split (legs + dumbbells
    # gives Dumbbell Goblet Squat). outside_split_list reports that case.
    replacement = pick_core_lift(focus_for_split(resolved), equipment)
    if replacement is None:
        replacement = pick_first_allowed_main(resolved, equipment)
    if replacement is None:
        return shape, None

    primary = main[primary_index]
    original = primary.get("name")
    primary["substituted_from"] = original
    primary["name"] = replacement
    primary["is_accessory"] = False
    for j, other in enumerate(main):
        other["is_main"] = j == primary_index
    return shape, {
        "from": original,
        "to": replacement,
        "outside_split_list": not is_main_lift_for_split(replacement, resolved),
    }

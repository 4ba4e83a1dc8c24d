"""
Reconcile the plan shapes the model and older templates produce into one
canonical {warmup, main, cooldown} workout.
"""

import re


INT_RE = re.compile(r"^\d+$")

WARMUP_PHASES = ["prep", "activation", "warmup"]
MAIN_PHASES = ["strength", "main"]
FALLBACK_MAIN_PHASE = "conditioning"
ACCESSORY_PHASE = "accessory"
COOLDOWN_PHASE = "cooldown"


def empty_shape():
    return {"warmup": [], "main": [], "cooldown": []}


def count_items(shape):
    return sum(len((shape or {}).get(key) or []) for key in ("warmup", "main", "cooldown"))


def coerce_int(value):
    """Numeric strings become ints; everything else passes through."""
    if isinstance(value, str) and INT_RE.match(value.strip()):
        return int(value.strip())
    return value


def _as_list(value):
    return value if isinstance(value, list) else []


def _fix_item(item, accessory=False):
    if not isinstance(item, dict):
        return None
    name = item.get("name") if item.get("name") is not None else item.get("exercise")
    if not isinstance(name, str) or not name.strip():
        return None

    is_main = item.get("is_main")
    if is_main is None and item.get("exercise_phase"):
        is_main = str(item["exercise_phase"]).lower() == "main"

    fixed = {
        "name": name.strip(),
        "sets": coerce_int(item.get("sets")),
        "reps": item.get("reps"),
        "duration_seconds": coerce_int(item.get("duration_seconds")),
        "instruction": item.get("instruction"),
        "rest_seconds": coerce_int(item.get("rest_seconds")),
        "is_main": is_main,
    }
    if accessory or item.get("is_accessory") or item.get("isAccessory"):
        fixed["is_accessory"] = True
    return fixed


def _fix_items(items, accessory=False):
    fixed = (_fix_item(item, accessory=accessory) for item in _as_list(items))
    return [item for item in fixed if item is not None]


def ensure_single_main_badge(items):
    """
    Leave exactly one primary item when nothing upstream chose one.

    If any item already has is_main=True it is respected (other flags are
    coerced to bool); otherwise only the first item is marked.
    """
    if not items:
        return items
    if any(item.get("is_main") is True for item in items):
        return [{**item, "is_main": item.get("is_main") is True} for item in items]
    return [{**item, "is_main": index == 0} for index, item in enumerate(items)]


def _phase_items(phases, phase_name, accessory=False):
    for phase in phases:
        if isinstance(phase, dict) and phase.get("phase") == phase_name:
            return _fix_items(phase.get("items"), accessory=accessory)
    return []


def _from_direct(raw):
    workout = raw.get("workout") if isinstance(raw.get("workout"), dict) else {}
    return {
        "warmup": _fix_items(workout.get("warmup")),
        "main": _fix_items(workout.get("main")),
        "cooldown": _fix_items(workout.get("cooldown")),
    }


def _from_phases(raw):
    plan = raw.get("plan") if isinstance(raw.get("plan"), dict) else {}
    phases = _as_list(plan.get("phases")) or _as_list(raw.get("phases"))

    warmup = []
    for name in WARMUP_PHASES:
        warmup.extend(_phase_items(phases, name))

    main = []
    for name in MAIN_PHASES:
        main.extend(_phase_items(phases, name))
    if not main:
        main = _phase_items(phases, FALLBACK_MAIN_PHASE)
    main.extend(_phase_items(phases, ACCESSORY_PHASE, accessory=True))

    return {
        "warmup": warmup,
        "main": main,
        "cooldown": _phase_items(phases, COOLDOWN_PHASE),
    }


def normalize_workout(raw):
    """
    Normalize a parsed model response (or stored template) into a WorkoutShape.

    The direct raw["workout"] shape wins whenever it yields any item at all;
    only an empty direct shape falls back to the phase list.
    """
    if not isinstance(raw, dict):
        return empty_shape()

    shape = _from_direct(raw)
    if count_items(shape) == 0:
        shape = _from_phases(raw)

    shape["main"] = ensure_single_main_badge(shape["main"])
    return shape


def build_chat_summary(shape, title="Workout", minutes=None):
    """Plain-text rendering of a workout for chat replies."""
    header = f"{title} — {minutes} min" if minutes else title
    lines = [header]

    sections = [
        ("Warm-up", shape.get("warmup")),
        ("Main", shape.get("main")),
        ("Cool-down", shape.get("cooldown")),
    ]
    for label, items in sections:
        if not items:
            continue
        lines.append("")
        lines.append(f"{label}:")
        for index, item in enumerate(items, start=1):
            sets = f"{item['sets']}×" if item.get("sets") else ""
            if item.get("duration_seconds"):
                volume = f"{item['duration_seconds']}s"
            else:
                volume = str(item.get("reps") or "")
            badge = " (Main Lift)" if item.get("is_main") else ""
            cue = f" — {item['instruction']}" if item.get("instruction") else ""
            lines.append(f"{index}. {item['name']}{badge} {sets}{volume}{cue}".rstrip())
    return "\n".join(lines)

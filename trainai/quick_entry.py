"""
Shorthand set logging: "set,reps,weight" triplets typed straight into chat.
"""

import math
import re
from collections import namedtuple


QUICK_ENTRY_RE = re.compile(
    r"^\s*\d+\s*,\s*\d+\s*,\s*\d+(?:\s*(?:;|\n)\s*\d+\s*,\s*\d+\s*,\s*\d+)*\s*$"
)
SEPARATOR_RE = re.compile(r";|\n")

QuickEntry = namedtuple("QuickEntry", ["set_number", "reps", "weight"])


def _to_number(value):
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return math.nan
    # "inf", "nan" and overflowing literals like "1e400" are malformed too.
    return number if math.isfinite(number) else math.nan


def is_quick_entry(text):
    """Return True when the whole message is one or more int,int,int triplets."""
    return bool(QUICK_ENTRY_RE.match((text or "").strip()))


def parse_quick_entry(text):
    """
    Split a quick-entry message into QuickEntry tuples.

    Malformed numeric fields become NaN instead of raising; callers that
    append to a log must reject those entries (see build_set_logs).
    """
    entries = []
    for chunk in SEPARATOR_RE.split(text or ""):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [part.strip() for part in chunk.split(",")]
        parts += [""] * (3 - len(parts))
        entries.append(
            QuickEntry(
                set_number=_to_number(parts[0]),
                reps=_to_number(parts[1]),
                weight=_to_number(parts[2]),
            )
        )
    return entries


def has_nan(entry):
    """True when any field is NaN or infinite (i.e. not loggable)."""
    return any(not math.isfinite(value) for value in entry)


def build_set_logs(entries, exercise_name):
    """
    Turn parsed entries into set-log rows for the first post-warmup exercise.

    Args:
        entries: QuickEntry list from parse_quick_entry
        exercise_name: Exercise the sets belong to

    Returns:
        List of set-log dicts. Entries with a NaN or infinite field are skipped.
    """
    name = (exercise_name or "").strip()
    if not name:
        raise ValueError("No exercise found after warm-up to attach sets to")

    logs = []
    for entry in entries:
        if has_nan(entry):
            continue
        logs.append(
            {
                "exercise_name": name,
                "set_number": int(entry.set_number),
                "reps": int(entry.reps),
                "actual_weight": entry.weight,
                "completed": True,
            }
        )
    return logs

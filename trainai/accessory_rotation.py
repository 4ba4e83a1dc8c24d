"""
Accessory rotation: avoid repeating last session's accessories for a user.
"""

import random
from dataclasses import dataclass

from trainai.training_rules import has_equipment


BAD_CATEGORIES = {"warmup", "mobility", "cooldown"}
DEFAULT_REST_SECONDS = 60
DEFAULT_SET_SECONDS = 30


@dataclass(frozen=True)
class AccessoryPoolEntry:
    name: str
    rest_seconds_default: int = DEFAULT_REST_SECONDS
    set_duration_seconds: int = DEFAULT_SET_SECONDS


def rotation_key(user_id, context=None):
    """History is kept per user, or per user + context (e.g. split)."""
    context = getattr(context, "value", context)
    return f"{user_id}:{context}" if context else str(user_id)


def equipment_covered(required, equipment):
    """True when every required item matches something the user owns."""
    return all(
        has_equipment(equipment, (item or "").strip().lower())
        for item in required or []
        if (item or "").strip()
    )


def build_accessory_pool(catalog_rows, core_lift_names, exclude=(), equipment=None):
    """
    Build pool entries from catalog rows.

    Drops warmup/mobility/cooldown categories, anything tagged as a core
    lift, and explicitly excluded names (all case-insensitive). When
    equipment is given, rows whose equipment_required is not covered by it
    are dropped as well.
    """
    core = {(name or "").lower() for name in core_lift_names or []}
    excluded = {(name or "").lower() for name in exclude or []}

    pool = []
    for row in catalog_rows or []:
        name = (row.get("name") or "").strip()
        if not name:
            continue
        if (row.get("category") or "").lower() in BAD_CATEGORIES:
            continue
        lowered = name.lower()
        if lowered in core or lowered in excluded:
            continue
        if equipment is not None and not equipment_covered(row.get("equipment_required"), equipment):
            continue
        pool.append(
            AccessoryPoolEntry(
                name=name,
                rest_seconds_default=row.get("rest_seconds_default") or DEFAULT_REST_SECONDS,
                set_duration_seconds=row.get("set_duration_seconds") or DEFAULT_SET_SECONDS,
            )
        )
    return pool


def select_accessories(pool, history, count, rng=None):
    """
    Choose count entries, preferring ones not used last time.

    When too few fresh entries remain, the full pool is used and repeats are
    accepted rather than returning fewer than count.
    """
    rng = rng or random.Random()
    recent = set(history or [])
    fresh = [entry for entry in pool if entry.name not in recent]
    candidates = list(fresh if len(fresh) >= count else pool)
    rng.shuffle(candidates)
    return candidates[:count]


class AccessoryRotation:
    """Reads and overwrites rotation history around select_accessories."""

    def __init__(self, store, rng=None):
        self.store = store
        self.rng = rng or random.Random()

    def pick_accessories(self, key, pool, count):
        history = self.store.get_rotation_history(key)
        chosen = select_accessories(pool, history, count, rng=self.rng)
        self.store.set_rotation_history(key, [entry.name for entry in chosen])
        return chosen

    def rotate_workout(self, shape, key, pool):
        """
        Replace accessory-tagged main items with fresh picks from the pool.

        Sets and reps stay as prescribed; rest comes from the pool entry.
        Returns the list of (old, new) name pairs.
        """
        slots = [item for item in shape.get("main") or [] if item.get("is_accessory")]
        if not slots or not pool:
            return []

        chosen = self.pick_accessories(key, pool, len(slots))
        swaps = []
        for item, entry in zip(slots, chosen):
            swaps.append((item["name"], entry.name))
            item["name"] = entry.name
            item["rest_seconds"] = entry.rest_seconds_default
        return swaps

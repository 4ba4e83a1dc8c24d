"""
Prompt construction for workout generation and intent classification.

Everything here returns strings; the model is called by the assembler.
"""

import json


COACH_SYSTEM_PROMPT = (
    "You are a meticulous strength coach. Always obey equipment limits; "
    "avoid Olympic lifts (snatch/clean/jerk). Return JSON only."
)

PHASE_NAMES = ["warmup", "main", "accessory", "conditioning", "cooldown"]

TIME_STRUCTURES = {
    15: {
        "warmup_minutes": 3, "main_minutes": 8, "accessory_minutes": 2, "cooldown_minutes": 2,
        "warmup_count": 3, "main_count": 1, "accessory_count": 1, "cooldown_count": 2,
    },
    30: {
        "warmup_minutes": 5, "main_minutes": 15, "accessory_minutes": 7, "cooldown_minutes": 3,
        "warmup_count": 4, "main_count": 2, "accessory_count": 2, "cooldown_count": 3,
    },
    45: {
        "warmup_minutes": 7, "main_minutes": 20, "accessory_minutes": 13, "cooldown_minutes": 5,
        "warmup_count": 5, "main_count": 2, "accessory_count": 4, "cooldown_count": 4,
    },
    60: {
        "warmup_minutes": 10, "main_minutes": 25, "accessory_minutes": 18, "cooldown_minutes": 7,
        "warmup_count": 6, "main_count": 3, "accessory_count": 5, "cooldown_count": 5,
    },
}

OUTPUT_CONTRACT = """{
  "name": string,
  "duration_min": number,
  "split": string,
  "phases": [
    {
      "phase": "warmup" | "main" | "accessory" | "conditioning" | "cooldown",
      "items": [
        {
          "name": string,
          "sets": number,
          "reps": string | number,
          "duration_seconds": number | null,
          "rest_seconds": number | null,
          "instruction": string | null,
          "is_main": boolean
        }
      ]
    }
  ],
  "est_total_minutes": number
}"""


def time_structure_for(minutes):
    """Pick the phase budget whose length is closest to the requested minutes."""
    closest = min(TIME_STRUCTURES, key=lambda length: (abs(length - minutes), length))
    return TIME_STRUCTURES[closest]


def _format_profile(profile):
    profile = profile or {}
    lines = []
    if profile.get("current_weight") is not None:
        goal = profile.get("goal_weight")
        goal_part = f" → Goal: {goal} lbs" if goal is not None else ""
        lines.append(f"- Current: {profile['current_weight']} lbs{goal_part}")
    lines.append(f"- Training goal: {profile.get('training_goal') or 'unspecified'}")
    lines.append(f"- Fitness level: {profile.get('fitness_level') or 'unspecified'}")
    if profile.get("preferred_workout_duration"):
        lines.append(f"- Preferred duration: {profile['preferred_workout_duration']} min")
    return "\n".join(lines)


def build_workout_prompt(
    split,
    minutes,
    style,
    profile,
    equipment,
    base_structure=None,
    user_message=None,
    style_hint=None,
):
    """
    Build the generation request for one session.

    Args:
        split: Canonical split name (or None to let the model decide)
        minutes: Target session length
        style: "strength", "balanced" or "hiit"
        profile: Profile dict from the store
        equipment: List of equipment names the user owns
        base_structure: Optional workout to adapt (modify requests, templates)
        user_message: Raw chat text, echoed for context
        style_hint: Persona or style the session should borrow from

    Returns:
        Complete prompt string
    """
    split_label = getattr(split, "value", split) or "coach's choice"
    equipment_line = ", ".join(equipment) if equipment else "none (bodyweight only)"
    structure = time_structure_for(minutes)

    seed_block = ""
    if base_structure:
        seed_block = (
            "\nSEED STRUCTURE (adapt this instead of starting from scratch; "
            "keep exercise order unless the request says otherwise):\n"
            f"{json.dumps(base_structure, indent=2)}\n"
        )

    message_block = f'\nUser message: "{user_message}"\n' if user_message else ""
    style_block = f"\nBorrow the training style of: {style_hint}\n" if style_hint else ""

    return f"""Return ONLY JSON. No Markdown, no commentary.

Create a {minutes}-minute {split_label} workout ({style} style).
{message_block}{style_block}
USER PROFILE:
{_format_profile(profile)}

EQUIPMENT WHITELIST (use nothing else): {equipment_line}

TIME STRUCTURE ({minutes} minutes total):
- Warmup: {structure['warmup_minutes']} minutes ({structure['warmup_count']} exercises)
- Main: {structure['main_minutes']} minutes ({structure['main_count']} exercises, compound first)
- Accessory: {structure['accessory_minutes']} minutes ({structure['accessory_count']} exercises)
- Cooldown: {structure['cooldown_minutes']} minutes ({structure['cooldown_count']} exercises)
{seed_block}
RULES:
- Mark exactly one main item with "is_main": true (the anchoring compound lift).
- No snatch, clean, clean & jerk or power clean.
- Phase names must be one of: {' | '.join(PHASE_NAMES)}.

OUTPUT FORMAT (exact schema):
{OUTPUT_CONTRACT}
"""


def build_intent_prompt(text):
    return (
        "Classify the user request into JSON only. Schema: "
        '{"intent":"nike|split|chat","nike":{"index":number?,"type":string?,'
        '"descriptors":string[],"confidence":0..1}?,"split":"push|pull|legs|hiit"}. '
        "Only return JSON. If the user refers to our programmed Nike templates by "
        'order (e.g., "second"), choose intent:"nike".\n\n'
        f"User request: {text}"
    )

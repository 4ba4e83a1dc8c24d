"""
Request orchestration: message in, validated workout plus coach message out.
"""

import random

from trainai.accessory_rotation import (
    BAD_CATEGORIES,
    AccessoryRotation,
    build_accessory_pool,
    rotation_key,
)
from trainai.intent_classifier import (
    FALLBACK_STYLES,
    Intent,
    IntentKind,
    classify,
    classify_with_model,
    clamp_duration,
    extract_program_hints,
    should_use_template,
)
from trainai.plan_normalizer import (
    build_chat_summary,
    count_items,
    empty_shape,
    normalize_workout,
)
from trainai.prompt_builder import COACH_SYSTEM_PROMPT, build_workout_prompt
from trainai.quick_entry import build_set_logs, is_quick_entry, parse_quick_entry
from trainai.safe_json import try_parse
from trainai.training_rules import Split, canonical_split, enforce_main_lift


GENERATION_FAILED = "generation_failed"
UNPARSABLE_RESPONSE = "unparsable_response"
NO_CURRENT_WORKOUT = "no_current_workout"


class PlanAssembler:
    """Runs the synthesis pipeline for one request at a time."""

    def __init__(self, client, store, config, rng=None):
        """
        Args:
            client: Object with complete(prompt, system=None, ...) -> str
            store: WorkoutStore (or anything with the same read/write methods)
            config: Full configuration dictionary
            rng: Optional random.Random for reproducible accessory picks
        """
        self.client = client
        self.store = store
        self.config = config
        self.rotation = AccessoryRotation(store, rng=rng or random.Random())
        self.debug = bool(config.get("debug"))

    def _log(self, message):
        if self.debug:
            print(f"[PIPELINE] {message}")

    def handle(self, request):
        """
        Process one inbound request.

        Args:
            request: dict with user_id, message and optional split, minutes,
                style, style_hint and current_workout

        Returns:
            dict with ok, intent, workout, plan, coach_message, debug and,
            on failure, error

        Raises:
            ValueError: for a missing user id, a missing message, or a split
                hint outside the known splits
        """
        user_id = request.get("user_id")
        message = (request.get("message") or "").strip()
        split_hint = request.get("split")

        if not user_id:
            raise ValueError("Missing user id")
        if not message and not split_hint:
            raise ValueError("Missing message")

        split = None
        if split_hint:
            split = canonical_split(split_hint)
            if split is None:
                raise ValueError(f"Unknown split: {split_hint!r}")

        if message and is_quick_entry(message):
            return self._handle_quick_entry(user_id, message)

        intent = classify(message) if message else Intent(kind=IntentKind.MAKE_WORKOUT)
        if split is not None:
            # Explicit split buttons are authoritative.
            intent.split = split
            if intent.kind is not IntentKind.MODIFY_WORKOUT:
                intent.kind = IntentKind.MAKE_WORKOUT
        self._log(f"classified: {intent.to_dict()}")

        if intent.kind is IntentKind.UNKNOWN:
            routed = self._route_unknown(message, intent)
            if routed is not None:
                return routed

        if not intent.wants_workout:
            return self._non_workout_response(user_id, message, intent)

        return self._generate(user_id, message, intent, request)

    # -- non-workout branches ----------------------------------------------

    def _handle_quick_entry(self, user_id, message):
        entries = parse_quick_entry(message)
        recent = self.store.get_recent_sessions(user_id, limit=1)
        main = recent[0]["workout"].get("main") if recent else []
        if not main:
            return self._result(
                ok=False,
                intent=IntentKind.LOG_OR_HISTORY,
                coach_message="Start a workout first, then log sets as set,reps,weight.",
                error=NO_CURRENT_WORKOUT,
                entries=[entry._asdict() for entry in entries],
            )

        exercise_name = main[0]["name"]
        set_logs = build_set_logs(entries, exercise_name)
        plural = "s" if len(set_logs) != 1 else ""
        return self._result(
            ok=True,
            intent=IntentKind.LOG_OR_HISTORY,
            coach_message=f"Added {len(set_logs)} set{plural} to {exercise_name}.",
            entries=[entry._asdict() for entry in entries],
            set_logs=set_logs,
        )

    def _route_unknown(self, message, intent):
        if should_use_template(message):
            hints = extract_program_hints(message)
            return self._result(
                ok=True,
                intent=intent.kind,
                coach_message="Pulling up your programmed template workouts.",
                debug={"route": "template", "hints": hints},
            )

        guess = classify_with_model(self.client, message)
        self._log(f"model classifier: {guess}")
        if guess.get("intent") == "split" and guess.get("split"):
            intent.kind = IntentKind.MAKE_WORKOUT
            intent.split = canonical_split(guess["split"])
            return None
        if guess.get("intent") == "nike":
            hints = extract_program_hints(message)
            index = (guess.get("nike") or {}).get("index") or hints["index"] or 1
            kind = (guess.get("nike") or {}).get("type") or hints["type_hint"] or "upper body"
            return self._result(
                ok=True,
                intent=intent.kind,
                coach_message=(
                    f"Did you mean template workout {index} for {kind}? "
                    "Confirm, or tell me what you want instead."
                ),
                debug={"route": "template-pending", "hints": hints},
                needs_confirmation=True,
            )
        return None

    def _non_workout_response(self, user_id, message, intent):
        if intent.kind is IntentKind.CELEBRITY_INSPIRED:
            name = intent.referenced_name.title()
            return self._result(
                ok=True,
                intent=intent.kind,
                coach_message=(
                    f"I can build a session inspired by {name}. "
                    "Tell me how long you have and which split you want."
                ),
                debug={"route": "persona", "persona": intent.referenced_name},
                styles=list(FALLBACK_STYLES),
                style_hint=name,
            )

        if intent.kind is IntentKind.LOG_OR_HISTORY:
            sessions = self.store.get_recent_sessions(user_id, limit=5)
            if not sessions:
                coach = "No sessions on file yet. Ask me for a workout to get started."
            else:
                lines = ["Your recent sessions:"]
                for session in sessions:
                    main = session["workout"].get("main") or []
                    anchor = next((item["name"] for item in main if item.get("is_main")), None)
                    label = session.get("split") or "session"
                    lines.append(
                        f"- {session['created_at']}: {label} ({session.get('minutes') or '?'} min)"
                        + (f", main lift {anchor}" if anchor else "")
                    )
                coach = "\n".join(lines)
            return self._result(
                ok=True,
                intent=intent.kind,
                coach_message=coach,
                debug={"route": "history"},
                sessions=sessions,
            )

        if intent.kind is IntentKind.EXPLAIN_OR_COACH:
            return self._result(
                ok=True,
                intent=intent.kind,
                coach_message="Good question. Routing this to coaching chat.",
                debug={"route": "coach-chat", "question": message},
            )

        return self._result(
            ok=True,
            intent=intent.kind,
            coach_message=(
                "I can build a workout, adjust the current one, explain an exercise, "
                "or show your history. What would you like?"
            ),
            debug={"route": "chat"},
        )

    # -- generation ----------------------------------------------------------

    def _generate(self, user_id, message, intent, request):
        defaults = self.config.get("defaults", {}) or {}
        profile = self.store.get_profile(user_id)
        equipment = self.store.get_equipment_names(user_id)

        minutes = (
            request.get("minutes")
            or intent.duration_minutes
            or profile.get("preferred_workout_duration")
            or defaults.get("minutes", 45)
        )
        minutes = clamp_duration(minutes)
        split = intent.split
        style = request.get("style") or (
            "hiit" if split is Split.HIIT else defaults.get("style", "strength")
        )
        base_structure = None
        if intent.kind is IntentKind.MODIFY_WORKOUT:
            base_structure = request.get("current_workout")

        prompt = build_workout_prompt(
            split=split,
            minutes=minutes,
            style=style,
            profile=profile,
            equipment=equipment,
            base_structure=base_structure,
            user_message=message or None,
            style_hint=request.get("style_hint"),
        )
        debug = {
            "route": "llm",
            "split": split.value if split else None,
            "minutes": minutes,
            "style": style,
        }

        try:
            raw_text = self.client.complete(prompt, system=COACH_SYSTEM_PROMPT)
        except Exception as e:
            print(f"Error generating workout: {e}")
            return self._result(
                ok=False,
                intent=intent.kind,
                coach_message="Failed to generate workout. Please try again.",
                error=GENERATION_FAILED,
                debug=debug,
            )

        parsed = try_parse(raw_text)
        workout = normalize_workout(parsed)
        if parsed is None or count_items(workout) == 0:
            print("⚠ Model response could not be read as a workout.")
            debug["raw_length"] = len(raw_text or "")
            return self._result(
                ok=False,
                intent=intent.kind,
                plan=parsed,
                coach_message="I couldn't read a workout from the coach's reply. Please try again.",
                error=UNPARSABLE_RESPONSE,
                debug=debug,
            )

        if split is None and isinstance(parsed, dict):
            split = canonical_split(parsed.get("split"))
            debug["split"] = split.value if split else None

        workout, substitution = enforce_main_lift(workout, split, equipment)
        debug["substitution"] = substitution

        per_split = (self.config.get("rotation", {}) or {}).get("per_split", True)
        key = rotation_key(user_id, split if per_split else None)
        in_use = [item["name"] for item in workout["main"] if not item.get("is_accessory")]
        pool = build_accessory_pool(
            self.store.get_exercise_catalog(exclude_categories=sorted(BAD_CATEGORIES)),
            self.store.get_core_lift_names(),
            exclude=in_use,
            equipment=equipment,
        )
        debug["accessory_swaps"] = self.rotation.rotate_workout(workout, key, pool)
        self._log(f"accessory swaps: {debug['accessory_swaps']}")

        title = (parsed.get("name") if isinstance(parsed, dict) else None) or "Workout"
        coach_message = self._coach_message(title, minutes, equipment, substitution)
        debug["summary"] = build_chat_summary(workout, title=title, minutes=minutes)

        debug["session_id"] = self.store.save_session(
            user_id,
            workout,
            plan=parsed,
            split=split.value if split else None,
            minutes=minutes,
            intent=intent.kind.value,
            coach_message=coach_message,
        )

        return self._result(
            ok=True,
            intent=intent.kind,
            workout=workout,
            plan=parsed,
            coach_message=coach_message,
            debug=debug,
        )

    @staticmethod
    def _coach_message(title, minutes, equipment, substitution):
        equip_line = (
            f"Using: {', '.join(equipment)}."
            if equipment
            else "No equipment on file, defaulting to bodyweight."
        )
        message = f"Planned: {title} (~{minutes} min). {equip_line}"
        if substitution:
            message += f" Swapped {substitution['from']} for {substitution['to']} as the main lift."
        return message

    @staticmethod
    def _result(ok, intent, coach_message, workout=None, plan=None, debug=None, error=None, **extra):
        result = {
            "ok": ok,
            "intent": intent.value,
            "workout": workout if workout is not None else empty_shape(),
            "plan": plan,
            "coach_message": coach_message,
            "debug": debug or {},
        }
        if error:
            result["error"] = error
        result.update(extra)
        return result

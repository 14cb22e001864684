from __future__ import annotations

import copy
import datetime
import logging
from typing import List, Optional

from algorithms import DayMonth, SetNormalizer
from db import CustomExerciseRepository, WorkoutDataRepository
from exercise_catalog import BUILTIN_EXERCISES, is_builtin

logger = logging.getLogger(__name__)


class LedgerService:
    """Mutate the exercise-keyed ledger of logged sets.

    Every mutation loads the full ledger, edits the affected day entry and
    saves the whole document back. Entries that are not touched keep their
    stored shape, including legacy string sets.
    """

    def __init__(
        self,
        workout_repo: WorkoutDataRepository,
        custom_exercise_repo: CustomExerciseRepository,
    ) -> None:
        self.workouts = workout_repo
        self.custom_exercises = custom_exercise_repo

    @staticmethod
    def _find_entry(entries: list, date: str) -> Optional[dict]:
        for entry in entries:
            if entry["date"] == date:
                return entry
        return None

    def _require_entry(self, ledger: dict, exercise_name: str, date: str) -> dict:
        entry = self._find_entry(ledger.get(exercise_name, []), date)
        if entry is None:
            raise ValueError(f"no {exercise_name} entry on {date}")
        return entry

    @staticmethod
    def _drop_empty(ledger: dict, exercise_name: str) -> None:
        ledger[exercise_name] = [e for e in ledger[exercise_name] if e.get("sets")]
        if not ledger[exercise_name]:
            del ledger[exercise_name]

    def log_set(
        self,
        exercise_name: str,
        date: "str | datetime.date",
        reps: float,
        weight: float,
        notes: str = "",
        weight_step: str = "5",
    ) -> dict:
        """Append one ``reps x weight`` set for ``exercise_name`` on ``date``.

        A second set on the same date extends the existing day entry. The
        first set on a new date creates the entry and records the current
        reps, weight and weight step as its default values.
        """
        if not exercise_name or not exercise_name.strip():
            raise ValueError("exercise name required")
        day = DayMonth.coerce(date)
        record = {"value": SetNormalizer.format_value(reps, weight), "notes": notes or ""}
        ledger = self.workouts.load()
        entries = ledger.setdefault(exercise_name, [])
        entry = self._find_entry(entries, day)
        if entry is not None:
            entry["sets"] = SetNormalizer.normalize_sets(entry.get("sets", []))
            entry["sets"].append(record)
        else:
            entry = {
                "exerciseName": exercise_name,
                "date": day,
                "sets": [record],
                "defaultValues": {
                    "reps": reps,
                    "weight": weight,
                    "weightStep": str(weight_step),
                },
            }
            entries.append(entry)
        self.workouts.save(ledger)
        logger.debug("Logged %s for %s on %s", record["value"], exercise_name, day)
        return copy.deepcopy(entry)

    def edit_set(
        self,
        exercise_name: str,
        date: str,
        index: int,
        reps: float,
        weight: float,
        notes: Optional[str] = None,
    ) -> dict:
        """Replace the set at ``index``; ``notes=None`` keeps the old note."""
        ledger = self.workouts.load()
        entry = self._require_entry(ledger, exercise_name, date)
        sets = SetNormalizer.normalize_sets(entry.get("sets", []))
        if index < 0 or index >= len(sets):
            raise IndexError("set index out of range")
        sets[index] = {
            "value": SetNormalizer.format_value(reps, weight),
            "notes": sets[index]["notes"] if notes is None else notes,
        }
        entry["sets"] = sets
        self.workouts.save(ledger)
        return copy.deepcopy(entry)

    def remove_set(self, exercise_name: str, date: str, index: int) -> None:
        """Remove one set; an entry left without sets is removed as well."""
        ledger = self.workouts.load()
        entry = self._require_entry(ledger, exercise_name, date)
        sets = SetNormalizer.normalize_sets(entry.get("sets", []))
        if index < 0 or index >= len(sets):
            raise IndexError("set index out of range")
        del sets[index]
        entry["sets"] = sets
        self._drop_empty(ledger, exercise_name)
        self.workouts.save(ledger)

    def delete_entry(self, exercise_name: str, date: str) -> None:
        ledger = self.workouts.load()
        if exercise_name not in ledger:
            raise ValueError(f"unknown exercise {exercise_name}")
        ledger[exercise_name] = [e for e in ledger[exercise_name] if e["date"] != date]
        if not ledger[exercise_name]:
            del ledger[exercise_name]
        self.workouts.save(ledger)
        logger.info("Deleted %s entry on %s", exercise_name, date)

    def delete_day(self, date: str) -> int:
        """Remove every exercise's entry for ``date``; returns entries removed."""
        ledger = self.workouts.load()
        removed = 0
        for exercise_name in list(ledger):
            kept = [e for e in ledger[exercise_name] if e["date"] != date]
            removed += len(ledger[exercise_name]) - len(kept)
            if kept:
                ledger[exercise_name] = kept
            else:
                del ledger[exercise_name]
        self.workouts.save(ledger)
        logger.info("Deleted %d entries on %s", removed, date)
        return removed

    def add_custom_exercise(self, name: str) -> bool:
        name = name.strip() if name else ""
        if not name:
            raise ValueError("exercise name required")
        if is_builtin(name):
            return False
        return self.custom_exercises.add(name)

    def exercise_options(self) -> List[dict]:
        """Exercises for selection: logged ones, then custom, then catalog."""
        options: List[dict] = []
        seen: set = set()
        for name in self.workouts.load():
            options.append({"value": name, "label": name, "isCustom": True})
            seen.add(name)
        for name in self.custom_exercises.load():
            if name not in seen:
                options.append({"value": name, "label": name, "isCustom": True})
                seen.add(name)
        for name in BUILTIN_EXERCISES:
            if name not in seen:
                options.append({"value": name, "label": name, "isCustom": False})
        return options

    def default_values(self, exercise_name: str) -> Optional[dict]:
        entries = self.workouts.load().get(exercise_name, [])
        return entries[0].get("defaultValues") if entries else None

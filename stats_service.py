from __future__ import annotations

import logging
from typing import Dict, List, Optional

from algorithms import DayMonth, MathTools, SetNormalizer
from db import WorkoutDataRepository

logger = logging.getLogger(__name__)


class StatisticsService:
    """Derive date-grouped views and per-day statistics from the ledger.

    The static methods are pure functions over plain ledger dictionaries; the
    instance methods apply them to whatever the repository currently holds.
    """

    def __init__(self, workout_repo: WorkoutDataRepository) -> None:
        self.workouts = workout_repo

    @staticmethod
    def calculate_volume(sets: list) -> float:
        """Return the sum of reps times weight over ``sets``.

        Set values that do not parse as ``RxW`` contribute nothing and are
        reported through the log.
        """
        pairs = []
        for raw in sets:
            value = SetNormalizer.normalize(raw)["value"]
            try:
                pairs.append(SetNormalizer.parse_value(value))
            except ValueError:
                logger.warning("Ignoring malformed set value %r in volume", value)
        return MathTools.clean_number(MathTools.volume(pairs))

    @classmethod
    def group_by_date(cls, ledger: dict) -> Dict[str, List[dict]]:
        """Invert the exercise-keyed ledger into ``date -> [exercise entry]``."""
        grouped: Dict[str, List[dict]] = {}
        for exercise_name, entries in ledger.items():
            for entry in entries:
                sets = SetNormalizer.normalize_sets(entry.get("sets", []))
                grouped.setdefault(entry["date"], []).append(
                    {
                        "exerciseName": exercise_name,
                        "sets": sets,
                        "volume": cls.calculate_volume(sets),
                    }
                )
        return grouped

    @staticmethod
    def last_workout_dates(ledger: dict) -> Dict[str, str]:
        last: Dict[str, str] = {}
        for exercise_name, entries in ledger.items():
            if entries:
                last[exercise_name] = DayMonth.most_recent(e["date"] for e in entries)
        return last

    @staticmethod
    def day_stats(entries: List[dict]) -> dict:
        return {
            "exerciseCount": len(entries),
            "totalSets": sum(len(e["sets"]) for e in entries),
            "totalWeight": MathTools.clean_number(sum(e["volume"] for e in entries)),
        }

    @staticmethod
    def top_exercise(entries: List[dict]) -> Optional[str]:
        """Name of the highest-volume exercise; the earliest one wins ties."""
        best = None
        for entry in entries:
            if best is None or entry["volume"] > best["volume"]:
                best = entry
        return best["exerciseName"] if best else None

    @staticmethod
    def sorted_dates(grouped: Dict[str, List[dict]]) -> List[str]:
        return DayMonth.sort_desc(grouped.keys())

    @staticmethod
    def exercise_history(ledger: dict, exercise_name: str) -> dict:
        """Return the per-date table shown when an exercise is selected."""
        entries = ledger.get(exercise_name, [])
        rows = []
        for index, entry in enumerate(entries):
            sets = SetNormalizer.normalize_sets(entry.get("sets", []))
            rows.append(
                {
                    "date": entry["date"],
                    "sets": [s["value"] for s in sets],
                    "notes": [s["notes"] for s in sets],
                    "isLatest": index == len(entries) - 1,
                }
            )
        return {
            "exercise": exercise_name,
            "rows": rows,
            "maxSets": max((len(r["sets"]) for r in rows), default=0),
            "defaultValues": entries[0].get("defaultValues") if entries else None,
        }

    def grouped(self) -> Dict[str, List[dict]]:
        return self.group_by_date(self.workouts.load())

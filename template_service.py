from __future__ import annotations

import copy
import logging
from typing import Dict, List, Optional

from algorithms import DayMonth, MathTools, SetNormalizer
from db import CustomWorkoutRepository
from history_service import HistoryService

logger = logging.getLogger(__name__)


class TemplateService:
    """Create, rename and delete custom workout templates.

    Templates are identified by name only. Rename and delete therefore act on
    every template sharing the given name.
    """

    def __init__(
        self,
        template_repo: CustomWorkoutRepository,
        history: HistoryService,
    ) -> None:
        self.templates = template_repo
        self.history = history

    def save_custom_workout(
        self, name: str, date: str, entries: Optional[List[dict]] = None
    ) -> Optional[dict]:
        """Snapshot one day's exercises under ``name``.

        ``entries`` defaults to the day as currently shown in the history.
        A blank ``name`` stores nothing and returns ``None``.
        """
        if not name or not name.strip():
            return None
        if entries is None:
            workouts = self.history.view()["workouts"]
            if date not in workouts:
                raise ValueError(f"no workouts on {date}")
            entries = workouts[date]
        workout = {
            "name": name,
            "date": date,
            "exercises": [
                {
                    "exerciseName": e["exerciseName"],
                    "sets": SetNormalizer.normalize_sets(e["sets"]),
                    "volume": e["volume"],
                }
                for e in entries
            ],
        }
        self.templates.append(workout)
        logger.info("Saved custom workout %r for %s", name, date)
        return copy.deepcopy(workout)

    def add_template(self, workout: dict) -> dict:
        """Append an already validated template as-is."""
        self.templates.append(workout)
        logger.info("Added custom workout %r", workout.get("name"))
        return workout

    @staticmethod
    def recompute_last_performed(
        template: dict, grouped: Dict[str, List[dict]]
    ) -> Optional[str]:
        """Most recent date on which the template's first exercise appears.

        Falls back to the template's own date when there is no match.
        """
        exercises = template.get("exercises") or []
        if not exercises:
            return template.get("date")
        first = exercises[0]["exerciseName"]
        dates = [
            date
            for date, entries in grouped.items()
            if any(e["exerciseName"] == first for e in entries)
        ]
        return DayMonth.most_recent(dates) or template.get("date")

    def templates_with_last_performed(self, view: Optional[dict] = None) -> List[dict]:
        view = view if view is not None else self.history.view()
        result = []
        for template in self.templates.load():
            item = dict(template)
            item["lastPerformed"] = self.recompute_last_performed(
                template, view["workouts"]
            )
            result.append(item)
        return result

    def rename(self, old_name: str, new_name: str) -> int:
        if not new_name or not new_name.strip():
            return 0
        workouts = self.templates.load()
        count = 0
        for workout in workouts:
            if workout.get("name") == old_name:
                workout["name"] = new_name
                count += 1
        if count:
            self.templates.save(workouts)
            logger.info("Renamed %d custom workout(s) %r -> %r", count, old_name, new_name)
        return count

    def delete(self, name: str) -> int:
        workouts = self.templates.load()
        kept = [w for w in workouts if w.get("name") != name]
        count = len(workouts) - len(kept)
        if count:
            self.templates.save(kept)
            logger.info("Deleted %d custom workout(s) named %r", count, name)
        return count

    @staticmethod
    def exercise_info(template: dict, index: int) -> dict:
        """Targets for the ``index``-th exercise, read from its first set."""
        exercises = template.get("exercises") or []
        if index < 0 or index >= len(exercises):
            raise IndexError("exercise index out of range")
        exercise = exercises[index]
        sets = SetNormalizer.normalize_sets(exercise.get("sets", []))
        if not sets:
            raise ValueError(f"{exercise['exerciseName']} has no sets")
        reps, weight = SetNormalizer.parse_value(sets[0]["value"])
        return {
            "name": exercise["exerciseName"],
            "targetReps": MathTools.clean_number(reps),
            "targetWeight": MathTools.clean_number(weight),
            "totalSets": len(sets),
            "position": index + 1,
            "exerciseCount": len(exercises),
        }

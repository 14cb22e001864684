from __future__ import annotations

import copy
from typing import Dict, List, Optional

from algorithms import SetNormalizer
from db import CustomWorkoutRepository, WorkoutDataRepository
from stats_service import StatisticsService


class HistoryService:
    """Build the display-ready history where templates replace raw entries."""

    def __init__(
        self,
        workout_repo: WorkoutDataRepository,
        template_repo: CustomWorkoutRepository,
        stats: StatisticsService | None = None,
    ) -> None:
        self.workouts = workout_repo
        self.templates = template_repo
        self.stats = stats or StatisticsService(workout_repo)

    @staticmethod
    def resolve(grouped: Dict[str, List[dict]], templates: List[dict]) -> dict:
        """Merge ``grouped`` with the snapshots held by ``templates``.

        Any exercise that a template dated ``d`` contains is removed from the
        raw grouping for ``d`` and replaced by the template's own snapshot.
        When several templates share a date, the first one in ``templates``
        provides both the date's label and any exercise they have in common.
        """
        covered: Dict[str, set] = {}
        by_date: Dict[str, str] = {}
        for template in templates:
            by_date.setdefault(template["date"], template["name"])
            names = covered.setdefault(template["date"], set())
            for exercise in template.get("exercises", []):
                names.add(exercise["exerciseName"])

        workouts: Dict[str, List[dict]] = {}
        for date, entries in grouped.items():
            skip = covered.get(date, set())
            workouts[date] = [
                copy.deepcopy(e) for e in entries if e["exerciseName"] not in skip
            ]

        added: Dict[str, set] = {}
        for template in templates:
            date = template["date"]
            day = workouts.setdefault(date, [])
            seen = added.setdefault(date, set())
            for exercise in template.get("exercises", []):
                name = exercise["exerciseName"]
                if name in seen:
                    continue
                seen.add(name)
                day.append(
                    {
                        "exerciseName": name,
                        "sets": SetNormalizer.normalize_sets(exercise.get("sets", [])),
                        "volume": exercise.get("volume", 0),
                    }
                )
        return {"workouts": workouts, "customWorkoutsByDate": by_date}

    def view(self) -> dict:
        return self.resolve(self.stats.grouped(), self.templates.load())

    def sorted_dates(self, view: Optional[dict] = None) -> List[str]:
        view = view if view is not None else self.view()
        return StatisticsService.sorted_dates(view["workouts"])

    def day_summary(self, date: str, view: Optional[dict] = None) -> dict:
        """Return entries, totals and headline for one history day."""
        view = view if view is not None else self.view()
        if date not in view["workouts"]:
            raise ValueError(f"no workouts on {date}")
        entries = view["workouts"][date]
        top = StatisticsService.top_exercise(entries)
        return {
            "date": date,
            "entries": entries,
            "stats": StatisticsService.day_stats(entries),
            "headline": f"{top} day" if top else None,
            "customWorkout": view["customWorkoutsByDate"].get(date),
        }

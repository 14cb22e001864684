from __future__ import annotations

import datetime
from typing import List, Optional

from db import (
    CustomExerciseRepository,
    CustomWorkoutRepository,
    SQLiteDocumentStore,
    WorkoutDataRepository,
)
from history_service import HistoryService
from ledger_service import LedgerService
from stats_service import StatisticsService
from template_service import TemplateService
from transfer_service import TransferService


class WorkoutLedger:
    """Wires the repositories and services around one document store.

    All three documents are loaded once on construction. Each mutating call
    writes through to the store and then recomputes the derived state
    (``last_dates``, ``history`` and ``templates``) before it returns.
    """

    def __init__(self, store=None, db_path: str = "workout.db") -> None:
        self.store = store if store is not None else SQLiteDocumentStore(db_path)
        self.workout_data = WorkoutDataRepository(self.store)
        self.custom_workouts = CustomWorkoutRepository(self.store)
        self.custom_exercises = CustomExerciseRepository(self.store)
        self.statistics = StatisticsService(self.workout_data)
        self.history_service = HistoryService(
            self.workout_data, self.custom_workouts, self.statistics
        )
        self.template_service = TemplateService(self.custom_workouts, self.history_service)
        self.ledger = LedgerService(self.workout_data, self.custom_exercises)
        self.transfer = TransferService(self.workout_data)
        self.refresh()

    def refresh(self) -> None:
        self.data = self.workout_data.load()
        self.templates_raw = self.custom_workouts.load()
        self.exercises = self.custom_exercises.load()
        grouped = StatisticsService.group_by_date(self.data)
        self.history = HistoryService.resolve(grouped, self.templates_raw)
        self.last_dates = StatisticsService.last_workout_dates(self.data)
        self.templates = self.template_service.templates_with_last_performed(self.history)

    def sorted_dates(self) -> List[str]:
        return StatisticsService.sorted_dates(self.history["workouts"])

    def day_summary(self, date: str) -> dict:
        return self.history_service.day_summary(date, self.history)

    def exercise_history(self, exercise_name: str) -> dict:
        return StatisticsService.exercise_history(self.data, exercise_name)

    def log_set(
        self,
        exercise_name: str,
        date: "str | datetime.date",
        reps: float,
        weight: float,
        notes: str = "",
        weight_step: str = "5",
    ) -> dict:
        entry = self.ledger.log_set(exercise_name, date, reps, weight, notes, weight_step)
        self.refresh()
        return entry

    def edit_set(
        self,
        exercise_name: str,
        date: str,
        index: int,
        reps: float,
        weight: float,
        notes: Optional[str] = None,
    ) -> dict:
        entry = self.ledger.edit_set(exercise_name, date, index, reps, weight, notes)
        self.refresh()
        return entry

    def remove_set(self, exercise_name: str, date: str, index: int) -> None:
        self.ledger.remove_set(exercise_name, date, index)
        self.refresh()

    def delete_entry(self, exercise_name: str, date: str) -> None:
        self.ledger.delete_entry(exercise_name, date)
        self.refresh()

    def delete_day(self, date: str) -> int:
        removed = self.ledger.delete_day(date)
        self.refresh()
        return removed

    def add_custom_exercise(self, name: str) -> bool:
        added = self.ledger.add_custom_exercise(name)
        self.refresh()
        return added

    def save_custom_workout(
        self, name: str, date: str, entries: Optional[List[dict]] = None
    ) -> Optional[dict]:
        if entries is None and name and name.strip():
            if date not in self.history["workouts"]:
                raise ValueError(f"no workouts on {date}")
            entries = self.history["workouts"][date]
        workout = self.template_service.save_custom_workout(name, date, entries)
        self.refresh()
        return workout

    def rename_template(self, old_name: str, new_name: str) -> int:
        count = self.template_service.rename(old_name, new_name)
        self.refresh()
        return count

    def delete_template(self, name: str) -> int:
        count = self.template_service.delete(name)
        self.refresh()
        return count

    def add_template(self, workout: dict) -> dict:
        added = self.template_service.add_template(workout)
        self.refresh()
        return added

    def export_all(self, today: Optional[datetime.date] = None):
        return self.transfer.export_all(today)

    def import_all(self, contents: str) -> dict:
        data = self.transfer.import_all(contents)
        self.refresh()
        return data

    async def import_file(self, path: str) -> dict:
        data = await self.transfer.import_file(path)
        self.refresh()
        return data

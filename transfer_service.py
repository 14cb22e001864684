from __future__ import annotations

import asyncio
import datetime
import json
import logging
import os
from typing import Optional

from db import WorkoutDataRepository

logger = logging.getLogger(__name__)


class TransferService:
    """Back up and restore the ledger as a single JSON document."""

    FILENAME_TEMPLATE = "workout-data-{date}.json"

    def __init__(self, workout_repo: WorkoutDataRepository) -> None:
        self.workouts = workout_repo

    @classmethod
    def export_filename(cls, today: Optional[datetime.date] = None) -> str:
        today = today or datetime.date.today()
        return cls.FILENAME_TEMPLATE.format(date=today.isoformat())

    def export_all(
        self, today: Optional[datetime.date] = None
    ) -> Optional[tuple[str, str]]:
        """Return ``(filename, json_text)`` or ``None`` if nothing was saved."""
        raw = self.workouts.load_raw_text()
        if raw is None:
            logger.info("No workout data to export")
            return None
        return self.export_filename(today), raw

    def export_to_file(
        self, directory: str = ".", today: Optional[datetime.date] = None
    ) -> Optional[str]:
        exported = self.export_all(today)
        if exported is None:
            return None
        filename, data = exported
        path = os.path.join(directory, filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(data)
        logger.info("Exported workout data to %s", path)
        return path

    def import_all(self, contents: str) -> dict:
        """Replace the stored ledger with the one encoded in ``contents``.

        Raises ``ValueError`` when ``contents`` is not JSON or not a ledger
        of day entries; the stored ledger is left as it was in that case.
        """
        try:
            parsed = json.loads(contents)
        except (TypeError, json.JSONDecodeError) as e:
            logger.warning("Rejected import: %s", e)
            raise ValueError("Error reading file") from e
        if not isinstance(parsed, dict):
            logger.warning("Rejected import: top level is %s", type(parsed).__name__)
            raise ValueError("Invalid data format")
        if not WorkoutDataRepository.is_valid_document(parsed):
            logger.warning("Rejected import: entries are not day entries with sets")
            raise ValueError("Invalid data format")
        self.workouts.save(parsed)
        logger.info("Imported workout data for %d exercises", len(parsed))
        return parsed

    async def import_file(self, path: str) -> dict:
        """Read ``path`` without blocking the event loop, then import it."""
        try:
            contents = await asyncio.to_thread(self._read_text, path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read import file %s: %s", path, e)
            raise ValueError("Error reading file") from e
        return self.import_all(contents)

    @staticmethod
    def _read_text(path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

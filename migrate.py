import logging
import sys

from algorithms import SetNormalizer
from db import SQLiteDocumentStore, WorkoutDataRepository

logger = logging.getLogger(__name__)


def migrate(db_path='workout.db'):
    """Rewrite legacy string sets as ``{"value", "notes"}`` records.

    Returns the number of sets converted.
    """
    repo = WorkoutDataRepository(SQLiteDocumentStore(db_path))
    ledger = repo.load()
    converted = 0
    for entries in ledger.values():
        for entry in entries:
            sets = entry.get('sets', [])
            legacy = sum(1 for s in sets if SetNormalizer.is_legacy(s))
            if legacy:
                entry['sets'] = SetNormalizer.normalize_sets(sets)
                converted += legacy
    if converted:
        repo.save(ledger)
    logger.info("Converted %d legacy sets in %s", converted, db_path)
    return converted

if __name__ == '__main__':
    path = sys.argv[1] if len(sys.argv) > 1 else 'workout.db'
    migrate(path)

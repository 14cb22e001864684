import os
import sys
import json
import datetime

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import MemoryDocumentStore, SQLiteDocumentStore
from transfer_service import TransferService
from workout_ledger import WorkoutLedger

MIXED = {
    "Squat": [
        {
            "exerciseName": "Squat",
            "date": "01.03",
            "sets": ["5x100", {"value": "5x105", "notes": "belt"}],
            "defaultValues": {"reps": 5, "weight": 100, "weightStep": "5"},
        }
    ],
    "Curl": [{"exerciseName": "Curl", "date": "02.03", "sets": ["12x15"]}],
}


def test_export_filename():
    assert (
        TransferService.export_filename(datetime.date(2024, 3, 5))
        == "workout-data-2024-03-05.json"
    )


def test_export_without_data():
    ledger = WorkoutLedger(MemoryDocumentStore())
    assert ledger.export_all() is None


def test_roundtrip_keeps_legacy_sets(tmp_path):
    source = WorkoutLedger(MemoryDocumentStore())
    source.import_all(json.dumps(MIXED))
    filename, raw = source.export_all(datetime.date(2024, 3, 5))
    assert filename == "workout-data-2024-03-05.json"

    target = WorkoutLedger(SQLiteDocumentStore(str(tmp_path / "target.db")))
    target.import_all(raw)
    assert target.data == MIXED
    assert json.loads(target.export_all()[1]) == MIXED
    assert target.last_dates == {"Squat": "01.03", "Curl": "02.03"}


@pytest.mark.parametrize(
    "contents,message",
    [
        ("{not json", "Error reading file"),
        (None, "Error reading file"),
        ("[1, 2]", "Invalid data format"),
        ("null", "Invalid data format"),
        ("42", "Invalid data format"),
        ('{"Bench Press": 5}', "Invalid data format"),
        ('{"Bench Press": [{"date": "01.03"}]}', "Invalid data format"),
        ('{"Bench Press": [{"date": "01.03", "sets": [5]}]}', "Invalid data format"),
    ],
)
def test_invalid_import_leaves_state(contents, message):
    store = MemoryDocumentStore({"workoutData": json.dumps(MIXED)})
    ledger = WorkoutLedger(store)
    with pytest.raises(ValueError, match=message):
        ledger.import_all(contents)
    assert json.loads(store.get("workoutData")) == MIXED
    assert ledger.data == MIXED


def test_import_keeps_templates():
    store = MemoryDocumentStore(
        {"customWorkouts": json.dumps([{"name": "Push", "date": "01.03", "exercises": []}])}
    )
    ledger = WorkoutLedger(store)
    ledger.import_all(json.dumps(MIXED))
    assert [t["name"] for t in ledger.templates] == ["Push"]


def test_export_to_file(tmp_path):
    ledger = WorkoutLedger(MemoryDocumentStore())
    ledger.import_all(json.dumps(MIXED))
    path = ledger.transfer.export_to_file(str(tmp_path), datetime.date(2024, 1, 2))
    assert os.path.basename(path) == "workout-data-2024-01-02.json"
    with open(path, "r", encoding="utf-8") as f:
        assert json.load(f) == MIXED


@pytest.mark.asyncio
async def test_import_file(tmp_path):
    path = tmp_path / "backup.json"
    path.write_text(json.dumps(MIXED), encoding="utf-8")
    ledger = WorkoutLedger(MemoryDocumentStore())
    data = await ledger.import_file(str(path))
    assert data == MIXED
    assert ledger.data == MIXED


@pytest.mark.asyncio
async def test_import_missing_file(tmp_path):
    ledger = WorkoutLedger(MemoryDocumentStore())
    with pytest.raises(ValueError, match="Error reading file"):
        await ledger.import_file(str(tmp_path / "missing.json"))
    assert ledger.data == {}


def test_rejected_import_keeps_ledger_loadable():
    store = MemoryDocumentStore()
    ledger = WorkoutLedger(store)
    with pytest.raises(ValueError, match="Invalid data format"):
        ledger.import_all('{"Bench Press": 5}')
    assert store.get("workoutData") is None
    assert WorkoutLedger(store).data == {}

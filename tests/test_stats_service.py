import os
import sys
import unittest
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from stats_service import StatisticsService


LEDGER = {
    "Bench Press": [
        {
            "exerciseName": "Bench Press",
            "date": "01.03",
            "sets": [{"value": "10x50", "notes": ""}, "12x25"],
            "defaultValues": {"reps": 10, "weight": 50, "weightStep": "2.5"},
        },
        {
            "exerciseName": "Bench Press",
            "date": "15.06",
            "sets": [{"value": "8x60", "notes": "paused"}],
        },
    ],
    "Squat": [
        {"exerciseName": "Squat", "date": "01.03", "sets": ["5x100", "5x100", "5x100"]},
    ],
}


class StatisticsServiceTest(unittest.TestCase):
    def test_volume(self) -> None:
        sets = [{"value": "10x50", "notes": ""}, {"value": "12x25", "notes": ""}]
        self.assertEqual(StatisticsService.calculate_volume(sets), 800)
        self.assertEqual(StatisticsService.calculate_volume([]), 0)
        self.assertEqual(StatisticsService.calculate_volume(["10x50", "12x25"]), 800)

    def test_volume_ignores_malformed_values(self) -> None:
        sets = [{"value": "10x50"}, {"value": "oops"}]
        with self.assertLogs("stats_service", level="WARNING"):
            self.assertEqual(StatisticsService.calculate_volume(sets), 500)

    def test_group_by_date(self) -> None:
        grouped = StatisticsService.group_by_date(LEDGER)
        self.assertEqual(set(grouped), {"01.03", "15.06"})
        names = [e["exerciseName"] for e in grouped["01.03"]]
        self.assertEqual(names, ["Bench Press", "Squat"])
        bench = grouped["01.03"][0]
        self.assertEqual(bench["volume"], 800)
        self.assertEqual(
            bench["sets"][1], {"value": "12x25", "notes": ""}
        )
        self.assertEqual(grouped["01.03"][1]["volume"], 1500)

    def test_last_workout_dates(self) -> None:
        self.assertEqual(
            StatisticsService.last_workout_dates(LEDGER),
            {"Bench Press": "15.06", "Squat": "01.03"},
        )

    def test_day_stats_and_top_exercise(self) -> None:
        entries = StatisticsService.group_by_date(LEDGER)["01.03"]
        self.assertEqual(
            StatisticsService.day_stats(entries),
            {"exerciseCount": 2, "totalSets": 5, "totalWeight": 2300},
        )
        self.assertEqual(StatisticsService.top_exercise(entries), "Squat")
        self.assertIsNone(StatisticsService.top_exercise([]))

    def test_top_exercise_tie_keeps_first(self) -> None:
        entries = [
            {"exerciseName": "Curl", "sets": [], "volume": 100},
            {"exerciseName": "Dip", "sets": [], "volume": 100},
        ]
        self.assertEqual(StatisticsService.top_exercise(entries), "Curl")

    def test_sorted_dates(self) -> None:
        grouped = StatisticsService.group_by_date(LEDGER)
        self.assertEqual(StatisticsService.sorted_dates(grouped), ["15.06", "01.03"])

    def test_exercise_history(self) -> None:
        history = StatisticsService.exercise_history(LEDGER, "Bench Press")
        self.assertEqual(history["maxSets"], 2)
        self.assertEqual(history["rows"][0]["sets"], ["10x50", "12x25"])
        self.assertEqual(history["rows"][1]["notes"], ["paused"])
        self.assertEqual([r["isLatest"] for r in history["rows"]], [False, True])
        self.assertEqual(history["defaultValues"]["weightStep"], "2.5")

    def test_exercise_history_unknown(self) -> None:
        history = StatisticsService.exercise_history(LEDGER, "Deadlift")
        self.assertEqual(history["rows"], [])
        self.assertEqual(history["maxSets"], 0)
        self.assertIsNone(history["defaultValues"])


if __name__ == "__main__":
    unittest.main()

import argparse
import datetime
import json
import logging
import shutil
import sys

from settings_schema import load_settings, update_settings
from workout_ledger import WorkoutLedger

logger = logging.getLogger(__name__)


def export_data(db_path: str, output_dir: str = ".") -> str | None:
    ledger = WorkoutLedger(db_path=db_path)
    path = ledger.transfer.export_to_file(output_dir)
    if path is None:
        print("No workout data to export")
    return path


def import_data(src: str, db_path: str) -> int:
    ledger = WorkoutLedger(db_path=db_path)
    with open(src, "r", encoding="utf-8") as f:
        contents = f.read()
    data = ledger.import_all(contents)
    return len(data)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str) -> None:
    """Populate the ledger with a demo day if it is empty."""
    ledger = WorkoutLedger(db_path=db_path)
    if ledger.data:
        print("Ledger already contains workouts")
        return
    today = datetime.date.today()
    ledger.log_set("Bench Press", today, 5, 100)
    ledger.log_set("Bench Press", today, 5, 105)
    ledger.log_set("Barbell Row", today, 8, 70)
    ledger.save_custom_workout("Demo Push", ledger.sorted_dates()[0])
    print("Demo data inserted")


def print_stats(db_path: str) -> None:
    ledger = WorkoutLedger(db_path=db_path)
    for date in ledger.sorted_dates():
        summary = ledger.day_summary(date)
        stats = summary["stats"]
        print(
            f"{date}  {summary['headline'] or '-'}  "
            f"exercises={stats['exerciseCount']} sets={stats['totalSets']} "
            f"volume={stats['totalWeight']}"
        )
    print(json.dumps(ledger.last_dates, indent=2))


def configure(settings_path: str | None, assignments: list[str]) -> dict:
    """Apply ``key=value`` assignments to the settings file."""
    changes = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"expected key=value, got {item!r}")
        changes[key.strip()] = value
    settings = update_settings(changes, settings_path) if changes else load_settings(settings_path)
    shown = dict(settings)
    if shown["coach_api_key"]:
        shown["coach_api_key"] = "***"
    print(json.dumps(shown, indent=2))
    return settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Workout ledger utilities")
    parser.add_argument("--settings")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db")
    exp.add_argument("--out", default=".")

    imp = sub.add_parser("import")
    imp.add_argument("--in", dest="src", required=True)
    imp.add_argument("--db")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db")

    stats = sub.add_parser("stats")
    stats.add_argument("--db")

    cfg = sub.add_parser("config")
    cfg.add_argument("--set", dest="assignments", action="append", default=[])

    args = parser.parse_args(argv)
    settings = load_settings(args.settings)
    logging.basicConfig(
        level=getattr(logging, str(settings["log_level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "config":
        try:
            configure(args.settings, args.assignments)
        except ValueError as e:
            logger.error("Invalid settings: %s", e)
            sys.exit(1)
        return

    db_path = args.db or settings["db_path"]

    if args.cmd == "export":
        export_data(db_path, args.out)
    elif args.cmd == "import":
        try:
            count = import_data(args.src, db_path)
        except (OSError, ValueError) as e:
            logger.error("Import failed: %s", e)
            sys.exit(1)
        print(f"Imported {count} exercises")
    elif args.cmd == "backup":
        backup_db(db_path, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, db_path)
    elif args.cmd == "demo":
        demo_data(db_path)
    elif args.cmd == "stats":
        print_stats(db_path)


if __name__ == "__main__":
    main()

import argparse
import shutil
from dataclasses import asdict

from loguru import logger

from algorithms import WeightConverter, WorkoutCalculations
from db import Database, SettingsRepository, WorkoutSessionRepository
from met_service import METValueService
from models import DaySchedule, PlanExercise
from pace_service import Difficulty, Equipment, PaceService
from rest_api import SyncAPI
from session_service import Phase, WorkoutSessionMachine

DEMO_REP_SET_SECONDS = 30


def export_sessions(db_path: str, fmt: str, output_dir: str = ".") -> list[str]:
    sessions = WorkoutSessionRepository(db_path)
    written = []
    for sid, *_ in sessions.fetch_all_sessions(descending=False):
        if fmt == "csv":
            data = sessions.export_session_csv(sid)
            out_path = f"{output_dir}/session_{sid}.csv"
        else:
            data = sessions.export_session_json(sid)
            out_path = f"{output_dir}/session_{sid}.json"
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(data)
        written.append(out_path)
    logger.info(f"Exported {len(written)} sessions to {output_dir}")
    return written


def backup_db(db_path: str, backup_path: str) -> None:
    Database(db_path).vacuum()
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


DEMO_DAY = DaySchedule(
    "月曜日",
    (
        PlanExercise("バーベルスクワット", sets="3セット", reps="8-10回", weight="60kg"),
        PlanExercise("ダンベルベンチプレス", sets="3セット", reps="10回", weight="20kg"),
        PlanExercise("プランク", sets="2セット", duration="45秒", notes="体幹を固める・腰を落とさない"),
    ),
)


def demo_data(db_path: str, yaml_path: str) -> None:
    """Run the demo day through the session machine and store the result if empty."""
    api = SyncAPI(db_path=db_path, yaml_path=yaml_path)
    if api.sessions.fetch_all_sessions():
        print("Database already contains sessions")
        return
    api.plans.create(
        "Demo plan",
        {"weekly_schedule": [{"day": DEMO_DAY.day, "exercises": [asdict(e) for e in DEMO_DAY.exercises]}]},
    )
    machine = WorkoutSessionMachine(
        DEMO_DAY, api.pace, rest_seconds=api.settings.get_int("rest_seconds", 30)
    )
    clock = 0.0
    state = machine.start(now=clock)
    while not state.is_finished:
        if not state.running:
            state = machine.toggle(state)
        if (
            state.phase is Phase.ACTIVE
            and not machine.is_duration_based(state)
            and machine.set_elapsed_seconds(state, clock) >= DEMO_REP_SET_SECONDS
        ):
            state = machine.complete_set(state, now=clock)
            continue
        clock += 1.0
        state = machine.tick(state, now=clock)
    sid = api.records.save_finished_state(DEMO_DAY, state, feedback="ちょうどいい")
    print(f"Demo session {sid} inserted")


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    sub = parser.add_subparsers(dest="cmd", required=True)

    mets = sub.add_parser("mets")
    mets.add_argument("name")
    mets.add_argument("--duration", action="store_true")

    pace = sub.add_parser("pace")
    pace.add_argument("name")
    pace.add_argument("--db", default="sync.db")
    pace.add_argument("--yaml", default="settings.yaml")
    pace.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="normal")
    pace.add_argument("--equipment", choices=[e.value for e in Equipment], default="other")

    est = sub.add_parser("estimate")
    est.add_argument("--sets", default="3")
    est.add_argument("--reps", default="10")
    est.add_argument("--duration", default="")
    est.add_argument("--name", default="")
    est.add_argument("--weight", type=float, default=60.0)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="sync.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="json")
    exp.add_argument("--out", default=".")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="sync.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="sync.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="sync.db")
    demo.add_argument("--yaml", default="settings.yaml")

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--unit", choices=["kg", "lbs"], required=True)

    args = parser.parse_args()

    if args.cmd == "mets":
        print(METValueService().lookup(args.name, is_duration_based=args.duration))
    elif args.cmd == "pace":
        service = PaceService(SettingsRepository(args.db, args.yaml))
        profile = service.pace(args.name, Difficulty(args.difficulty), Equipment(args.equipment))
        print(
            f"{service.lexicon.category(args.name)}: "
            f"{profile.seconds_per_rep:.2f}s/rep, rest {profile.rest_seconds}s"
        )
    elif args.cmd == "estimate":
        ex = PlanExercise(args.name, sets=args.sets, reps=args.reps, duration=args.duration)
        minutes = WorkoutCalculations.estimated_duration([ex])
        if args.name:
            met = METValueService().lookup(args.name, is_duration_based=ex.is_duration_based)
            kcal = WorkoutCalculations.calories_from_mets(met, args.weight, minutes)
        else:
            kcal = WorkoutCalculations.estimated_calories(minutes)
        print(f"{minutes} min, {kcal} kcal")
    elif args.cmd == "export":
        export_sessions(args.db, args.fmt, args.out)
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "convert":
        if args.unit == "kg":
            print(f"{args.weight} kg = {WeightConverter.kg_to_lbs(args.weight)} lbs")
        else:
            print(f"{args.weight} lbs = {WeightConverter.lbs_to_kg(args.weight)} kg")


if __name__ == "__main__":
    main()

import datetime
from typing import Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Request, Response

from coach_service import CoachService
from db import SQLiteDocumentStore
from settings_schema import load_settings
from template_service import TemplateService
from workout_ledger import WorkoutLedger


class LedgerAPI:
    """Provides REST endpoints for workout logging."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        yaml_path: Optional[str] = None,
        *,
        store=None,
        coach_session=None,
    ) -> None:
        self.settings = load_settings(yaml_path)
        self.db_path = db_path or self.settings["db_path"]
        self.ledger = WorkoutLedger(
            store if store is not None else SQLiteDocumentStore(self.db_path)
        )
        self.coach = CoachService(
            self.ledger,
            url=self.settings["coach_url"],
            api_key=self.settings["coach_api_key"],
            timeout=self.settings["coach_timeout"],
            session=coach_session,
        )
        self.app = FastAPI(
            title="Workout Ledger API",
            description="REST API for workout logging and history",
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        exercises_router = APIRouter(prefix="/exercises", tags=["Exercises"])
        history_router = APIRouter(prefix="/history", tags=["History"])
        templates_router = APIRouter(prefix="/templates", tags=["Templates"])
        coach_router = APIRouter(prefix="/coach", tags=["Coach"])

        @self.app.get("/health")
        def health():
            return {"status": "ok"}

        @exercises_router.get("")
        def list_exercises():
            return self.ledger.ledger.exercise_options()

        @exercises_router.post("/custom")
        def add_custom_exercise(name: str):
            try:
                added = self.ledger.add_custom_exercise(name)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"added": added}

        @exercises_router.get("/last_dates")
        def last_dates():
            return self.ledger.last_dates

        @exercises_router.get("/{name}/history")
        def exercise_history(name: str):
            return self.ledger.exercise_history(name)

        @exercises_router.get("/{name}/defaults")
        def exercise_defaults(name: str):
            values = self.ledger.ledger.default_values(name)
            if values is None:
                return {
                    "reps": self.settings["default_reps"],
                    "weight": self.settings["default_weight"],
                    "weightStep": self.settings["default_weight_step"],
                }
            return values

        @exercises_router.post("/{name}/sets")
        def log_set(
            name: str,
            reps: float,
            weight: float,
            date: Optional[str] = None,
            notes: str = "",
            weight_step: Optional[str] = None,
        ):
            try:
                entry = self.ledger.log_set(
                    name,
                    date or datetime.date.today(),
                    reps,
                    weight,
                    notes,
                    weight_step or self.settings["default_weight_step"],
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return entry

        @exercises_router.put("/{name}/sets/{index}")
        def edit_set(
            name: str,
            index: int,
            date: str,
            reps: float,
            weight: float,
            notes: Optional[str] = None,
        ):
            try:
                return self.ledger.edit_set(name, date, index, reps, weight, notes)
            except IndexError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.delete("/{name}/sets/{index}")
        def remove_set(name: str, index: int, date: str):
            try:
                self.ledger.remove_set(name, date, index)
            except IndexError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "deleted"}

        @exercises_router.delete("/{name}/entries/{date}")
        def delete_entry(name: str, date: str):
            try:
                self.ledger.delete_entry(name, date)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @history_router.get("")
        def history():
            return {
                "dates": self.ledger.sorted_dates(),
                "workouts": self.ledger.history["workouts"],
                "customWorkoutsByDate": self.ledger.history["customWorkoutsByDate"],
            }

        @history_router.get("/{date}")
        def history_day(date: str):
            try:
                return self.ledger.day_summary(date)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @history_router.delete("/{date}")
        def delete_day(date: str):
            removed = self.ledger.delete_day(date)
            return {"removed": removed}

        @templates_router.get("")
        def list_templates():
            return self.ledger.templates

        @templates_router.post("")
        def save_template(name: str, date: str):
            try:
                workout = self.ledger.save_custom_workout(name, date)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"saved": workout is not None, "workout": workout}

        @templates_router.put("/rename")
        def rename_template(old_name: str, new_name: str):
            return {"renamed": self.ledger.rename_template(old_name, new_name)}

        @templates_router.delete("")
        def delete_template(name: str):
            return {"deleted": self.ledger.delete_template(name)}

        @templates_router.get("/{template_index}/exercises/{index}")
        def template_exercise(template_index: int, index: int):
            templates = self.ledger.templates
            if template_index < 0 or template_index >= len(templates):
                raise HTTPException(status_code=404, detail="template not found")
            try:
                return TemplateService.exercise_info(templates[template_index], index)
            except IndexError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/export")
        def export_data():
            exported = self.ledger.export_all()
            if exported is None:
                raise HTTPException(status_code=404, detail="No workout data to export")
            filename, data = exported
            return Response(
                content=data,
                media_type="application/json",
                headers={"Content-Disposition": f"attachment; filename={filename}"},
            )

        @self.app.post("/import")
        async def import_data(request: Request):
            try:
                contents = (await request.body()).decode("utf-8")
                data = self.ledger.import_all(contents)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"exercises": len(data)}

        @coach_router.get("/messages")
        def coach_messages():
            return self.coach.transcript

        @coach_router.post("/messages")
        def coach_send(text: str = Body(..., embed=True)):
            reply = self.coach.send(text)
            if reply is None:
                raise HTTPException(status_code=400, detail="message required")
            return reply

        @coach_router.post("/messages/{index}/save")
        def coach_save(index: int):
            try:
                template = self.coach.save_workout(index)
            except IndexError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"saved": template is not None, "workout": template}

        self.app.include_router(exercises_router)
        self.app.include_router(history_router)
        self.app.include_router(templates_router)
        self.app.include_router(coach_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(LedgerAPI().app)

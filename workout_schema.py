import datetime
from typing import List

from pydantic import BaseModel, ValidationError, field_validator

from algorithms import SetNormalizer


class SetSchema(BaseModel):
    value: str
    notes: str = ""

    @field_validator("value")
    @classmethod
    def _rxw(cls, v: str) -> str:
        if not SetNormalizer.is_valid_value(v):
            raise ValueError("set value must use the RxW format, e.g. 10x50")
        return v


class ExerciseSchema(BaseModel):
    exerciseName: str
    sets: List[SetSchema]
    volume: float


class CustomWorkoutSchema(BaseModel):
    name: str
    date: str
    exercises: List[ExerciseSchema]
    lastPerformed: str = ""

    @field_validator("date", "lastPerformed")
    @classmethod
    def _iso_or_empty(cls, v: str) -> str:
        if v:
            datetime.date.fromisoformat(v)
        return v


def validate_custom_workout(data: dict) -> dict:
    """Return ``data`` as a plain dict if it matches the workout schema."""
    if not isinstance(data, dict):
        raise ValueError("workout must be a JSON object")
    try:
        return CustomWorkoutSchema(**data).model_dump()
    except ValidationError as e:
        raise ValueError(str(e))

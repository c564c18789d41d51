"""Request bodies for the JSON API."""

from datetime import date, time

from pydantic import BaseModel, Field

from diet_tracker.domain.meals import MealStatus


class MealCreate(BaseModel):
    """New meal in the plan."""

    name: str = Field(min_length=1)
    time_of_day: time
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fats: int = Field(default=0, ge=0)
    calories: int = Field(default=0, ge=0)
    description: str = ""


class MealUpdate(BaseModel):
    """Partial meal update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1)
    time_of_day: time | None = None
    protein: int | None = Field(default=None, ge=0)
    carbs: int | None = Field(default=None, ge=0)
    fats: int | None = Field(default=None, ge=0)
    calories: int | None = Field(default=None, ge=0)
    description: str | None = None


class ComponentCreate(BaseModel):
    """New component of a meal."""

    name: str = Field(min_length=1)
    quantity: str = ""
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fats: int = Field(default=0, ge=0)


class ComponentUpdate(BaseModel):
    """Partial component update."""

    name: str | None = Field(default=None, min_length=1)
    quantity: str | None = None
    protein: int | None = Field(default=None, ge=0)
    carbs: int | None = Field(default=None, ge=0)
    fats: int | None = Field(default=None, ge=0)


class StatusUpdate(BaseModel):
    """Status change for a meal on a date."""

    status: MealStatus
    notes: str | None = None


class ManualEntry(BaseModel):
    """User-entered macros replacing the catalog values for one day."""

    calories: int | None = Field(default=None, ge=0)
    protein: int | None = Field(default=None, ge=0)
    carbs: int | None = Field(default=None, ge=0)
    fats: int | None = Field(default=None, ge=0)


class WeightCreate(BaseModel):
    """Body weight sample."""

    weight: float = Field(gt=0)
    day: date | None = None
    notes: str = ""


class ProfileUpdate(BaseModel):
    """Partial profile update."""

    name: str | None = None
    current_weight: float | None = Field(default=None, ge=0)
    goal_weight: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)
    age: int | None = Field(default=None, ge=0)
    gender: str | None = None
    activity_level: str | None = None

"""Goal payloads parsed once at the API boundary.

The remote API sends numeric-looking fields as strings for some goals and as
numbers for others, and the plan generator occasionally omits them. Those
fields are coerced leniently here (anything unusable becomes ``None``) so the
formatter only ever sees ``float | None``.

The generated ``planning`` block is free-form text from a language model:
null lists read as empty, and a block that still does not fit is dropped with
a warning so the rest of the goal stays usable. A payload that is not an
object is reported as ``GoalValidationError``.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = (
    "patrimony",
    "my_patrimony",
    "monthly_aport",
    "dividends",
    "rate",
    "time_desired",
)


class GoalValidationError(ValueError):
    """Raised when a goal payload does not have the expected structure."""


def to_number(value: Any) -> float | None:
    """Coerce a wire value to float, returning None for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _empty_if_none(value: Any) -> Any:
    return [] if value is None else value


class Step(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    # the generator sends 1 as often as "Passo 1"
    step: int | str | None = None
    description: str | None = None
    actions: list[str] = Field(default_factory=list)
    timeline: str | None = None

    @field_validator("actions", mode="before")
    @classmethod
    def _null_actions(cls, value: Any) -> Any:
        return _empty_if_none(value)


class Resource(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    description: str | None = None
    resource: str | None = None


class CurrentSituation(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    income: str | None = None
    expenses: str | None = None
    savings: str | None = None


class Planning(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    objective: str | None = None
    steps: list[Step] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    savings_tips: list[str] = Field(default_factory=list)
    contingency_plan: list[str] = Field(default_factory=list)
    additional_income_sources: list[str] = Field(default_factory=list)
    monitoring_adjustments: list[str] = Field(default_factory=list)
    current_situation: CurrentSituation | None = None

    @field_validator(
        "steps",
        "resources",
        "savings_tips",
        "contingency_plan",
        "additional_income_sources",
        "monitoring_adjustments",
        mode="before",
    )
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _empty_if_none(value)


class Goal(BaseModel):
    """One goal as the screens see it. Unknown server fields are kept as extras."""

    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str | None = None
    name: str | None = None
    patrimony: float | None = None
    my_patrimony: float | None = None
    monthly_aport: float | None = None
    dividends: float | None = None
    rate: float | None = None
    status: bool = False
    time_desired: float | None = None
    type_goal: Any = None
    planning: Planning | None = None
    summary: str | None = None

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> float | None:
        return to_number(value)

    @field_validator("status", mode="before")
    @classmethod
    def _truthy_status(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("planning", mode="wrap")
    @classmethod
    def _droppable_planning(cls, value: Any, handler: Any) -> Planning | None:
        try:
            return handler(value)
        except ValidationError as exc:
            logger.warning("Dropping malformed planning block: %s", exc)
            return None

    @property
    def is_dividend_goal(self) -> bool:
        return bool(self.type_goal)


def parse_goal(payload: Any) -> Goal:
    """Validate one goal object received from the API."""
    if not isinstance(payload, dict):
        raise GoalValidationError("Goal payload must be a JSON object")

    try:
        return Goal.model_validate(payload)
    except ValidationError as exc:
        raise GoalValidationError(f"Invalid goal payload: {exc}") from exc


def parse_goal_lookup(payload: Any) -> Goal:
    """
    Validate the body of ``GET /api/goals/{id}``.

    The endpoint answers with an array whose first element is the goal.
    """
    if not isinstance(payload, list):
        raise GoalValidationError("Goal lookup must return a JSON array")
    if not payload:
        raise GoalValidationError("Goal not found")
    return parse_goal(payload[0])

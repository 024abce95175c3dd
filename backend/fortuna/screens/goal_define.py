"""Goal definition screen: review a generated plan, then create or rewrite it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from fortuna.api.client import FortunaClient
from fortuna.formatting import (
    DEFINE_YEARS_DECIMALS,
    format_currency,
    format_goal_type,
    format_number,
    format_percentage,
    format_planning,
    format_years,
)
from fortuna.models import Goal, GoalValidationError, parse_goal
from fortuna.screens.base import AlertSink, GoalScreen, Navigator, PlanSection
from fortuna.services import goals_service

logger = logging.getLogger(__name__)

TITLE = "Definir Meta"
SECTION_TITLE = "Resumo da Meta"
LOADING_TEXT = "Definindo meta..."

DEFINE_FAILED = "Falha ao definir a meta."
CREATE_FAILED = "Falha ao criar a meta."

CREATE_PLAN_SCREEN = "GoalCreatePlan"
REWRITE_SCREEN = "GoalCreate"


class GoalDefineView(BaseModel):
    title: str = TITLE
    section_title: str = SECTION_TITLE
    loading: bool
    loading_text: str | None = None
    name: str | None = None
    goal_type: str | None = None
    patrimony: str | None = None
    dividends: str | None = None
    my_patrimony: str | None = None
    rate: str | None = None
    time_desired: str | None = None
    planning: list[PlanSection] = Field(default_factory=list)
    summary: str | None = None
    show_full_summary: bool = False


def _parse_draft(draft: Mapping[str, Any]) -> Goal:
    # A draft typed by the user may not even have a valid plan block yet.
    try:
        return parse_goal(dict(draft))
    except GoalValidationError as exc:
        logger.warning("Draft goal could not be parsed for display: %s", exc)
        return Goal()


class GoalDefineScreen(GoalScreen):
    """
    Controller for the definition/review screen.

    The screen starts from the draft received through navigation, replaces it
    with the plan generator's answer on mount, and sends that answer (not the
    parsed view) back to the API on create.
    """

    def __init__(
        self,
        client: FortunaClient,
        navigator: Navigator,
        alerts: AlertSink,
        draft: Mapping[str, Any],
        **kwargs,
    ) -> None:
        super().__init__(client, navigator, alerts, **kwargs)
        self.draft = dict(draft)
        self.goal_data: dict[str, Any] = dict(draft)
        self.goal = _parse_draft(self.goal_data)
        self.loading = True

    async def on_mount(self) -> None:
        await self.define_goal()

    async def define_goal(self) -> None:
        try:
            self.loading = True
            result = await goals_service.define_goal(self.client, self.draft)
            if result.ok:
                self.goal_data = result.data.payload
                self.goal = result.data.goal
            else:
                self._error(DEFINE_FAILED)
        finally:
            self.loading = False

    async def create_goal(self) -> str | None:
        """Persist the reviewed goal and move on to plan creation. Returns the new id."""
        result = await goals_service.create_goal(self.client, self.goal_data)
        if not result.ok:
            self._error(result.server_message or CREATE_FAILED)
            return None

        goal_id = result.data.goal_id
        self.navigator.navigate(CREATE_PLAN_SCREEN, {"goalId": goal_id})
        return goal_id

    def rewrite_goal(self) -> None:
        self.navigator.navigate(REWRITE_SCREEN, dict(self.goal_data))

    def render(self) -> GoalDefineView:
        if self.loading:
            return GoalDefineView(loading=True, loading_text=LOADING_TEXT)

        goal = self.goal
        return GoalDefineView(
            loading=False,
            name=goal.name,
            goal_type=format_goal_type(goal.is_dividend_goal),
            patrimony=format_currency(goal.patrimony),
            dividends=format_number(goal.dividends),
            my_patrimony=format_currency(goal.my_patrimony),
            rate=format_percentage(goal.rate),
            time_desired=format_years(goal.time_desired, DEFINE_YEARS_DECIMALS),
            planning=[
                PlanSection(title=title, lines=lines)
                for title, lines in format_planning(goal.planning)
            ],
            summary=self._summary_text(goal.summary) or None,
            show_full_summary=self.show_full_summary,
        )

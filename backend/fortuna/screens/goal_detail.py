"""Goal detail screen: show one goal, finalize/reopen/delete it."""

from __future__ import annotations

from pydantic import BaseModel, Field

from fortuna.api.client import FortunaClient
from fortuna.formatting import (
    DETAIL_YEARS_DECIMALS,
    format_currency,
    format_number,
    format_percentage,
    format_planning,
    format_status,
    format_years,
)
from fortuna.models import Goal
from fortuna.screens.base import AlertSink, GoalScreen, Navigator, PlanSection
from fortuna.services import goals_service

TITLE = "Detalhes da Meta"
LOADING_TEXT = "Carregando detalhes da meta..."
LOAD_ERROR_TEXT = "Erro ao carregar os dados do plano de ação."

FETCH_FAILED = "Falha ao buscar os dados da meta."
DELETE_FAILED = "Falha ao deletar a meta."
FINALIZE_FAILED = "Falha ao finalizar a meta."
REOPEN_FAILED = "Falha ao reabrir a meta."
FINALIZE_OK = "Meta finalizada com sucesso."
REOPEN_OK = "Meta reaberta com sucesso."

GOAL_LIST_SCREEN = "Metas"
TRANSACTION_SCREEN = "TransactionScreen"


class GoalDetailView(BaseModel):
    title: str = TITLE
    loading: bool
    loading_text: str | None = None
    error: str | None = None
    goal_id: str
    name: str | None = None
    patrimony: str | None = None
    my_patrimony: str | None = None
    monthly_aport: str | None = None
    dividends: str | None = None
    rate: str | None = None
    status: str | None = None
    finished: bool = False
    required_contribution: str | None = None
    estimated_time: str | None = None
    planning: list[PlanSection] = Field(default_factory=list)
    summary: str | None = None
    show_full_summary: bool = False


class GoalDetailScreen(GoalScreen):
    """
    Controller for the detail screen.

    A goal handed over by the previous screen (`updated_goal`) is shown as is
    and never re-fetched on focus; otherwise every focus triggers a fetch.
    """

    def __init__(
        self,
        client: FortunaClient,
        navigator: Navigator,
        alerts: AlertSink,
        goal_id: str,
        updated_goal: Goal | None = None,
        **kwargs,
    ) -> None:
        super().__init__(client, navigator, alerts, **kwargs)
        self.goal_id = goal_id
        self.updated_goal = updated_goal
        self.goal: Goal | None = updated_goal
        self.loading = updated_goal is None

    async def on_focus(self) -> None:
        if self.updated_goal is None:
            await self.fetch_goal()

    async def fetch_goal(self) -> None:
        """Load the goal; also bound to the header's refresh control."""
        try:
            self.loading = True
            result = await goals_service.fetch_goal(self.client, self.goal_id)
            if result.ok:
                self.goal = result.data
            else:
                self._error(FETCH_FAILED)
        finally:
            self.loading = False

    async def delete_goal(self) -> None:
        try:
            self.loading = True
            result = await goals_service.delete_goal(self.client, self.goal_id)
            if not result.ok:
                self._error(DELETE_FAILED)
                return
            self.navigator.navigate(GOAL_LIST_SCREEN)
        finally:
            self.loading = False

    async def finalize_goal(self) -> None:
        try:
            self.loading = True
            result = await goals_service.finalize_goal(self.client, self.goal_id)
            if not result.ok:
                self._error(FINALIZE_FAILED)
                return
            await self.fetch_goal()
            self._success(FINALIZE_OK)
        finally:
            self.loading = False

    async def reopen_goal(self) -> None:
        try:
            self.loading = True
            result = await goals_service.reopen_goal(self.client, self.goal_id)
            if not result.ok:
                self._error(REOPEN_FAILED)
                return
            await self.fetch_goal()
            self._success(REOPEN_OK)
        finally:
            self.loading = False

    def open_deposit(self) -> None:
        """Hand the goal over to the transaction screen."""
        goal_id = self.goal.id if self.goal is not None and self.goal.id else self.goal_id
        self.navigator.navigate(TRANSACTION_SCREEN, {"goalId": goal_id})

    def render(self) -> GoalDetailView:
        if self.loading:
            return GoalDetailView(goal_id=self.goal_id, loading=True, loading_text=LOADING_TEXT)

        goal = self.goal
        if goal is None:
            return GoalDetailView(goal_id=self.goal_id, loading=False, error=LOAD_ERROR_TEXT)

        monthly_aport = format_currency(goal.monthly_aport)
        return GoalDetailView(
            goal_id=goal.id or self.goal_id,
            loading=False,
            name=goal.name,
            patrimony=format_currency(goal.patrimony),
            my_patrimony=format_currency(goal.my_patrimony),
            monthly_aport=monthly_aport,
            dividends=format_number(goal.dividends),
            rate=format_percentage(goal.rate),
            status=format_status(goal.status),
            finished=goal.status,
            required_contribution=f"Aporte Necessário: {monthly_aport}",
            estimated_time=(
                f"Tempo Estimado: {format_years(goal.time_desired, DETAIL_YEARS_DECIMALS)} anos"
            ),
            planning=[
                PlanSection(title=title, lines=lines)
                for title, lines in format_planning(goal.planning)
            ],
            summary=self._summary_text(goal.summary) or None,
            show_full_summary=self.show_full_summary,
        )

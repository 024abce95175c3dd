"""Collaborators shared by the goal screens: alerts, navigation, summary toggle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, Field

from fortuna.api.client import FortunaClient
from fortuna.config import settings
from fortuna.formatting import limit_summary

ALERT_ERROR = "Erro"
ALERT_SUCCESS = "Sucesso"


class AlertSink(Protocol):
    def alert(self, title: str, message: str) -> None: ...


class Navigator(Protocol):
    def navigate(self, screen: str, params: dict[str, Any] | None = None) -> None: ...


class AlertItem(BaseModel):
    title: str
    message: str


class NavigationItem(BaseModel):
    screen: str
    params: dict[str, Any] = Field(default_factory=dict)


class PlanSection(BaseModel):
    title: str
    lines: list[str]


@dataclass
class RecordingAlerts:
    """Collects alerts so a frontend can show them after the action returns."""

    items: list[AlertItem] = field(default_factory=list)

    def alert(self, title: str, message: str) -> None:
        self.items.append(AlertItem(title=title, message=message))


@dataclass
class RecordingNavigator:
    items: list[NavigationItem] = field(default_factory=list)

    def navigate(self, screen: str, params: dict[str, Any] | None = None) -> None:
        self.items.append(NavigationItem(screen=screen, params=dict(params or {})))


class GoalScreen:
    """
    Base controller: owns the loading flag and the "show full summary" toggle.

    Requests are not cancelled when a screen goes away, so a late response
    still writes into this object's state.
    """

    def __init__(
        self,
        client: FortunaClient,
        navigator: Navigator,
        alerts: AlertSink,
        *,
        summary_max_length: int | None = None,
    ) -> None:
        self.client = client
        self.navigator = navigator
        self.alerts = alerts
        self.loading = False
        self.show_full_summary = False
        if summary_max_length is None:
            summary_max_length = settings.summary_max_length
        self.summary_max_length = summary_max_length

    def toggle_summary(self) -> bool:
        self.show_full_summary = not self.show_full_summary
        return self.show_full_summary

    def _summary_text(self, summary: str | None) -> str:
        return limit_summary(summary, self.show_full_summary, self.summary_max_length)

    def _error(self, message: str) -> None:
        self.alerts.alert(ALERT_ERROR, message)

    def _success(self, message: str) -> None:
        self.alerts.alert(ALERT_SUCCESS, message)

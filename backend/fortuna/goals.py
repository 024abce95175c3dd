"""Screen server: runs a goal screen action and returns its rendered view model."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, Field

from .api.client import FortunaClient, static_token
from .auth import get_bearer_token
from .config import settings
from .screens.base import AlertItem, NavigationItem, RecordingAlerts, RecordingNavigator
from .screens.goal_define import GoalDefineScreen, GoalDefineView
from .screens.goal_detail import GoalDetailScreen, GoalDetailView

router = APIRouter(prefix="/screens/goals", tags=["goal-screens"])


class GoalDetailResponse(BaseModel):
    view: GoalDetailView
    alerts: list[AlertItem] = Field(default_factory=list)
    navigation: list[NavigationItem] = Field(default_factory=list)


class GoalDefineResponse(BaseModel):
    view: GoalDefineView
    # payload to post back to `/create` once the user accepts the plan
    goal_data: dict[str, Any]
    alerts: list[AlertItem] = Field(default_factory=list)
    navigation: list[NavigationItem] = Field(default_factory=list)


def get_fortuna_client(token: str = Depends(get_bearer_token)) -> FortunaClient:
    return FortunaClient(
        base_url=settings.api_base_url,
        token_provider=static_token(token),
        timeout_seconds=settings.request_timeout_seconds,
    )


def _detail_screen(
    client: FortunaClient,
    goal_id: str,
    full_summary: bool,
) -> tuple[GoalDetailScreen, RecordingAlerts, RecordingNavigator]:
    alerts = RecordingAlerts()
    navigator = RecordingNavigator()
    screen = GoalDetailScreen(client, navigator, alerts, goal_id)
    if full_summary:
        screen.toggle_summary()
    return screen, alerts, navigator


def _detail_response(
    screen: GoalDetailScreen,
    alerts: RecordingAlerts,
    navigator: RecordingNavigator,
) -> GoalDetailResponse:
    return GoalDetailResponse(
        view=screen.render(),
        alerts=alerts.items,
        navigation=navigator.items,
    )


def _define_response(
    screen: GoalDefineScreen,
    alerts: RecordingAlerts,
    navigator: RecordingNavigator,
) -> GoalDefineResponse:
    return GoalDefineResponse(
        view=screen.render(),
        goal_data=screen.goal_data,
        alerts=alerts.items,
        navigation=navigator.items,
    )


@router.post("/define", response_model=GoalDefineResponse)
async def define_goal_endpoint(
    draft: dict[str, Any] = Body(...),
    full_summary: bool = Query(default=False),
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDefineResponse:
    """Send a draft to the plan generator and render the review screen."""
    alerts = RecordingAlerts()
    navigator = RecordingNavigator()
    screen = GoalDefineScreen(client, navigator, alerts, draft)
    if full_summary:
        screen.toggle_summary()
    await screen.on_mount()
    return _define_response(screen, alerts, navigator)


@router.post("/create", response_model=GoalDefineResponse)
async def create_goal_endpoint(
    goal_data: dict[str, Any] = Body(...),
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDefineResponse:
    """
    Create the reviewed goal.

    On success the response asks the frontend to open `GoalCreatePlan`.
    """
    alerts = RecordingAlerts()
    navigator = RecordingNavigator()
    screen = GoalDefineScreen(client, navigator, alerts, goal_data)
    screen.loading = False
    await screen.create_goal()
    return _define_response(screen, alerts, navigator)


@router.get("/{goal_id}", response_model=GoalDetailResponse)
async def goal_detail_endpoint(
    goal_id: str,
    full_summary: bool = Query(default=False),
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDetailResponse:
    """Render the detail screen as it looks after gaining focus."""
    screen, alerts, navigator = _detail_screen(client, goal_id, full_summary)
    await screen.on_focus()
    return _detail_response(screen, alerts, navigator)


@router.post("/{goal_id}/refresh", response_model=GoalDetailResponse)
async def refresh_goal_endpoint(
    goal_id: str,
    full_summary: bool = Query(default=False),
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDetailResponse:
    screen, alerts, navigator = _detail_screen(client, goal_id, full_summary)
    await screen.fetch_goal()
    return _detail_response(screen, alerts, navigator)


@router.post("/{goal_id}/finalize", response_model=GoalDetailResponse)
async def finalize_goal_endpoint(
    goal_id: str,
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDetailResponse:
    screen, alerts, navigator = _detail_screen(client, goal_id, False)
    await screen.finalize_goal()
    return _detail_response(screen, alerts, navigator)


@router.post("/{goal_id}/reopen", response_model=GoalDetailResponse)
async def reopen_goal_endpoint(
    goal_id: str,
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDetailResponse:
    screen, alerts, navigator = _detail_screen(client, goal_id, False)
    await screen.reopen_goal()
    return _detail_response(screen, alerts, navigator)


@router.delete("/{goal_id}", response_model=GoalDetailResponse)
async def delete_goal_endpoint(
    goal_id: str,
    client: FortunaClient = Depends(get_fortuna_client),
) -> GoalDetailResponse:
    """Delete the goal; on success the response navigates to the goal list."""
    screen, alerts, navigator = _detail_screen(client, goal_id, False)
    await screen.delete_goal()
    return _detail_response(screen, alerts, navigator)

"""Service layer for goal reads and mutations against the remote API.

Every operation returns an ``OperationResult`` instead of raising, so the
screens decide how a failure is presented. Failures are logged here with the
response body for diagnosis.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from fortuna.api.client import (
    FortunaClient,
    FortunaError,
    FortunaRequestError,
    FortunaResponseError,
)
from fortuna.models import Goal, GoalValidationError, parse_goal, parse_goal_lookup

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Stripped from create payloads: the server recomputes the contribution.
SERVER_COMPUTED_FIELDS = ("monthly_aport",)


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of one API operation: success with data, or failure with a reason."""

    ok: bool
    data: T | None = None
    error: str | None = None
    status_code: int | None = None
    # `message` from a JSON error body, when the server supplied one
    server_message: str | None = None

    @classmethod
    def success(cls, data: T | None = None) -> OperationResult[T]:
        return cls(ok=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> OperationResult[T]:
        return cls(ok=False, error=error, status_code=status_code, server_message=server_message)


@dataclass(frozen=True)
class DefinedGoal:
    """Plan-generator output: the raw payload (sent on create) and its parsed view."""

    payload: dict[str, Any]
    goal: Goal


@dataclass(frozen=True)
class CreatedGoal:
    goal_id: str
    payload: dict[str, Any] = field(default_factory=dict)


def _failure(action: str, exc: Exception, goal_id: str | None = None) -> OperationResult[Any]:
    target = f" {goal_id}" if goal_id else ""
    if isinstance(exc, FortunaRequestError):
        logger.error(
            "Goal %s%s failed with status %s: %s",
            action,
            target,
            exc.status_code,
            exc.body,
        )
        return OperationResult.failure(
            f"Failed to {action} goal",
            status_code=exc.status_code,
            server_message=exc.payload_message,
        )

    logger.error("Goal %s%s returned an unusable response: %s", action, target, exc)
    return OperationResult.failure(f"Failed to {action} goal: {exc}")


def build_create_payload(draft: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a draft for `POST /api/goals`, dropping server-computed fields."""
    payload = dict(draft)
    for key in SERVER_COMPUTED_FIELDS:
        payload.pop(key, None)
    return payload


async def fetch_goal(client: FortunaClient, goal_id: str) -> OperationResult[Goal]:
    """Load the current state of one goal."""
    try:
        payload = await client.get_goal(goal_id)
        goal = parse_goal_lookup(payload)
    except (FortunaError, GoalValidationError) as exc:
        return _failure("fetch", exc, goal_id)

    logger.debug("Fetched goal %s", goal_id)
    return OperationResult.success(goal)


async def delete_goal(client: FortunaClient, goal_id: str) -> OperationResult[None]:
    try:
        await client.delete_goal(goal_id)
    except FortunaError as exc:
        return _failure("delete", exc, goal_id)

    logger.info("Deleted goal %s", goal_id)
    return OperationResult.success()


async def finalize_goal(client: FortunaClient, goal_id: str) -> OperationResult[None]:
    """
    Mark a goal as finished server-side.

    The caller must re-fetch afterwards: the server recalculates fields such
    as `time_desired` together with the status flip.
    """
    try:
        await client.finalize_goal(goal_id)
    except FortunaError as exc:
        return _failure("finalize", exc, goal_id)

    logger.info("Finalized goal %s", goal_id)
    return OperationResult.success()


async def reopen_goal(client: FortunaClient, goal_id: str) -> OperationResult[None]:
    """Mark a goal as in progress again. Same re-fetch contract as finalize."""
    try:
        await client.reopen_goal(goal_id)
    except FortunaError as exc:
        return _failure("reopen", exc, goal_id)

    logger.info("Reopened goal %s", goal_id)
    return OperationResult.success()


async def define_goal(
    client: FortunaClient,
    draft: Mapping[str, Any],
) -> OperationResult[DefinedGoal]:
    """Submit a draft to the plan generator and parse the enriched goal."""
    try:
        payload = await client.define_goal(draft)
        goal = parse_goal(payload)
    except (FortunaError, GoalValidationError) as exc:
        return _failure("define", exc)

    return OperationResult.success(DefinedGoal(payload=dict(payload), goal=goal))


async def create_goal(
    client: FortunaClient,
    draft: Mapping[str, Any],
) -> OperationResult[CreatedGoal]:
    """Persist a reviewed draft. The new id comes back nested as `goal_id.id`."""
    try:
        payload = await client.create_goal(build_create_payload(draft))
    except FortunaError as exc:
        return _failure("create", exc)

    goal_ref = payload.get("goal_id") if isinstance(payload, dict) else None
    new_id = goal_ref.get("id") if isinstance(goal_ref, dict) else None
    if new_id is None or str(new_id).strip() == "":
        return _failure("create", FortunaResponseError("Response missing goal_id.id"))

    logger.info("Created goal %s", new_id)
    return OperationResult.success(CreatedGoal(goal_id=str(new_id), payload=payload))

"""Display formatting for goal fields.

Every helper accepts either a parsed value or a raw wire value and never
raises; unusable input degrades to a fallback string.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fortuna.config import settings
from fortuna.models import Planning, Step, to_number

CURRENCY_PREFIX = "R$"
NOT_AVAILABLE = "N/A"
BULLET = "* "
ELLIPSIS = "..."

STATUS_FINISHED = "Concluída"
STATUS_IN_PROGRESS = "Em Andamento"
GOAL_TYPE_DIVIDEND = "Dividendo"
GOAL_TYPE_PATRIMONY = "Patrimônio"

# Precision of `time_desired` differs per screen.
DETAIL_YEARS_DECIMALS = 1
DEFINE_YEARS_DECIMALS = 2


def format_currency(value: Any) -> str:
    """`R$1234.50`; absent or non-numeric amounts show as `R$0.00`."""
    number = to_number(value)
    if number is None:
        number = 0.0
    return f"{CURRENCY_PREFIX}{number:.2f}"


def format_number(value: Any, decimals: int = 2) -> str:
    """Fixed-point number, or `N/A`. Absence is not shown as zero."""
    number = to_number(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number:.{decimals}f}"


def format_percentage(value: Any) -> str:
    """Render a fraction (0.08) as a percentage (`8.00%`)."""
    number = to_number(value)
    if number is None:
        return NOT_AVAILABLE
    return f"{number * 100:.2f}%"


def format_years(value: Any, decimals: int) -> str:
    return format_number(value, decimals)


def format_status(status: Any) -> str:
    return STATUS_FINISHED if status else STATUS_IN_PROGRESS


def format_goal_type(type_goal: Any) -> str:
    return GOAL_TYPE_DIVIDEND if type_goal else GOAL_TYPE_PATRIMONY


def format_bullets(items: Iterable[Any] | None) -> list[str]:
    if not items:
        return []
    return [f"{BULLET}{item}" for item in items]


def limit_summary(
    summary: str | None,
    show_full: bool,
    max_length: int | None = None,
) -> str:
    """
    Truncate long summaries to `max_length` characters plus an ellipsis.

    `max_length` defaults to `settings.summary_max_length`.
    """
    if not summary:
        return ""
    if max_length is None:
        max_length = settings.summary_max_length
    if len(summary) > max_length and not show_full:
        return f"{summary[:max_length]}{ELLIPSIS}"
    return summary


def _step_heading(step: Step) -> str:
    # "Passo 1" from the generator is kept as is
    label = str(step.step) if step.step is not None else ""
    if not label.startswith("Passo"):
        label = f"Passo {label}".rstrip()
    if step.description:
        return f"{label}: {step.description}"
    return label


def format_planning(planning: Planning | None) -> list[tuple[str, list[str]]]:
    """
    Flatten a generated plan into titled sections of display lines.

    Empty sections are left out; list order from the server is preserved.
    """
    if planning is None:
        return []

    sections: list[tuple[str, list[str]]] = []

    if planning.objective:
        sections.append(("Objetivo", [planning.objective]))

    situation = planning.current_situation
    if situation is not None:
        lines = [f"Renda: {situation.income or NOT_AVAILABLE}"]
        if situation.expenses:
            lines.append(f"Despesas: {situation.expenses}")
        if situation.savings:
            lines.append(f"Poupança: {situation.savings}")
        sections.append(("Situação Atual", lines))

    if planning.steps:
        lines = []
        for step in planning.steps:
            lines.append(_step_heading(step))
            lines.extend(format_bullets(step.actions))
            if step.timeline:
                lines.append(f"Prazo: {step.timeline}")
        sections.append(("Passos", lines))

    if planning.resources:
        sections.append(
            (
                "Recursos",
                format_bullets(
                    ": ".join(part for part in (item.description, item.resource) if part)
                    for item in planning.resources
                ),
            )
        )

    for title, items in (
        ("Dicas de Economia", planning.savings_tips),
        ("Plano de Contingência", planning.contingency_plan),
        ("Fontes de Renda Adicional", planning.additional_income_sources),
        ("Monitoramento e Ajustes", planning.monitoring_adjustments),
    ):
        if items:
            sections.append((title, format_bullets(items)))

    return sections

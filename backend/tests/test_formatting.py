from __future__ import annotations

import pytest

from fortuna.config import settings
from fortuna.formatting import (
    DEFINE_YEARS_DECIMALS,
    DETAIL_YEARS_DECIMALS,
    format_bullets,
    format_currency,
    format_goal_type,
    format_number,
    format_percentage,
    format_planning,
    format_status,
    format_years,
    limit_summary,
)
from fortuna.models import parse_goal

NON_NUMERIC = ["abc", "", None, "12,5", [], {}, float("nan"), True]


def test_currency_formats_two_decimals_with_prefix() -> None:
    assert format_currency("1234.5") == "R$1234.50"
    assert format_currency(350) == "R$350.00"


@pytest.mark.parametrize("raw", NON_NUMERIC)
def test_currency_falls_back_to_zero(raw) -> None:
    assert format_currency(raw) == "R$0.00"


@pytest.mark.parametrize("raw", NON_NUMERIC)
def test_rate_and_dividends_fall_back_to_not_available(raw) -> None:
    assert format_percentage(raw) == "N/A"
    assert format_number(raw) == "N/A"


def test_rate_is_rendered_as_percentage() -> None:
    assert format_percentage("0.08") == "8.00%"
    assert format_percentage(0.125) == "12.50%"


def test_dividends_keep_two_decimals() -> None:
    assert format_number("45.5") == "45.50"


def test_time_desired_precision_differs_per_screen() -> None:
    assert format_years(7, DETAIL_YEARS_DECIMALS) == "7.0"
    assert format_years(7, DEFINE_YEARS_DECIMALS) == "7.00"
    assert format_years("6.26", DETAIL_YEARS_DECIMALS) == "6.3"
    assert format_years(None, DETAIL_YEARS_DECIMALS) == "N/A"


def test_status_and_goal_type_labels() -> None:
    assert format_status(True) == "Concluída"
    assert format_status(False) == "Em Andamento"
    assert format_goal_type(True) == "Dividendo"
    assert format_goal_type(None) == "Patrimônio"


def test_bullets_preserve_order() -> None:
    assert format_bullets(["b", "a", "c"]) == ["* b", "* a", "* c"]
    assert format_bullets(None) == []


def test_summary_is_truncated_unless_full_is_requested() -> None:
    summary = "x" * 300

    short = limit_summary(summary, show_full=False)
    assert len(short) == 253
    assert short.endswith("...")
    assert limit_summary(summary, show_full=True) == summary


def test_summary_within_budget_is_untouched() -> None:
    summary = "y" * 250
    assert limit_summary(summary, show_full=False) == summary
    assert limit_summary(None, show_full=False) == ""


def test_planning_sections_in_display_order() -> None:
    goal = parse_goal(
        {
            "planning": {
                "objective": "Aposentar aos 50",
                "current_situation": {"income": "8000", "savings": "1500"},
                "steps": [
                    {"step": 1, "description": "Montar reserva", "actions": ["Abrir conta"], "timeline": "6 meses"},
                    {"step": 2, "description": "Investir", "actions": [], "timeline": ""},
                ],
                "resources": [{"description": "Curso", "resource": "Tesouro Direto"}],
                "monitoring_adjustments": ["Revisar a cada trimestre"],
            }
        }
    )

    sections = format_planning(goal.planning)

    assert [title for title, _ in sections] == [
        "Objetivo",
        "Situação Atual",
        "Passos",
        "Recursos",
        "Monitoramento e Ajustes",
    ]
    assert sections[1][1] == ["Renda: 8000", "Poupança: 1500"]
    assert sections[2][1] == [
        "Passo 1: Montar reserva",
        "* Abrir conta",
        "Prazo: 6 meses",
        "Passo 2: Investir",
    ]
    assert sections[3][1] == ["* Curso: Tesouro Direto"]


def test_planning_absent_yields_no_sections() -> None:
    assert format_planning(None) == []


def test_summary_budget_defaults_to_settings(monkeypatch) -> None:
    monkeypatch.setattr(settings, "summary_max_length", 10)

    assert limit_summary("z" * 20, show_full=False) == "z" * 10 + "..."
    assert limit_summary("z" * 20, show_full=False, max_length=0) == "..."


def test_generated_step_labels_and_missing_text() -> None:
    goal = parse_goal(
        {
            "planning": {
                "steps": [
                    {"step": "Passo 1", "description": "Poupar", "timeline": None},
                    {"step": 2, "description": None, "actions": None},
                    {"description": "Revisar"},
                ],
                "resources": [{"description": "Planilha", "resource": None}],
                "current_situation": {"expenses": "3000"},
            }
        }
    )

    sections = dict(format_planning(goal.planning))

    assert sections["Passos"] == ["Passo 1: Poupar", "Passo 2", "Passo: Revisar"]
    assert sections["Recursos"] == ["* Planilha"]
    assert sections["Situação Atual"] == ["Renda: N/A", "Despesas: 3000"]

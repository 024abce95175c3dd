from __future__ import annotations

import asyncio
import json

from fake_api import FakeFortunaApi
from fortuna.screens.base import RecordingAlerts, RecordingNavigator
from fortuna.screens.goal_define import GoalDefineScreen


def _run(coro):
    return asyncio.run(coro)


DRAFT = {
    "name": "Aposentadoria",
    "type_goal": False,
    "patrimony": "1000000",
    "my_patrimony": "25000",
    "monthly_aport": 1500,
}


def _screen(api, draft=None):
    alerts = RecordingAlerts()
    navigator = RecordingNavigator()
    screen = GoalDefineScreen(api.client(), navigator, alerts, dict(draft or DRAFT))
    return screen, alerts, navigator


def test_mount_defines_goal_and_renders_review() -> None:
    api = FakeFortunaApi()
    api.define_extra = {"time_desired": 7, "rate": "0.08", "dividends": 120, "summary": "Plano"}
    screen, alerts, _ = _screen(api)
    assert screen.render().loading_text == "Definindo meta..."

    _run(screen.on_mount())

    view = screen.render()
    assert view.loading is False
    assert view.name == "Aposentadoria"
    assert view.goal_type == "Patrimônio"
    assert view.patrimony == "R$1000000.00"
    assert view.my_patrimony == "R$25000.00"
    assert view.rate == "8.00%"
    assert view.dividends == "120.00"
    assert view.time_desired == "7.00"
    assert view.summary == "Plano"
    assert alerts.items == []
    assert api.count("POST", "/api/gemini/define") == 1


def test_missing_numbers_from_generator_show_fallbacks() -> None:
    api = FakeFortunaApi()
    screen, _, _ = _screen(api, {"name": "Viagem", "type_goal": True, "patrimony": "abc"})

    _run(screen.on_mount())

    view = screen.render()
    assert view.goal_type == "Dividendo"
    assert view.patrimony == "R$0.00"
    assert view.dividends == "N/A"
    assert view.rate == "N/A"
    assert view.time_desired == "N/A"


def test_define_failure_keeps_draft_and_alerts() -> None:
    api = FakeFortunaApi()
    api.fail("POST", "/api/gemini/define", 500, "generator down")
    screen, alerts, _ = _screen(api)

    _run(screen.on_mount())

    assert screen.loading is False
    assert screen.goal_data == DRAFT
    assert [(a.title, a.message) for a in alerts.items] == [("Erro", "Falha ao definir a meta.")]
    assert screen.render().name == "Aposentadoria"


def test_create_strips_monthly_aport_and_navigates_to_plan() -> None:
    api = FakeFortunaApi()
    api.define_extra = {"monthly_aport": 987.65, "summary": "Plano"}
    screen, alerts, navigator = _screen(api)
    _run(screen.on_mount())

    goal_id = _run(screen.create_goal())

    assert goal_id == "goal-new"
    sent = json.loads(api.requests[-1].content)
    assert "monthly_aport" not in sent
    assert sent["summary"] == "Plano"
    assert navigator.items[0].screen == "GoalCreatePlan"
    assert navigator.items[0].params == {"goalId": "goal-new"}
    assert alerts.items == []


def test_create_failure_shows_server_message() -> None:
    api = FakeFortunaApi()
    api.fail("POST", "/api/goals", 422, '{"message": "Patrimônio inválido"}')
    screen, alerts, navigator = _screen(api)
    _run(screen.on_mount())

    assert _run(screen.create_goal()) is None

    assert navigator.items == []
    assert alerts.items[-1].message == "Patrimônio inválido"


def test_create_failure_falls_back_to_generic_message() -> None:
    api = FakeFortunaApi()
    api.fail("POST", "/api/goals", 500, "Internal Server Error")
    screen, alerts, _ = _screen(api)
    _run(screen.on_mount())

    _run(screen.create_goal())

    assert alerts.items[-1].message == "Falha ao criar a meta."


def test_rewrite_returns_to_goal_form_with_current_data() -> None:
    api = FakeFortunaApi()
    api.define_extra = {"summary": "Plano"}
    screen, _, navigator = _screen(api)
    _run(screen.on_mount())

    screen.rewrite_goal()

    assert navigator.items[0].screen == "GoalCreate"
    assert navigator.items[0].params["summary"] == "Plano"
    assert navigator.items[0].params["monthly_aport"] == 1500


def test_long_summary_is_truncated_until_toggled() -> None:
    api = FakeFortunaApi()
    api.define_extra = {"summary": "a" * 300}
    screen, _, _ = _screen(api)
    _run(screen.on_mount())

    assert screen.render().summary == "a" * 250 + "..."
    assert screen.toggle_summary() is True
    assert screen.render().summary == "a" * 300


def test_unparseable_draft_still_renders() -> None:
    api = FakeFortunaApi()
    api.fail("POST", "/api/gemini/define", 503, "")
    screen, _, _ = _screen(api, {"name": "Casa", "planning": "texto livre"})

    _run(screen.on_mount())

    view = screen.render()
    assert view.loading is False
    assert view.patrimony == "R$0.00"


def test_generated_plan_with_text_step_keeps_enriched_goal() -> None:
    api = FakeFortunaApi()
    api.define_extra = {
        "time_desired": 7,
        "summary": "Plano",
        "planning": {
            "steps": [{"step": "Passo 1", "description": "Poupar", "timeline": None}],
            "contingency_plan": None,
        },
    }
    screen, alerts, _ = _screen(api)

    _run(screen.on_mount())

    assert alerts.items == []
    assert screen.goal_data["time_desired"] == 7
    assert screen.goal_data["planning"]["steps"][0]["step"] == "Passo 1"
    view = screen.render()
    assert view.time_desired == "7.00"
    assert view.summary == "Plano"

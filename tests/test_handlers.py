from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitplan.bot.handlers.plans import diet_command, metrics_command, show_workout_callback, workout_command
from fitplan.services.plan_service import PlanService

from conftest import FakeOpenAIService


def _update():
    message = SimpleNamespace(reply_text=AsyncMock())
    return SimpleNamespace(
        effective_message=message,
        effective_user=SimpleNamespace(id=42, username="tester"),
        callback_query=None,
        message=message,
    )


def _context(store, openai):
    return SimpleNamespace(bot_data={"store": store, "plans": PlanService(openai, store)})


def _replies(update):
    return [call.args[0] for call in update.effective_message.reply_text.call_args_list]


@pytest.mark.asyncio
async def test_diet_without_questionnaire(store):
    update = _update()
    await diet_command(update, _context(store, FakeOpenAIService()))
    assert "анкету" in _replies(update)[0]


@pytest.mark.asyncio
async def test_workout_generated_and_sent(store, supabase, workout_response):
    supabase.tables["fitness_questionnaires"] = [{"user_id": "42", "daysPerWeek": 3}]
    update = _update()

    await workout_command(update, _context(store, FakeOpenAIService([workout_response])))

    replies = _replies(update)
    assert "ПЛАН ТРЕНИРОВОК" in replies[-1]
    assert (await store.get("42", "workout")).plan.days[0].focus == "Push"


@pytest.mark.asyncio
async def test_failed_generation_offers_retry(store, supabase):
    supabase.tables["fitness_questionnaires"] = [{"user_id": "42"}]
    update = _update()

    await workout_command(update, _context(store, FakeOpenAIService(["no json here"])))

    last = update.effective_message.reply_text.call_args_list[-1]
    assert "❌" in last.args[0]
    markup = last.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].callback_data == "gen_workout"


@pytest.mark.asyncio
async def test_show_missing_plan(store):
    update = _update()
    await show_workout_callback(update, _context(store, FakeOpenAIService()))
    assert "нет плана" in _replies(update)[0]


@pytest.mark.asyncio
async def test_metrics(store, supabase):
    supabase.tables["user_profiles"] = [{"user_id": "42", "gender": "male", "age": 30, "height": 180, "weight": 80}]
    update = _update()
    await metrics_command(update, _context(store, FakeOpenAIService()))
    assert "BMR: 1780 ккал" in _replies(update)[0]

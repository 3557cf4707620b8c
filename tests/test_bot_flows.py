from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitplan.bot.handlers.coach import coach_command, coach_reset_callback, handle_coach_message
from fitplan.bot.handlers.plans import history_command
from fitplan.bot.handlers.profile import (
    handle_activity_callback,
    handle_gender_callback,
    handle_goal_callback,
    handle_profile_age,
    handle_profile_current_weight,
    handle_profile_health,
    handle_profile_height,
    handle_profile_target_weight,
    profile_command,
)
from fitplan.bot.handlers.questionnaire import (
    diet_questionnaire_command,
    handle_diet_allergies,
    handle_diet_goal_callback,
    handle_diet_meals,
    handle_diet_restrictions,
    handle_diet_type_callback,
    handle_duration_callback,
    handle_level_callback,
    handle_location_callback,
    handle_workout_days,
    handle_workout_health,
    handle_workout_movements,
    workout_questionnaire_command,
)
from fitplan.bot.states import BotState
from fitplan.config import COACH_INSTRUCTION
from fitplan.services.prompts import DIET_EXAMPLE, WORKOUT_EXAMPLE
from fitplan.utils.errors import CompletionUnavailable
from fitplan.utils.normalizer import normalize_plan
from fitplan.utils.validators import normalize_diet_questionnaire, normalize_profile, normalize_workout_questionnaire

from conftest import FakeOpenAIService


def _text(text):
    message = SimpleNamespace(text=text, reply_text=AsyncMock())
    return SimpleNamespace(
        message=message,
        effective_message=message,
        effective_user=SimpleNamespace(id=42, username="tester", first_name="Anna"),
        callback_query=None,
    )


def _callback(data):
    message = SimpleNamespace(reply_text=AsyncMock())
    query = SimpleNamespace(data=data, answer=AsyncMock(), edit_message_text=AsyncMock())
    return SimpleNamespace(
        message=None,
        effective_message=message,
        effective_user=SimpleNamespace(id=42, username="tester", first_name="Anna"),
        callback_query=query,
    )


def _context(store, openai=None, user_data=None):
    return SimpleNamespace(
        bot_data={"store": store, "openai": openai or FakeOpenAIService()},
        user_data={} if user_data is None else user_data,
    )


def _replies(update):
    return [call.args[0] for call in update.message.reply_text.call_args_list]


@pytest.mark.asyncio
async def test_profile_flow_saves_profile(store):
    context = _context(store)

    await profile_command(_text("/profile"), context)
    assert context.user_data['state'] == BotState.PROFILE_AGE

    await handle_profile_age(_text("30"), context)
    assert context.user_data['state'] == BotState.PROFILE_GENDER
    await handle_gender_callback(_callback("gender_male"), context)
    await handle_profile_height(_text("180"), context)
    await handle_profile_current_weight(_text("80,5"), context)
    await handle_profile_target_weight(_text("75"), context)
    await handle_activity_callback(_callback("activity_very_active"), context)
    await handle_goal_callback(_callback("goal_fat_loss"), context)
    assert context.user_data['state'] == BotState.PROFILE_HEALTH

    done = _text("диабет, астма")
    await handle_profile_health(done, context)

    assert context.user_data['state'] == BotState.IDLE
    assert 'profile_data' not in context.user_data
    assert "ПРОФИЛЬ СОХРАНЕН" in _replies(done)[0]

    profile = normalize_profile(await store.get_profile("42"))
    assert (profile.sex, profile.age, profile.height, profile.weight) == ("male", 30, 180, 80.5)
    assert profile.activity_level == "very_active"
    assert profile.goal == "fat_loss"
    assert profile.health_conditions == ["диабет", "астма"]


@pytest.mark.asyncio
async def test_profile_invalid_age_keeps_state(store):
    context = _context(store, user_data={'state': BotState.PROFILE_AGE})
    update = _text("abc")

    await handle_profile_age(update, context)

    assert context.user_data['state'] == BotState.PROFILE_AGE
    assert _replies(update)[0].startswith("❌")


@pytest.mark.asyncio
async def test_existing_profile_is_shown(store, supabase):
    supabase.tables["user_profiles"] = [{"user_id": "42", "gender": "female", "age": 28, "goal": "endurance"}]
    update = _text("/profile")
    context = _context(store)

    await profile_command(update, context)

    text = _replies(update)[0]
    assert "Женский" in text
    assert "Выносливость" in text
    assert 'state' not in context.user_data


@pytest.mark.asyncio
async def test_diet_questionnaire_flow(store):
    context = _context(store)

    await diet_questionnaire_command(_text("/questionnaire_diet"), context)
    await handle_diet_goal_callback(_callback("dietgoal_muscle_gain"), context)
    await handle_diet_type_callback(_callback("diettype_vegan"), context)
    await handle_diet_meals(_text("4"), context)
    await handle_diet_allergies(_text("орехи; соя"), context)
    done = _text("нет")
    await handle_diet_restrictions(done, context)

    assert context.user_data['state'] == BotState.IDLE
    assert "сохранена" in _replies(done)[0]

    questionnaire = normalize_diet_questionnaire(await store.get_questionnaire("42", "diet"))
    assert questionnaire.goal == "muscle_gain"
    assert questionnaire.diet_type == "vegan"
    assert questionnaire.meals_per_day == 4
    assert questionnaire.allergies == ["орехи", "соя"]
    assert questionnaire.food_restrictions == []


@pytest.mark.asyncio
async def test_diet_meals_out_of_range(store):
    context = _context(store, user_data={'state': BotState.DIET_MEALS})
    update = _text("9")

    await handle_diet_meals(update, context)

    assert context.user_data['state'] == BotState.DIET_MEALS
    assert "от 2 до 6" in _replies(update)[0]


@pytest.mark.asyncio
async def test_workout_questionnaire_flow(store):
    context = _context(store)

    await workout_questionnaire_command(_text("/questionnaire_workout"), context)
    await handle_level_callback(_callback("level_Beginner"), context)
    await handle_workout_days(_text("3"), context)
    await handle_duration_callback(_callback("duration_2"), context)
    await handle_location_callback(_callback("location_gym"), context)
    await handle_workout_health(_text("астма"), context)
    await handle_workout_movements(_text("прыжки"), context)

    assert context.user_data['state'] == BotState.IDLE
    questionnaire = normalize_workout_questionnaire(await store.get_questionnaire("42", "workout"))
    assert questionnaire.fitness_level == "Beginner"
    assert questionnaire.days_per_week == 3
    assert questionnaire.session_duration == "45-60 minutes"
    assert questionnaire.workout_locations == ["Gym"]
    assert "Free weights" in questionnaire.equipment_access
    assert questionnaire.health_conditions == ["астма"]
    assert questionnaire.movement_restrictions == ["прыжки"]


@pytest.mark.asyncio
async def test_history_lists_plans(store):
    first = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
    second = datetime(2025, 1, 2, 9, 0, tzinfo=timezone.utc)
    diet_plan = normalize_plan(DIET_EXAMPLE, "diet")
    await store.put("42", "diet", diet_plan, {}, created_at=first)
    await store.put("42", "diet", diet_plan, {}, created_at=second)

    update = _text("/history")
    await history_command(update, _context(store))

    text = _replies(update)[0]
    assert "02.01.2025 09:00" in text
    assert "01.01.2025 09:00" in text
    assert text.index("02.01.2025") < text.index("01.01.2025")
    assert "✅ активный" in text
    assert "архив" in text
    assert "планов пока нет" in text


@pytest.mark.asyncio
async def test_coach_uses_profile_and_history(store, supabase):
    supabase.tables["user_profiles"] = [{
        "user_id": "42", "gender": "male", "age": 30, "height": 180, "weight": 80,
        "activity_level": "moderate", "goal": "fat_loss", "health_conditions": ["asthma"],
    }]
    openai = FakeOpenAIService(["Aim for 140g protein 💪", "Try walking daily"])
    context = _context(store, openai)

    await coach_command(_text("/coach"), context)
    assert context.user_data['state'] == BotState.COACH_CHAT

    await handle_coach_message(_text("How much protein?"), context)
    second = _text("And cardio?")
    await handle_coach_message(second, context)

    prompt = openai.prompts[1]
    assert "Name: Anna" in prompt
    assert "Primary fitness goal: Fat loss" in prompt
    assert "Health conditions: asthma" in prompt
    assert "Daily calorie target: 2207 calories" in prompt
    assert "User: How much protein?" in prompt
    assert "Coach: Aim for 140g protein 💪" in prompt
    assert prompt.rstrip().endswith("Respond as the user's health coach:")
    assert openai.instructions[0] == COACH_INSTRUCTION
    assert _replies(second)[-1] == "Try walking daily"
    assert len(context.user_data['chat_context']) == 4


@pytest.mark.asyncio
async def test_coach_without_profile(store):
    openai = FakeOpenAIService(["Hello!"])
    await handle_coach_message(_text("hi"), _context(store, openai))
    assert "Primary fitness goal: not specified" in openai.prompts[0]
    assert "No previous messages" in openai.prompts[0]


@pytest.mark.asyncio
async def test_coach_history_is_trimmed(store):
    history = [{"role": "user", "content": f"q{i}"} for i in range(20)]
    openai = FakeOpenAIService(["ok"])
    context = _context(store, openai, user_data={'chat_context': history})

    await handle_coach_message(_text("latest"), context)

    assert "User: q9" not in openai.prompts[0]
    assert "User: q10" in openai.prompts[0]
    assert len(context.user_data['chat_context']) == 20
    assert context.user_data['chat_context'][-1] == {"role": "assistant", "content": "ok"}


@pytest.mark.asyncio
async def test_coach_error_keeps_history(store):
    error = CompletionUnavailable(CompletionUnavailable.REQUEST_FAILED, retryable=True)
    context = _context(store, FakeOpenAIService(error=error))
    update = _text("hi")

    await handle_coach_message(update, context)

    assert "Ошибка связи с AI" in _replies(update)[-1]
    assert 'chat_context' not in context.user_data


@pytest.mark.asyncio
async def test_coach_reset_clears_history(store):
    context = _context(store, user_data={'chat_context': [{"role": "user", "content": "hi"}]})
    await coach_reset_callback(_callback("coach_reset"), context)
    assert 'chat_context' not in context.user_data


@pytest.mark.asyncio
async def test_text_router_follows_state(store):
    from main import route_text_message

    context = _context(store, user_data={'state': BotState.PROFILE_AGE})
    await route_text_message(_text("25"), context)
    assert context.user_data['state'] == BotState.PROFILE_GENDER
    assert context.user_data['profile_data'] == {'age': 25}

    waiting = _text("male")
    await route_text_message(waiting, context)
    assert context.user_data['state'] == BotState.PROFILE_GENDER
    assert "кнопкой" in _replies(waiting)[0]


@pytest.mark.asyncio
async def test_text_router_defaults_to_coach(store):
    from main import route_text_message

    openai = FakeOpenAIService(["Stay hydrated"])
    update = _text("any tips?")
    await route_text_message(update, _context(store, openai))

    assert openai.prompts
    assert _replies(update)[-1] == "Stay hydrated"

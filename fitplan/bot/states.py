"""
Состояния для FSM (Finite State Machine) бота
"""
from enum import Enum


class BotState(str, Enum):
    """Состояния бота"""
    # Основные состояния
    IDLE = "idle"

    # Состояния создания профиля
    PROFILE_AGE = "profile_age"
    PROFILE_GENDER = "profile_gender"
    PROFILE_HEIGHT = "profile_height"
    PROFILE_CURRENT_WEIGHT = "profile_current_weight"
    PROFILE_TARGET_WEIGHT = "profile_target_weight"
    PROFILE_ACTIVITY = "profile_activity"
    PROFILE_GOAL = "profile_goal"
    PROFILE_HEALTH = "profile_health"

    # Анкета питания
    DIET_GOAL = "diet_goal"
    DIET_TYPE = "diet_type"
    DIET_MEALS = "diet_meals"
    DIET_ALLERGIES = "diet_allergies"
    DIET_RESTRICTIONS = "diet_restrictions"

    # Анкета тренировок
    WORKOUT_LEVEL = "workout_level"
    WORKOUT_DAYS = "workout_days"
    WORKOUT_DURATION = "workout_duration"
    WORKOUT_LOCATION = "workout_location"
    WORKOUT_HEALTH = "workout_health"
    WORKOUT_MOVEMENTS = "workout_movements"

    # Состояние общения с AI-коучем
    COACH_CHAT = "coach_chat"

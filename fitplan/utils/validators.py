"""
Валидация и нормализация анкет пользователя

Все известные варианты названий полей (camelCase из веб-формы, snake_case
из базы) приводятся к одному набору один раз, на входе. Дальше по коду
используются только канонические поля.
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from fitplan.database.models import DietQuestionnaire, Profile, WorkoutQuestionnaire

logger = logging.getLogger(__name__)

GOAL_ALIASES = {
    "fat_loss": "fat_loss",
    "lose_weight": "fat_loss",
    "weight_loss": "fat_loss",
    "lose": "fat_loss",
    "muscle_gain": "muscle_gain",
    "gain_muscle": "muscle_gain",
    "gain": "muscle_gain",
    "maintenance": "maintenance",
    "maintain_weight": "maintenance",
    "maintain": "maintenance",
    "endurance": "endurance",
    "improve_endurance": "endurance",
    "performance": "endurance",
    "general_wellness": "general_wellness",
    "wellness": "general_wellness",
}

ACTIVITY_ALIASES = {
    "sedentary": "sedentary",
    "light": "light",
    "lightly_active": "light",
    "moderate": "moderate",
    "moderately_active": "moderate",
    "active": "active",
    "very_active": "very_active",
}

PROFILE_FIELDS = {
    "sex": ("sex", "gender"),
    "age": ("age",),
    "date_of_birth": ("date_of_birth", "dateOfBirth", "dob"),
    "height": ("height",),
    "height_unit": ("height_unit", "heightUnit"),
    "weight": ("weight", "current_weight", "currentWeight"),
    "weight_unit": ("weight_unit", "weightUnit"),
    "target_weight": ("target_weight", "targetWeight"),
    "activity_level": ("activity_level", "activityLevel"),
    "goal": ("goal", "primary_goal", "primaryGoal"),
    "health_conditions": ("health_conditions", "healthConditions"),
    "movement_restrictions": ("movement_restrictions", "movementRestrictions", "movements_to_avoid", "movementsToAvoid"),
    "food_restrictions": ("food_restrictions", "foodRestrictions"),
    "allergies": ("allergies",),
}

DIET_FIELDS = {
    "goal": ("goal", "primary_goal", "primaryGoal"),
    "calories": ("calories", "total_calories", "totalCalories"),
    "protein": ("protein", "total_protein", "totalProtein"),
    "carbs": ("carbs", "total_carbs", "totalCarbs"),
    "fat": ("fat", "fats", "total_fats", "totalFats"),
    "diet_type": ("diet_type", "dietType"),
    "meals_per_day": ("meals_per_day", "mealsPerDay"),
    "food_restrictions": ("food_restrictions", "foodRestrictions"),
    "allergies": ("allergies",),
}

WORKOUT_FIELDS = {
    "fitness_goal": ("fitness_goal", "fitnessGoal"),
    "fitness_level": ("fitness_level", "fitnessLevel"),
    "goal_timeline": ("goal_timeline", "goalTimeline"),
    "days_per_week": ("days_per_week", "daysPerWeek"),
    "session_duration": ("session_duration", "sessionDuration"),
    "health_conditions": ("health_conditions", "healthConditions"),
    "movement_restrictions": ("movement_restrictions", "movementRestrictions", "movements_to_avoid", "movementsToAvoid"),
    "preferred_days": ("preferred_days", "preferredDays"),
    "workout_locations": ("workout_locations", "workoutLocations", "workout_environments", "workoutEnvironments"),
    "equipment_access": ("equipment_access", "equipmentAccess"),
}

LIST_FIELDS = {
    "health_conditions", "movement_restrictions", "food_restrictions", "allergies",
    "preferred_days", "workout_locations", "equipment_access",
}


class DataValidator:
    """Валидация пользовательских данных"""

    @staticmethod
    def validate_age(value: Any) -> Tuple[bool, Optional[int], str]:
        """Валидация возраста"""
        try:
            age = int(value)
        except (TypeError, ValueError):
            return False, None, "Пожалуйста, введите корректное число"
        if 10 <= age <= 120:
            return True, age, ""
        return False, None, "Возраст должен быть от 10 до 120 лет"

    @staticmethod
    def validate_height(value: Any, unit: str = "cm") -> Tuple[bool, Optional[float], str]:
        """Валидация роста в см или дюймах"""
        try:
            height = float(str(value).replace(',', '.'))
        except (TypeError, ValueError):
            return False, None, "Пожалуйста, введите корректное число"
        low, high = (100, 250) if unit == "cm" else (39, 99)
        if low <= height <= high:
            return True, height, ""
        return False, None, f"Рост должен быть от {low} до {high} {unit}"

    @staticmethod
    def validate_weight(value: Any, unit: str = "kg") -> Tuple[bool, Optional[float], str]:
        """Валидация веса в кг или фунтах"""
        try:
            weight = float(str(value).replace(',', '.'))
        except (TypeError, ValueError):
            return False, None, "Пожалуйста, введите корректное число"
        low, high = (30, 300) if unit == "kg" else (66, 661)
        if low <= weight <= high:
            return True, weight, ""
        return False, None, f"Вес должен быть от {low} до {high} {unit}"

    @staticmethod
    def validate_meals_per_day(value: Any) -> Tuple[bool, Optional[int], str]:
        try:
            meals = int(value)
        except (TypeError, ValueError):
            return False, None, "Пожалуйста, введите корректное число"
        if 2 <= meals <= 6:
            return True, meals, ""
        return False, None, "Количество приемов пищи должно быть от 2 до 6"

    @staticmethod
    def validate_days_per_week(value: Any) -> Tuple[bool, Optional[int], str]:
        try:
            days = int(value)
        except (TypeError, ValueError):
            return False, None, "Пожалуйста, введите корректное число"
        if 1 <= days <= 7:
            return True, days, ""
        return False, None, "Количество тренировок должно быть от 1 до 7 в неделю"


NO_ANSWERS = {"нет", "no", "none", "-", "0"}


def parse_list_answer(text: str) -> List[str]:
    """Ответ вида "орехи, молоко" в список; "нет" дает пустой список"""
    text = (text or "").strip()
    if text.lower() in NO_ANSWERS:
        return []
    return [item.strip() for item in text.replace(";", ",").split(",") if item.strip()]


def _canonical_fields(raw: Dict[str, Any], aliases: Dict[str, Iterable[str]]) -> Dict[str, Any]:
    """Первое непустое значение среди вариантов названия поля"""
    result = {}
    for name, candidates in aliases.items():
        for candidate in candidates:
            value = raw.get(candidate)
            if value is not None and value != "":
                result[name] = value
                break
    for name in LIST_FIELDS & result.keys():
        result[name] = _as_string_list(result[name])
    return result


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if str(item).strip()]
    return [str(value)] if str(value).strip() else []


def _checked(validator, value, *args):
    ok, parsed, error = validator(value, *args)
    if not ok:
        logger.warning(f"Некорректное значение {value!r}: {error}")
    return parsed


def canonical_goal(goal: Optional[str]) -> Optional[str]:
    if goal is None:
        return None
    key = str(goal).strip().lower()
    if key not in GOAL_ALIASES:
        logger.warning(f"Неизвестная цель {goal!r}, оставляем как есть")
        return key
    return GOAL_ALIASES[key]


def canonical_activity(level: Optional[str]) -> Optional[str]:
    if level is None:
        return None
    key = str(level).strip().lower()
    return ACTIVITY_ALIASES.get(key, key)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        logger.warning(f"Некорректная дата рождения {value!r}")
        return None


def normalize_profile(raw: Dict[str, Any]) -> Profile:
    """Профиль из записи анкеты с любыми вариантами названий полей"""
    data = _canonical_fields(raw, PROFILE_FIELDS)

    height_unit = "in" if str(data.get("height_unit", "cm")).lower() in ("in", "inch", "inches", "ft") else "cm"
    weight_unit = "lbs" if str(data.get("weight_unit", "kg")).lower() in ("lb", "lbs", "pounds") else "kg"

    profile = Profile(
        sex=str(data["sex"]).lower() if "sex" in data else None,
        age=_checked(DataValidator.validate_age, data["age"]) if "age" in data else None,
        date_of_birth=_parse_date(data.get("date_of_birth")),
        height=_checked(DataValidator.validate_height, data["height"], height_unit) if "height" in data else None,
        height_unit=height_unit,
        weight=_checked(DataValidator.validate_weight, data["weight"], weight_unit) if "weight" in data else None,
        weight_unit=weight_unit,
        target_weight=(_checked(DataValidator.validate_weight, data["target_weight"], weight_unit)
                       if "target_weight" in data else None),
        activity_level=canonical_activity(data.get("activity_level")),
        goal=canonical_goal(data.get("goal")),
        health_conditions=data.get("health_conditions", []),
        movement_restrictions=data.get("movement_restrictions", []),
        food_restrictions=data.get("food_restrictions", []),
        allergies=data.get("allergies", []),
    )
    return profile


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning(f"Некорректное число {value!r}")
        return None


def normalize_diet_questionnaire(raw: Dict[str, Any]) -> DietQuestionnaire:
    """Анкета питания с каноническими полями"""
    data = _canonical_fields(raw, DIET_FIELDS)
    meals = _checked(DataValidator.validate_meals_per_day, data["meals_per_day"]) if "meals_per_day" in data else None

    return DietQuestionnaire(
        goal=canonical_goal(data.get("goal")) or "maintenance",
        calories=_optional_int(data.get("calories")),
        protein=_optional_int(data.get("protein")),
        carbs=_optional_int(data.get("carbs")),
        fat=_optional_int(data.get("fat")),
        diet_type=str(data.get("diet_type", "balanced")),
        meals_per_day=meals or 3,
        food_restrictions=data.get("food_restrictions", []),
        allergies=data.get("allergies", []),
    )


def normalize_workout_questionnaire(raw: Dict[str, Any]) -> WorkoutQuestionnaire:
    """Анкета тренировок с каноническими полями"""
    data = _canonical_fields(raw, WORKOUT_FIELDS)
    days = _checked(DataValidator.validate_days_per_week, data["days_per_week"]) if "days_per_week" in data else None

    defaults = WorkoutQuestionnaire()
    return WorkoutQuestionnaire(
        fitness_goal=str(data.get("fitness_goal", defaults.fitness_goal)),
        fitness_level=str(data.get("fitness_level", defaults.fitness_level)),
        goal_timeline=str(data.get("goal_timeline", defaults.goal_timeline)),
        days_per_week=days or defaults.days_per_week,
        session_duration=str(data.get("session_duration", defaults.session_duration)),
        health_conditions=data.get("health_conditions", []),
        movement_restrictions=data.get("movement_restrictions", []),
        preferred_days=data.get("preferred_days", []),
        workout_locations=data.get("workout_locations", []),
        equipment_access=data.get("equipment_access", []),
    )

"""
Распределение дневной нормы по приемам пищи и тренировок по дням недели
"""
from typing import List, Optional, Sequence
import logging

from fitplan.config import DEFAULT_TABLES, MetricsTables
from fitplan.database.models import MealAllocation, NutritionTargets, SessionAllocation
from fitplan.utils.calculators import round_half_up

logger = logging.getLogger(__name__)


def meal_ratios(meals_per_day: int, goal: Optional[str],
                tables: MetricsTables = DEFAULT_TABLES) -> Sequence[float]:
    """
    Доли калорий на каждый прием пищи

    Для похудения и набора массы при 3-4 приемах калории смещаются
    к определенным приемам, в остальных случаях делятся поровну.
    """
    if meals_per_day < 1:
        raise ValueError(f"meals_per_day must be positive, got {meals_per_day}")

    ratios = tables.meal_ratios.get(goal, {}).get(meals_per_day)
    if ratios is None:
        ratios = [1.0 / meals_per_day] * meals_per_day
    return tuple(ratios)


def meal_labels(meals_per_day: int, tables: MetricsTables = DEFAULT_TABLES):
    """Названия и время приемов пищи"""
    types = tables.meal_types.get(meals_per_day) or tuple(f"meal {i + 1}" for i in range(meals_per_day))
    timings = tables.meal_timings.get(meals_per_day) or tuple(f"Meal {i + 1}" for i in range(meals_per_day))
    return types, timings


def allocate_meals(targets: Optional[NutritionTargets], meals_per_day: int, goal: Optional[str],
                   tables: MetricsTables = DEFAULT_TABLES) -> Optional[List[MealAllocation]]:
    """
    Разбить дневную норму КБЖУ по приемам пищи

    Каждое значение округляется отдельно; ошибка округления не перераспределяется,
    поэтому сумма по приемам может отличаться от дневной нормы на пару единиц.
    """
    if targets is None:
        return None

    ratios = meal_ratios(meals_per_day, goal, tables)
    types, timings = meal_labels(meals_per_day, tables)

    allocation = [
        MealAllocation(
            meal_type=types[i],
            timing=timings[i],
            ratio=ratio,
            calories=round_half_up(targets.calories * ratio),
            protein=round_half_up(targets.protein * ratio),
            carbs=round_half_up(targets.carbs * ratio),
            fat=round_half_up(targets.fat * ratio),
        )
        for i, ratio in enumerate(ratios)
    ]
    logger.info(f"Распределение на {meals_per_day} приемов для цели '{goal}': {[a.calories for a in allocation]}")
    return allocation


def workout_split(days_per_week: int, tables: MetricsTables = DEFAULT_TABLES) -> Sequence[str]:
    """Сплит тренировок по количеству дней; для нестандартного числа - Full Body каждый день"""
    if days_per_week < 1:
        raise ValueError(f"days_per_week must be positive, got {days_per_week}")

    split = tables.workout_splits.get(days_per_week)
    if split is None:
        split = (tables.default_split_focus,) * days_per_week
    return split


def session_minutes(session_duration: Optional[str], tables: MetricsTables = DEFAULT_TABLES) -> int:
    return tables.session_minutes.get(session_duration, tables.default_session_minutes)


def allocate_sessions(days_per_week: int, session_duration: Optional[str] = None,
                      tables: MetricsTables = DEFAULT_TABLES) -> List[SessionAllocation]:
    """Разбить неделю на тренировочные дни с фокусом"""
    split = workout_split(days_per_week, tables)
    minutes = session_minutes(session_duration, tables)
    ratio = 1.0 / len(split)

    allocation = [
        SessionAllocation(day=i + 1, focus=focus, ratio=ratio, minutes=minutes)
        for i, focus in enumerate(split)
    ]
    logger.info(f"Сплит на {days_per_week} дней: {', '.join(split)}")
    return allocation


def intensity_level(goal_timeline: Optional[str], tables: MetricsTables = DEFAULT_TABLES) -> str:
    return tables.timeline_intensity.get(goal_timeline, tables.default_intensity)


def workout_style(equipment_access: Sequence[str], workout_locations: Sequence[str]) -> str:
    """Стиль тренировок по доступному инвентарю и месту занятий"""
    if "None/minimal equipment" in equipment_access or all(loc != "Gym" for loc in workout_locations):
        return "Bodyweight-focused"
    if "Free weights" in equipment_access and "Weight machines" in equipment_access:
        return "Traditional strength training"
    if "Cardio equipment" in equipment_access:
        return "Cardio-strength blend"
    if "Resistance bands/suspension trainers" in equipment_access:
        return "Resistance training"
    return "Mixed modality"

"""
Нормализация разобранного ответа модели в стабильную структуру плана

Итоги по приемам пищи и дням всегда пересчитываются суммированием,
итоговые поля из ответа модели игнорируются.
"""
from typing import Any, Dict, List, Optional
import logging
import math
import re

from fitplan.database.models import (
    DietDay,
    DietPlan,
    Exercise,
    FoodItem,
    MacroTotals,
    Meal,
    NormalizedPlan,
    WorkoutDay,
    WorkoutPlan,
)
from fitplan.utils.errors import NormalizationFailure

logger = logging.getLogger(__name__)

_NUMBER = r"(\d+(?:\.\d+)?)"
NUTRIENT_PATTERNS = {
    "calories": re.compile(_NUMBER + r"\s*k?cal", re.IGNORECASE),
    "protein": re.compile(_NUMBER + r"\s*g\s*protein", re.IGNORECASE),
    "carbs": re.compile(_NUMBER + r"\s*g\s*carbs?", re.IGNORECASE),
    "fat": re.compile(_NUMBER + r"\s*g\s*fats?", re.IGNORECASE),
}

MEAL_NAME_RULES = {
    "breakfast": [
        ("Oatmeal", "Oatmeal Breakfast Bowl"),
        ("Eggs", "Protein-Rich Egg Breakfast"),
        ("Pancake", "Pancakes with Greek Yogurt"),
        ("Toast", "Whole Grain Toast Breakfast"),
    ],
    "lunch": [
        ("Chicken", "Grilled Chicken Lunch Bowl"),
        ("Turkey", "Lean Turkey Protein Bowl"),
        ("Quinoa", "Quinoa Power Bowl"),
        ("Salad", "Fresh Protein Salad"),
    ],
    "dinner": [
        ("Salmon", "Omega-Rich Salmon Dinner"),
        ("Beef", "Steak with Sweet Potato"),
        ("Fish", "Grilled Fish with Vegetables"),
    ],
    "snack": [
        ("Protein", "Protein Boost Snack"),
        ("Yogurt", "Greek Yogurt with Berries"),
        ("Cottage", "Protein-Rich Cottage Cheese"),
        ("Egg", "High-Protein Egg Snack"),
    ],
}

MEAL_DEFAULT_NAMES = {
    "breakfast": "Nutritious Breakfast",
    "lunch": "Balanced Lunch",
    "dinner": "Balanced Dinner Plate",
    "snack": "Nutritious Snack",
}

MEAL_DESCRIPTIONS = {
    "breakfast": "A nutritious morning meal to kickstart your day with energy and focus",
    "lunch": "Balanced midday meal with protein and complex carbs to sustain energy levels",
    "dinner": "Wholesome evening meal with lean protein and vegetables for recovery and repair",
    "snack": "Strategic snack to maintain energy and support your fitness goals",
}

DEFAULT_PROGRESSION_NOTES = "Progress by increasing weight or reps when exercises become easier."


def _number(value: Any) -> float:
    """Число из ответа модели; NaN, Infinity и нечисловые значения дают 0"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _as_list(value: Any) -> List[Any]:
    """Список; объект вместо массива превращается в значения в порядке ключей"""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return list(value.values())
    return [value]


def sum_totals(parts) -> MacroTotals:
    totals = MacroTotals()
    for part in parts:
        totals.calories += part.calories
        totals.protein += part.protein
        totals.carbs += part.carbs
        totals.fat += part.fat
    return MacroTotals(
        calories=round(totals.calories, 2),
        protein=round(totals.protein, 2),
        carbs=round(totals.carbs, 2),
        fat=round(totals.fat, 2),
    )


# ===== Разбор продуктов =====

class FoodParser:
    """Интерфейс разбора одной записи о продукте"""

    def parse(self, entry: Any) -> FoodItem:
        raise NotImplementedError


class TextFoodParser(FoodParser):
    """
    Разбор строки вида "name, quantity, Ncal, Ng protein, Ng carbs, Ng fats"

    Недостающее число дает 0 для этого поля, остальной план не страдает.
    """

    def parse(self, entry: Any) -> FoodItem:
        text = str(entry)
        parts = [part.strip() for part in text.split(",")]
        quantity = ""
        if len(parts) > 1 and not any(p.search(parts[1]) for p in NUTRIENT_PATTERNS.values()):
            quantity = parts[1]

        values = {}
        missing = []
        for field_name, pattern in NUTRIENT_PATTERNS.items():
            match = pattern.search(text)
            if match:
                values[field_name] = float(match.group(1))
            else:
                values[field_name] = 0.0
                missing.append(field_name)

        if missing:
            logger.warning(f"В описании продукта {text!r} нет значений: {', '.join(missing)}")

        return FoodItem(name=parts[0], quantity=quantity, source=text, **values)


class StructuredFoodParser(FoodParser):
    """Продукт, который уже пришел объектом с числовыми полями"""

    def parse(self, entry: Any) -> FoodItem:
        return FoodItem(
            name=str(entry.get("name") or entry.get("item") or ""),
            quantity=str(entry.get("quantity") or ""),
            calories=_number(entry.get("calories")),
            protein=_number(entry.get("protein")),
            carbs=_number(entry.get("carbs")),
            fat=_number(entry.get("fat", entry.get("fats"))),
            source=str(entry.get("source") or ""),
        )


class DefaultFoodParser(FoodParser):
    """Строки разбираются регулярками, объекты читаются как есть"""

    def __init__(self, text_parser: Optional[FoodParser] = None,
                 structured_parser: Optional[FoodParser] = None):
        self.text_parser = text_parser or TextFoodParser()
        self.structured_parser = structured_parser or StructuredFoodParser()

    def parse(self, entry: Any) -> FoodItem:
        if isinstance(entry, dict):
            return self.structured_parser.parse(entry)
        return self.text_parser.parse(entry)


# ===== Адаптеры =====

def meal_group(meal_type: str) -> str:
    meal_type = meal_type.lower()
    return "snack" if "snack" in meal_type else meal_type


def generate_meal_name(meal_type: str, foods: List[FoodItem]) -> str:
    """Название блюда по типу приема пищи и составу"""
    group = meal_group(meal_type)
    for keyword, name in MEAL_NAME_RULES.get(group, []):
        if any(keyword in food.name for food in foods):
            return name
    return MEAL_DEFAULT_NAMES.get(group, "Balanced Meal")


def generate_meal_description(meal_type: str) -> str:
    return MEAL_DESCRIPTIONS.get(meal_group(meal_type), "Balanced meal with optimal macronutrient distribution")


class DietAdapter:
    """Приводит план питания к списку дней с приемами пищи и продуктами"""

    domain = "diet"

    def __init__(self, food_parser: Optional[FoodParser] = None):
        self.food_parser = food_parser or DefaultFoodParser()

    def _day_list(self, tree: Any) -> List[Any]:
        days = tree
        if isinstance(tree, dict):
            days = tree.get("meal_plan", tree.get("days"))
            if isinstance(days, dict) and "days" in days:
                days = days["days"]
        if not isinstance(days, list):
            raise NormalizationFailure(self.domain, "expected a list of day objects under 'meal_plan'", tree)
        return days

    def _meal(self, raw_meal: Any, tree: Any) -> Meal:
        if not isinstance(raw_meal, dict):
            raise NormalizationFailure(self.domain, "every meal must be an object", tree)

        raw_foods = raw_meal.get("foods")
        if not isinstance(raw_foods, list):
            logger.warning(f"Прием пищи без списка продуктов: {raw_meal!r}")
            raw_foods = []

        meal_type = str(raw_meal.get("meal_type") or raw_meal.get("type") or "meal")
        foods = [self.food_parser.parse(entry) for entry in raw_foods]
        return Meal(
            meal_type=meal_type,
            time=str(raw_meal.get("time") or ""),
            name=generate_meal_name(meal_type, foods),
            description=generate_meal_description(meal_type),
            foods=foods,
            totals=sum_totals(foods),
        )

    def normalize(self, tree: Any) -> DietPlan:
        days = []
        for index, raw_day in enumerate(self._day_list(tree)):
            if not isinstance(raw_day, dict) or not isinstance(raw_day.get("meals"), list):
                raise NormalizationFailure(self.domain, f"day {index + 1} has no 'meals' list", tree)
            meals = [self._meal(raw_meal, tree) for raw_meal in raw_day["meals"]]
            day_number = int(_number(raw_day.get("day")) or index + 1)
            days.append(DietDay(day=day_number, meals=meals, totals=sum_totals(meal.totals for meal in meals)))

        if not days:
            raise NormalizationFailure(self.domain, "plan contains no days", tree)
        return DietPlan(days=days)


def estimate_session_calories(duration: str, focus: str) -> int:
    """Примерный расход калорий: средняя длительность * коэффициент типа * 2.5"""
    match = re.search(r"(\d+)(?:-(\d+))?", duration or "")
    if not match:
        return 0
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else low
    focus = (focus or "").lower()
    if "hiit" in focus:
        factor = 10
    elif "cardio" in focus:
        factor = 9
    elif "full" in focus:
        factor = 8
    elif "lower" in focus:
        factor = 7
    else:
        factor = 6
    return round((low + high) / 2 * factor * 2.5)


class WorkoutAdapter:
    """Приводит план тренировок к списку дней с упражнениями"""

    domain = "workout"

    def _exercise(self, index: int, raw: Any) -> Exercise:
        if not isinstance(raw, dict):
            return Exercise(name=str(raw))
        progression = raw.get("progression") if isinstance(raw.get("progression"), dict) else {}
        sets = int(_number(raw.get("sets"))) or 3
        return Exercise(
            name=str(raw.get("name") or f"Exercise {index + 1}"),
            sets=sets,
            reps=str(raw.get("reps") or "10-12"),
            rest=str(raw.get("rest") or ""),
            notes=str(raw.get("notes") or ""),
            easier=str(progression.get("easier") or raw.get("easier") or ""),
            harder=str(progression.get("harder") or raw.get("harder") or ""),
        )

    def normalize(self, tree: Any) -> WorkoutPlan:
        plan = tree.get("workout_plan", tree) if isinstance(tree, dict) else tree
        raw_days = plan.get("days") if isinstance(plan, dict) else plan
        if isinstance(raw_days, dict):
            logger.warning("Дни тренировок пришли объектом, преобразуем в список")
            raw_days = list(raw_days.values())
        if not isinstance(raw_days, list) or not raw_days:
            raise NormalizationFailure(self.domain, "expected a list of day objects under 'workout_plan.days'", tree)

        days = []
        for index, raw_day in enumerate(raw_days):
            if not isinstance(raw_day, dict):
                raise NormalizationFailure(self.domain, f"day {index + 1} is not an object", tree)

            raw_exercises = raw_day.get("exercises")
            if isinstance(raw_exercises, dict):
                logger.warning(f"Упражнения дня {index + 1} пришли объектом, преобразуем в список")
            elif raw_exercises is not None and not isinstance(raw_exercises, list):
                raise NormalizationFailure(self.domain, f"day {index + 1} 'exercises' is not a list", tree)
            exercises = [self._exercise(i, ex) for i, ex in enumerate(_as_list(raw_exercises))]

            focus = str(raw_day.get("focus") or "General Workout")
            duration = str(raw_day.get("duration") or "45-60 minutes")
            days.append(WorkoutDay(
                day=int(_number(raw_day.get("day")) or index + 1),
                focus=focus,
                duration=duration,
                warmup=[str(item) for item in _as_list(raw_day.get("warmup"))],
                exercises=exercises,
                cooldown=[str(item) for item in _as_list(raw_day.get("cooldown"))],
                total_sets=sum(ex.sets for ex in exercises),
                estimated_calories=estimate_session_calories(duration, focus),
            ))

        notes = plan.get("progression_notes") if isinstance(plan, dict) else None
        return WorkoutPlan(days=days, progression_notes=notes or DEFAULT_PROGRESSION_NOTES)


ADAPTERS = {
    "diet": DietAdapter,
    "workout": WorkoutAdapter,
}


def normalize_plan(tree: Any, domain: str) -> NormalizedPlan:
    """
    Нормализовать разобранный план выбранного домена

    Raises:
        NormalizationFailure: структура не соответствует ожиданиям адаптера
    """
    adapter_cls = ADAPTERS.get(domain)
    if adapter_cls is None:
        raise ValueError(f"Unknown plan domain: {domain}")
    try:
        return adapter_cls().normalize(tree)
    except NormalizationFailure as e:
        logger.error(f"Ошибка нормализации плана ({domain}): {e.expectation}")
        raise

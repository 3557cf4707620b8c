from dataclasses import asdict

import pytest

from fitplan.database.models import DietPlan, MacroTotals, WorkoutPlan
from fitplan.services.prompts import DIET_EXAMPLE, WORKOUT_EXAMPLE
from fitplan.utils.errors import NormalizationFailure
from fitplan.utils.recovery import recover_plan
from fitplan.utils.normalizer import (
    _number,
    DEFAULT_PROGRESSION_NOTES,
    TextFoodParser,
    estimate_session_calories,
    normalize_plan,
)


def _diet(foods, meal_type="lunch"):
    return {"meal_plan": [{"day": 1, "meals": [{"meal_type": meal_type, "time": "1:00 PM", "foods": foods}]}]}


def test_meal_totals_from_food_strings():
    plan = normalize_plan(_diet(["Chicken, 100g, 165 cal, 31g protein, 0g carbs, 3.6g fats"]), "diet")
    meal = plan.days[0].meals[0]

    assert meal.totals == MacroTotals(calories=165, protein=31, carbs=0, fat=3.6)
    assert meal.foods[0].name == "Chicken"
    assert meal.foods[0].quantity == "100g"
    assert meal.name == "Grilled Chicken Lunch Bowl"


def test_day_totals_are_recomputed():
    tree = _diet([
        "Rice, 1 cup, 200 cal, 4g protein, 45g carbs, 0.4g fats",
        "Salmon, 150g, 310 cal, 34g protein, 0g carbs, 18.5g fats",
    ], meal_type="dinner")
    tree["meal_plan"][0]["daily_totals"] = {"calories": 9999, "protein": 1, "carbs": 1, "fats": 1}

    day = normalize_plan(tree, "diet").days[0]
    assert day.totals == MacroTotals(calories=510, protein=38, carbs=45, fat=18.9)
    assert day.meals[0].name == "Omega-Rich Salmon Dinner"


def test_missing_nutrient_is_zero(caplog):
    food = TextFoodParser().parse("Apple, 1 medium, 95 cal, 25g carbs")
    assert food.calories == 95
    assert food.carbs == 25
    assert food.protein == 0
    assert food.fat == 0
    assert "protein" in caplog.text


def test_food_objects_are_accepted():
    plan = normalize_plan(_diet([{"name": "Tofu", "calories": 144, "protein": 15, "carbs": 3, "fats": 8}]), "diet")
    assert plan.days[0].meals[0].totals == MacroTotals(calories=144, protein=15, carbs=3, fat=8)


def test_meal_without_foods_list():
    tree = {"meal_plan": [{"day": 1, "meals": [{"meal_type": "snack", "time": "4:00 PM", "foods": "nuts"}]}]}
    meal = normalize_plan(tree, "diet").days[0].meals[0]
    assert meal.foods == []
    assert meal.totals == MacroTotals()
    assert meal.name == "Nutritious Snack"


def test_diet_example_normalizes():
    plan = normalize_plan(DIET_EXAMPLE, "diet")
    assert isinstance(plan, DietPlan)
    assert len(plan.days) == 1
    assert plan.days[0].totals == MacroTotals(calories=182, protein=20.5, carbs=18.5, fat=0.2)
    assert plan.days[0].meals[0].name == "Nutritious Breakfast"


def test_diet_accepts_days_key():
    tree = {"days": DIET_EXAMPLE["meal_plan"]}
    assert normalize_plan(tree, "diet").days[0].day == 1


@pytest.mark.parametrize("tree", [
    {"meal_plan": "nope"},
    {"meal_plan": [{"day": 1}]},
    {"meal_plan": [{"day": 1, "meals": ["breakfast"]}]},
    {"meal_plan": []},
    "just text",
])
def test_diet_structure_errors(tree):
    with pytest.raises(NormalizationFailure) as exc:
        normalize_plan(tree, "diet")
    assert exc.value.domain == "diet"
    assert exc.value.raw_tree == tree


def test_exercises_as_object_keep_key_order():
    tree = {"workout_plan": {"days": [{
        "day": 1,
        "focus": "Legs",
        "exercises": {"0": {"name": "Squat", "sets": 4}, "1": {"name": "Lunge"}},
    }]}}
    day = normalize_plan(tree, "workout").days[0]

    assert [exercise.name for exercise in day.exercises] == ["Squat", "Lunge"]
    assert day.exercises[1].sets == 3
    assert day.exercises[1].reps == "10-12"
    assert day.total_sets == 7


def test_days_as_object():
    tree = {"workout_plan": {"days": {"a": {"focus": "Push"}, "b": {"focus": "Pull"}}}}
    plan = normalize_plan(tree, "workout")
    assert [day.focus for day in plan.days] == ["Push", "Pull"]
    assert [day.day for day in plan.days] == [1, 2]
    assert plan.progression_notes == DEFAULT_PROGRESSION_NOTES


def test_workout_example_normalizes():
    plan = normalize_plan(WORKOUT_EXAMPLE, "workout")
    assert isinstance(plan, WorkoutPlan)
    day = plan.days[0]
    assert day.focus == "Push"
    assert [exercise.name for exercise in day.exercises] == ["Push-ups", "Dumbbell Shoulder Press"]
    assert day.exercises[0].easier == "Wall push-ups or knee push-ups"
    assert day.total_sets == 6
    assert day.estimated_calories == 600
    assert len(day.warmup) == 3


def test_workout_defaults():
    day = normalize_plan({"workout_plan": {"days": [{}]}}, "workout").days[0]
    assert day.focus == "General Workout"
    assert day.duration == "45-60 minutes"
    assert day.exercises == []


@pytest.mark.parametrize("tree", [
    {"workout_plan": {"days": []}},
    {"workout_plan": {"days": "Monday"}},
    {"workout_plan": {"days": ["Monday"]}},
    {"workout_plan": {"days": [{"exercises": "squats"}]}},
])
def test_workout_structure_errors(tree):
    with pytest.raises(NormalizationFailure):
        normalize_plan(tree, "workout")


@pytest.mark.parametrize("tree,domain", [(DIET_EXAMPLE, "diet"), (WORKOUT_EXAMPLE, "workout")])
def test_normalizing_twice_changes_nothing(tree, domain):
    plan = normalize_plan(tree, domain)
    assert normalize_plan(asdict(plan), domain) == plan


def test_unknown_domain():
    with pytest.raises(ValueError):
        normalize_plan({}, "sleep")


def test_estimate_session_calories():
    assert estimate_session_calories("45-60 minutes", "Full Body") == 1050
    assert estimate_session_calories("30 minutes", "HIIT Cardio") == 750
    assert estimate_session_calories("", "Push") == 0


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN", "Infinity", None, "ten"])
def test_number_non_finite_is_zero(value):
    assert _number(value) == 0


def test_workout_with_non_finite_numbers():
    text = '{"workout_plan": {"days": [{"day": Infinity, "exercises": [{"name": "Squat", "sets": NaN}]}]}}'
    plan = normalize_plan(recover_plan(text).tree, "workout")

    day = plan.days[0]
    assert day.day == 1
    assert day.exercises[0].sets == 3
    assert day.total_sets == 3


def test_diet_with_non_finite_numbers():
    text = ('{"meal_plan": [{"day": NaN, "meals": [{"meal_type": "lunch", "time": "1:00 PM", '
            '"foods": [{"name": "Tofu", "calories": NaN, "protein": Infinity, "carbs": 3, "fats": 8}]}]}]}')
    plan = normalize_plan(recover_plan(text).tree, "diet")

    day = plan.days[0]
    assert day.day == 1
    assert day.totals == MacroTotals(calories=0, protein=0, carbs=3, fat=8)

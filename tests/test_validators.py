from datetime import date

import pytest

from fitplan.utils.validators import (
    DataValidator,
    canonical_goal,
    normalize_diet_questionnaire,
    normalize_profile,
    normalize_workout_questionnaire,
    parse_list_answer,
)


def test_profile_from_web_form_fields():
    profile = normalize_profile({
        "gender": "Male",
        "age": "30",
        "height": "180",
        "heightUnit": "cm",
        "currentWeight": 80,
        "targetWeight": "75,5",
        "activityLevel": "moderately_active",
        "primaryGoal": "lose_weight",
        "allergies": "nuts",
        "movementsToAvoid": ["deep squats", ""],
    })

    assert profile.sex == "male"
    assert profile.age == 30
    assert profile.height == 180.0
    assert profile.weight == 80.0
    assert profile.target_weight == 75.5
    assert profile.activity_level == "moderate"
    assert profile.goal == "fat_loss"
    assert profile.allergies == ["nuts"]
    assert profile.movement_restrictions == ["deep squats"]


def test_profile_from_database_fields():
    profile = normalize_profile({
        "sex": "female",
        "date_of_birth": "1995-03-02",
        "height": 65,
        "height_unit": "inches",
        "weight": 140,
        "weight_unit": "lbs",
        "goal": "maintenance",
    })
    assert profile.date_of_birth == date(1995, 3, 2)
    assert profile.height_unit == "in"
    assert profile.weight_unit == "lbs"
    assert profile.age is None


def test_out_of_range_values_are_dropped(caplog):
    profile = normalize_profile({"age": 7, "height": 20, "weight": "abc"})
    assert profile.age is None
    assert profile.height is None
    assert profile.weight is None
    assert "abc" in caplog.text


def test_unknown_goal_kept_lowercase():
    assert canonical_goal("Get Strong") == "get strong"
    assert canonical_goal("Gain_Muscle") == "muscle_gain"
    assert canonical_goal(None) is None


@pytest.mark.parametrize("value,unit,ok", [
    (180, "cm", True),
    (70, "in", True),
    (300, "cm", False),
    (180, "in", False),
])
def test_validate_height(value, unit, ok):
    assert DataValidator.validate_height(value, unit)[0] is ok


def test_validate_weight_accepts_comma():
    assert DataValidator.validate_weight("72,5") == (True, 72.5, "")


def test_diet_questionnaire_aliases():
    questionnaire = normalize_diet_questionnaire({
        "primaryGoal": "gain_muscle",
        "totalCalories": "2800",
        "totalProtein": 180,
        "totalCarbs": 320,
        "totalFats": 78,
        "dietType": "vegan",
        "mealsPerDay": 4,
        "foodRestrictions": ["gluten"],
    })
    assert questionnaire.goal == "muscle_gain"
    assert (questionnaire.calories, questionnaire.protein, questionnaire.carbs, questionnaire.fat) == (2800, 180, 320, 78)
    assert questionnaire.diet_type == "vegan"
    assert questionnaire.meals_per_day == 4
    assert questionnaire.food_restrictions == ["gluten"]
    assert questionnaire.allergies == []


def test_diet_questionnaire_defaults():
    questionnaire = normalize_diet_questionnaire({"mealsPerDay": 12})
    assert questionnaire.goal == "maintenance"
    assert questionnaire.meals_per_day == 3
    assert questionnaire.calories is None


def test_workout_questionnaire_aliases():
    questionnaire = normalize_workout_questionnaire({
        "fitnessLevel": "Beginner",
        "daysPerWeek": "4",
        "sessionDuration": "45-60 minutes",
        "workoutEnvironments": ["Gym"],
        "equipmentAccess": ["Free weights"],
        "healthConditions": "asthma",
    })
    assert questionnaire.fitness_level == "Beginner"
    assert questionnaire.days_per_week == 4
    assert questionnaire.session_duration == "45-60 minutes"
    assert questionnaire.workout_locations == ["Gym"]
    assert questionnaire.health_conditions == ["asthma"]
    assert questionnaire.fitness_goal == "General fitness"


@pytest.mark.parametrize("text,expected", [
    ("орехи, молоко", ["орехи", "молоко"]),
    ("gluten; dairy ,", ["gluten", "dairy"]),
    ("Нет", []),
    ("  ", []),
    ("-", []),
])
def test_parse_list_answer(text, expected):
    assert parse_list_answer(text) == expected

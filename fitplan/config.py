"""
Конфигурация приложения
"""
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from dotenv import load_dotenv

load_dotenv()

# Supabase настройки
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# OpenAI настройки
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.6"))
OPENAI_MAX_TOKENS = int(os.getenv("OPENAI_MAX_TOKENS", "3000"))

# keep - старые планы деактивируются, replace - удаляются
PLAN_HISTORY = os.getenv("PLAN_HISTORY", "keep")

SYSTEM_INSTRUCTION = (
    "You must return raw JSON ONLY, with no explanations, backticks, or markdown. "
    "Never use ```json or ``` in your response."
)

# AI-коуч: короткие ответы простым текстом
COACH_INSTRUCTION = (
    "You are a personalized AI health coach. Write only in plain text without any Markdown "
    "formatting symbols like asterisks, hashtags, or dashes for lists. Keep responses under 150 words, "
    "focus on the user's specific metrics and goals, and give practical, actionable advice."
)
COACH_TEMPERATURE = float(os.getenv("COACH_TEMPERATURE", "0.7"))
COACH_MAX_TOKENS = int(os.getenv("COACH_MAX_TOKENS", "250"))
COACH_HISTORY_MESSAGES = 10
COACH_STORED_MESSAGES = 20

# Сколько планов каждого типа показывать в /history
HISTORY_LIMIT = 5

# Цели
GOALS = {
    "fat_loss": "Fat loss",
    "muscle_gain": "Muscle gain",
    "maintenance": "Maintenance",
    "endurance": "Endurance",
    "general_wellness": "General wellness",
}


def _frozen(table: Mapping) -> Mapping:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class MacroRatio:
    """Доли калорий на белки, углеводы и жиры"""
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MetricsTables:
    """
    Неизменяемые таблицы коэффициентов для калькуляторов и распределения

    Передаются в функции явно, поэтому тесты могут подставить свои значения.
    """
    activity_multipliers: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "sedentary": 1.2,      # Сидячий образ жизни
        "light": 1.375,        # Легкая активность (1-3 раза в неделю)
        "moderate": 1.55,      # Умеренная активность (3-5 раз в неделю)
        "active": 1.725,       # Высокая активность (6-7 раз в неделю)
        "very_active": 1.9,    # Очень высокая активность
    }))
    default_activity_multiplier: float = 1.55

    calorie_multipliers: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "fat_loss": 0.8,           # дефицит 20%
        "muscle_gain": 1.1,        # профицит 10%
        "endurance": 0.95,         # дефицит 5%
        "maintenance": 1.0,
        "general_wellness": 1.0,
    }))
    default_calorie_multiplier: float = 1.0

    macro_ratios: Mapping[str, MacroRatio] = field(default_factory=lambda: _frozen({
        "fat_loss": MacroRatio(0.35, 0.35, 0.30),
        "muscle_gain": MacroRatio(0.30, 0.45, 0.25),
        "endurance": MacroRatio(0.25, 0.55, 0.20),
        "maintenance": MacroRatio(0.30, 0.40, 0.30),
        "general_wellness": MacroRatio(0.30, 0.40, 0.30),
    }))
    default_macro_ratio: MacroRatio = MacroRatio(0.30, 0.40, 0.30)

    # Распределение калорий по приемам пищи: цель -> количество -> доли
    meal_ratios: Mapping[str, Mapping[int, Tuple[float, ...]]] = field(default_factory=lambda: _frozen({
        "fat_loss": _frozen({
            3: (0.35, 0.35, 0.30),          # ужин чуть легче
            4: (0.30, 0.25, 0.15, 0.30),
        }),
        "muscle_gain": _frozen({
            3: (0.33, 0.37, 0.30),
            4: (0.30, 0.25, 0.15, 0.30),
        }),
    }))

    meal_types: Mapping[int, Tuple[str, ...]] = field(default_factory=lambda: _frozen({
        2: ("breakfast", "dinner"),
        3: ("breakfast", "lunch", "dinner"),
        4: ("breakfast", "lunch", "snack", "dinner"),
        5: ("breakfast", "morning snack", "lunch", "afternoon snack", "dinner"),
        6: ("breakfast", "morning snack", "lunch", "afternoon snack", "dinner", "evening snack"),
    }))

    meal_timings: Mapping[int, Tuple[str, ...]] = field(default_factory=lambda: _frozen({
        2: ("8:00 AM", "6:00 PM"),
        3: ("8:00 AM", "1:00 PM", "7:00 PM"),
        4: ("8:00 AM", "12:00 PM", "4:00 PM", "8:00 PM"),
        5: ("7:00 AM", "10:00 AM", "1:00 PM", "4:00 PM", "7:00 PM"),
        6: ("7:00 AM", "9:30 AM", "12:00 PM", "2:30 PM", "5:00 PM", "8:00 PM"),
    }))

    workout_splits: Mapping[int, Tuple[str, ...]] = field(default_factory=lambda: _frozen({
        1: ("Full Body",),
        2: ("Upper Body", "Lower Body"),
        3: ("Push", "Pull", "Legs"),
        4: ("Upper Body", "Lower Body", "Upper Body", "Lower Body"),
        5: ("Push", "Pull", "Legs", "Upper Body", "Lower Body"),
        6: ("Push", "Pull", "Legs", "Push", "Pull", "Legs"),
        7: ("Push", "Pull", "Legs", "Upper Body", "Lower Body", "Cardio", "Active Recovery"),
    }))
    default_split_focus: str = "Full Body"

    session_minutes: Mapping[str, int] = field(default_factory=lambda: _frozen({
        "15-30 minutes": 25,
        "30-45 minutes": 40,
        "45-60 minutes": 55,
        "60-90 minutes": 75,
    }))
    default_session_minutes: int = 40

    timeline_intensity: Mapping[str, str] = field(default_factory=lambda: _frozen({
        "Within 1-2 months (Aggressive)": "High",
        "Within 3-6 months (Moderate)": "Moderate",
        "Within 6-12 months (Gradual)": "Moderate-Low",
        "No specific timeline (Sustainable long-term approach)": "Variable",
    }))
    default_intensity: str = "Moderate"

    # Вода: литров на кг веса и надбавка для активных
    water_liters_per_kg: float = 0.033
    water_active_bonus: float = 0.5
    kcal_per_kg_body_weight: float = 7700.0


DEFAULT_TABLES = MetricsTables()

"""
Калькуляторы показателей здоровья и КБЖУ

Все функции чистые: при нехватке данных возвращают None вместо исключения,
чтобы вызывающий код мог показать "нет данных", а не придуманное число.
"""
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional
import logging

from fitplan.config import DEFAULT_TABLES, MetricsTables
from fitplan.database.models import HealthMetrics, NutritionTargets, Profile

logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54
LBS_PER_KG = 2.205

# ккал на грамм
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def round_half_up(value: float, digits: int = 0) -> float:
    """Округление как в арифметике (2.5 -> 3), а не банковское"""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


# ===== Единицы измерения =====

def cm_to_inches(cm: float) -> float:
    return cm / CM_PER_INCH


def inches_to_cm(inches: float) -> float:
    return inches * CM_PER_INCH


def kg_to_lbs(kg: float) -> float:
    return kg * LBS_PER_KG


def lbs_to_kg(lbs: float) -> float:
    return lbs / LBS_PER_KG


def to_cm(height: Optional[float], unit: str) -> Optional[float]:
    if not height:
        return None
    return height if unit == "cm" else inches_to_cm(height)


def to_kg(weight: Optional[float], unit: str) -> Optional[float]:
    if not weight:
        return None
    return weight if unit == "kg" else lbs_to_kg(weight)


def format_feet_inches(cm: Optional[float]) -> str:
    """170 -> 5'7\""""
    if not cm:
        return ""
    inches = cm_to_inches(cm)
    feet = int(inches // 12)
    remaining = round_half_up(inches - feet * 12)
    return f"{feet}'{remaining}\""


def age_from_dob(dob: Optional[date], today: Optional[date] = None) -> Optional[int]:
    if dob is None:
        return None
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


# ===== Основные расчеты =====

def calculate_bmi(height: Optional[float], weight: Optional[float],
                  height_unit: str = "cm", weight_unit: str = "kg") -> Optional[float]:
    """
    Индекс массы тела: вес (кг) / рост (м)^2, с точностью до 0.1

    Returns:
        BMI или None, если рост или вес не указаны
    """
    height_cm = to_cm(height, height_unit)
    weight_kg = to_kg(weight, weight_unit)
    if height_cm is None or weight_kg is None:
        return None

    height_m = height_cm / 100
    bmi = round_half_up(weight_kg / (height_m * height_m), 1)
    logger.info(f"BMI: {bmi} ({weight_kg:.1f} кг, {height_cm:.1f} см)")
    return bmi


def bmi_category(bmi: Optional[float]) -> Optional[str]:
    if bmi is None:
        return None
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Healthy Weight"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def calculate_bmr(height: Optional[float], weight: Optional[float], sex: Optional[str],
                  age: Optional[int], height_unit: str = "cm", weight_unit: str = "kg") -> Optional[int]:
    """
    Базовый метаболизм по формуле Миффлина-Сан Жеора

    Args:
        height: рост в единицах height_unit
        weight: вес в единицах weight_unit
        sex: пол ('male' или 'female')
        age: возраст в годах

    Returns:
        BMR в ккал/день или None
    """
    height_cm = to_cm(height, height_unit)
    weight_kg = to_kg(weight, weight_unit)
    if height_cm is None or weight_kg is None or not sex or age is None:
        return None

    if sex.lower() == "male":
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) + 5
    else:  # female
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) - 161

    logger.info(f"BMR (Mifflin): {bmr:.2f} ккал для {sex}, {age} лет, {weight_kg:.1f} кг, {height_cm:.1f} см")
    return round_half_up(bmr)


def calculate_tdee(bmr: Optional[float], activity_level: Optional[str],
                   tables: MetricsTables = DEFAULT_TABLES) -> Optional[int]:
    """
    Общий расход энергии (TDEE) с учетом уровня активности

    Неизвестный уровень активности считается умеренным (1.55) с предупреждением в логе.
    """
    if bmr is None:
        return None

    multiplier = tables.activity_multipliers.get(activity_level)
    if multiplier is None:
        multiplier = tables.default_activity_multiplier
        logger.warning(
            f"Неизвестный уровень активности {activity_level!r}, используется коэффициент {multiplier}"
        )

    tdee = round_half_up(bmr * multiplier)
    logger.info(f"TDEE: {tdee} ккал (BMR: {bmr} * {multiplier})")
    return tdee


def calculate_target_calories(tdee: Optional[float], goal: Optional[str],
                              tables: MetricsTables = DEFAULT_TABLES) -> Optional[int]:
    """Целевая калорийность в зависимости от цели"""
    if tdee is None:
        return None

    multiplier = tables.calorie_multipliers.get(goal)
    if multiplier is None:
        multiplier = tables.default_calorie_multiplier
        logger.warning(f"Неизвестная цель {goal!r}, используется коэффициент {multiplier}")

    target = round_half_up(tdee * multiplier)
    logger.info(f"Целевая калорийность: {target} ккал для цели '{goal}'")
    return target


def calculate_macros(target_calories: Optional[int], goal: Optional[str],
                     tables: MetricsTables = DEFAULT_TABLES) -> Optional[NutritionTargets]:
    """
    Расчет макронутриентов (БЖУ) в граммах

    1 г белка = 4 ккал, 1 г углеводов = 4 ккал, 1 г жира = 9 ккал.
    """
    if target_calories is None:
        return None

    ratio = tables.macro_ratios.get(goal)
    if ratio is None:
        ratio = tables.default_macro_ratio
        logger.warning(f"Неизвестная цель {goal!r}, используется распределение по умолчанию")

    targets = NutritionTargets(
        calories=int(target_calories),
        protein=round_half_up(target_calories * ratio.protein / KCAL_PER_G_PROTEIN),
        carbs=round_half_up(target_calories * ratio.carbs / KCAL_PER_G_CARBS),
        fat=round_half_up(target_calories * ratio.fat / KCAL_PER_G_FAT),
    )
    logger.info(f"Макронутриенты: Б:{targets.protein}г, У:{targets.carbs}г, Ж:{targets.fat}г")
    return targets


def calculate_water_intake(weight_kg: Optional[float], activity_level: Optional[str],
                           tables: MetricsTables = DEFAULT_TABLES) -> Optional[float]:
    """Рекомендуемое количество воды в литрах"""
    if not weight_kg:
        return None
    liters = weight_kg * tables.water_liters_per_kg
    if activity_level in ("active", "very_active"):
        liters += tables.water_active_bonus
    return round_half_up(liters, 1)


def calculate_weight_projection(current_kg: Optional[float], target_kg: Optional[float],
                                tdee: Optional[int], target_calories: Optional[int],
                                weeks: int = 12,
                                tables: MetricsTables = DEFAULT_TABLES) -> Optional[List[Dict[str, float]]]:
    """
    Прогноз веса по неделям при соблюдении целевой калорийности

    Изменение веса за неделю = (калорийность - TDEE) * 7 / 7700 кг,
    прогноз не уходит дальше целевого веса.
    """
    if current_kg is None or tdee is None or target_calories is None:
        return None

    weekly_change = (target_calories - tdee) * 7 / tables.kcal_per_kg_body_weight
    series = []
    weight = current_kg
    for week in range(weeks + 1):
        if week:
            weight += weekly_change
            if target_kg is not None:
                if weekly_change < 0 and weight < target_kg:
                    weight = target_kg
                elif weekly_change > 0 and weight > target_kg:
                    weight = target_kg
        series.append({"week": week, "weight": round_half_up(weight, 1)})
    return series


def compute_health_metrics(profile: Profile, tables: MetricsTables = DEFAULT_TABLES,
                           today: Optional[date] = None) -> HealthMetrics:
    """
    Полный расчет показателей профиля

    Returns:
        HealthMetrics, где недоступные показатели равны None
    """
    age = profile.age if profile.age is not None else age_from_dob(profile.date_of_birth, today)

    bmi = calculate_bmi(profile.height, profile.weight, profile.height_unit, profile.weight_unit)
    bmr = calculate_bmr(profile.height, profile.weight, profile.sex, age,
                        profile.height_unit, profile.weight_unit)
    tdee = calculate_tdee(bmr, profile.activity_level, tables)
    calorie_target = calculate_target_calories(tdee, profile.goal, tables)
    targets = calculate_macros(calorie_target, profile.goal, tables)

    weight_kg = to_kg(profile.weight, profile.weight_unit)
    target_kg = to_kg(profile.target_weight, profile.weight_unit)

    return HealthMetrics(
        bmi=bmi,
        bmi_category=bmi_category(bmi),
        bmr=bmr,
        tdee=tdee,
        calorie_target=calorie_target,
        targets=targets,
        water_liters=calculate_water_intake(weight_kg, profile.activity_level, tables),
        projection=calculate_weight_projection(weight_kg, target_kg, tdee, calorie_target, tables=tables),
    )

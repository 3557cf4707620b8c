"""
Текстовое представление планов и показателей для сообщений Telegram
"""
from typing import Dict, List, Sequence

from fitplan.database.models import DietPlan, HealthMetrics, MacroTotals, PlanRecord, Profile, WorkoutPlan

TELEGRAM_LIMIT = 4000


def _number(value: float) -> str:
    return f"{value:g}"


def format_totals(totals: MacroTotals) -> str:
    return (f"🔥 {_number(totals.calories)} ккал | 🥩 Б {_number(totals.protein)} г | "
            f"🍞 У {_number(totals.carbs)} г | 🥑 Ж {_number(totals.fat)} г")


def format_diet_plan(plan: DietPlan) -> str:
    """План питания по дням"""
    lines = ["🍽 ПЛАН ПИТАНИЯ", ""]
    for day in plan.days:
        lines.append(f"📅 День {day.day}")
        for meal in day.meals:
            lines.append(f"\n🔹 {meal.meal_type.capitalize()} ({meal.time}): {meal.name}")
            for food in meal.foods:
                quantity = f", {food.quantity}" if food.quantity else ""
                lines.append(f"   • {food.name}{quantity}")
            lines.append(f"   {format_totals(meal.totals)}")
        lines.append(f"\nИтого за день: {format_totals(day.totals)}")
        lines.append("")
    return "\n".join(lines).strip()


def format_workout_plan(plan: WorkoutPlan) -> str:
    """План тренировок по дням"""
    lines = ["🏋️ ПЛАН ТРЕНИРОВОК", ""]
    for day in plan.days:
        lines.append(f"📅 День {day.day}: {day.focus.upper()} ({day.duration})")
        lines.append(f"Подходов: {day.total_sets}, ~{day.estimated_calories} ккал")

        lines.append("\nРазминка:")
        lines.extend(f"   • {item}" for item in day.warmup)

        lines.append("\nОсновная часть:")
        for exercise in day.exercises:
            lines.append(f"   • {exercise.name}: {exercise.sets} × {exercise.reps}, отдых {exercise.rest}")
            if exercise.notes:
                lines.append(f"     {exercise.notes}")
            if exercise.easier:
                lines.append(f"     Легче: {exercise.easier}")
            if exercise.harder:
                lines.append(f"     Сложнее: {exercise.harder}")

        lines.append("\nЗаминка:")
        lines.extend(f"   • {item}" for item in day.cooldown)
        lines.append("")

    lines.append(f"📈 Прогрессия: {plan.progression_notes}")
    return "\n".join(lines).strip()


def format_health_metrics(metrics: HealthMetrics) -> str:
    def show(value, suffix=""):
        return f"{value}{suffix}" if value is not None else "нет данных"

    lines = [
        "📊 ПОКАЗАТЕЛИ",
        "",
        f"BMI: {show(metrics.bmi)} ({show(metrics.bmi_category)})",
        f"BMR: {show(metrics.bmr, ' ккал')}",
        f"TDEE: {show(metrics.tdee, ' ккал')}",
        f"Целевая калорийность: {show(metrics.calorie_target, ' ккал')}",
        f"Вода: {show(metrics.water_liters, ' л')}",
    ]
    if metrics.targets is not None:
        lines.append(f"БЖУ: {metrics.targets.protein} г / {metrics.targets.fat} г / {metrics.targets.carbs} г")
    if metrics.projection:
        last = metrics.projection[-1]
        lines.append(f"Прогноз через {last['week']} нед.: {last['weight']} кг")
    return "\n".join(lines)


GOAL_NAMES = {
    "fat_loss": "Похудение",
    "muscle_gain": "Набор мышечной массы",
    "maintenance": "Поддержание веса",
    "endurance": "Выносливость",
    "general_wellness": "Общее самочувствие",
}

ACTIVITY_NAMES = {
    "sedentary": "Сидячий",
    "light": "Легкая",
    "moderate": "Умеренная",
    "active": "Высокая",
    "very_active": "Очень высокая",
}


def format_profile(profile: Profile) -> str:
    """Профиль пользователя для сообщения"""
    def show(value, suffix=""):
        if value is None:
            return "не указано"
        return f"{value:g}{suffix}" if isinstance(value, float) else f"{value}{suffix}"

    gender = {"male": "Мужской", "female": "Женский"}.get(profile.sex, "не указан")
    health = ", ".join(profile.health_conditions) or "нет"
    return f"""👤 ТВОЙ ПРОФИЛЬ

👤 Пол: {gender}
🎂 Возраст: {show(profile.age, " лет")}
📏 Рост: {show(profile.height, " " + profile.height_unit)}
⚖️ Текущий вес: {show(profile.weight, " " + profile.weight_unit)}
🎯 Целевой вес: {show(profile.target_weight, " " + profile.weight_unit)}
💪 Активность: {ACTIVITY_NAMES.get(profile.activity_level, show(profile.activity_level))}
🎯 Цель: {GOAL_NAMES.get(profile.goal, show(profile.goal))}
🩺 Здоровье: {health}"""


def _plan_summary(record: PlanRecord) -> str:
    plan = record.plan
    if isinstance(plan, DietPlan):
        calories = round(sum(day.totals.calories for day in plan.days) / len(plan.days)) if plan.days else 0
        return f"{len(plan.days)} дн., ~{calories} ккал/день"
    return f"{len(plan.days)} трен./нед."


def format_plan_history(history: Dict[str, Sequence[PlanRecord]]) -> str:
    """История планов по типам, новые первыми"""
    titles = {"diet": "🍽 Питание", "workout": "🏋️ Тренировки"}
    lines = ["🗂 ИСТОРИЯ ПЛАНОВ"]
    for domain, records in history.items():
        lines.append(f"\n{titles.get(domain, domain)}:")
        if not records:
            lines.append("   планов пока нет")
        for record in records:
            status = "✅ активный" if record.is_active else "архив"
            lines.append(f"   • {record.created_at:%d.%m.%Y %H:%M} - {_plan_summary(record)} ({status})")
    return "\n".join(lines)


def split_message(text: str, limit: int = TELEGRAM_LIMIT) -> List[str]:
    """Разбить длинный текст по строкам на части не длиннее limit"""
    chunks = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks

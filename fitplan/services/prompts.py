"""
Промпты для генерации планов питания и тренировок

Формат ответа в промпте и поля, которые ждет нормализатор, должны
совпадать: примеры ниже прогоняются через нормализатор в тестах.
"""
from typing import Dict, List, Optional, Sequence
import json

from fitplan.config import DEFAULT_TABLES, GOALS, MetricsTables
from fitplan.database.models import (
    DietQuestionnaire,
    HealthMetrics,
    MealAllocation,
    NutritionTargets,
    Profile,
    SessionAllocation,
    WorkoutQuestionnaire,
)
from fitplan.utils.allocator import intensity_level, workout_style

NONE_REPORTED = "none reported"

DIET_PLAN_DAYS = 3

DIET_EXAMPLE = {
    "meal_plan": [
        {
            "day": 1,
            "meals": [
                {
                    "meal_type": "breakfast",
                    "time": "8:00 AM",
                    "foods": [
                        "Greek yogurt, 1 cup, 140 cal, 20g protein, 8g carbs, 0g fats",
                        "Blueberries, 1/2 cup, 42 cal, 0.5g protein, 10.5g carbs, 0.2g fats",
                    ],
                }
            ],
            "daily_totals": {"calories": 1802, "protein": 135, "carbs": 180, "fats": 60},
        }
    ]
}

WORKOUT_EXAMPLE = {
    "workout_plan": {
        "days": [
            {
                "day": 1,
                "focus": "Push",
                "duration": "40 minutes",
                "warmup": [
                    "5 minutes light cardio (jumping jacks, high knees, jogging in place)",
                    "10 arm circles each direction",
                    "10 body weight squats",
                ],
                "exercises": [
                    {
                        "name": "Push-ups",
                        "sets": 3,
                        "reps": "8-12",
                        "rest": "60 seconds",
                        "notes": "Keep core tight, lower chest to floor with elbows at 45° angle",
                        "progression": {
                            "easier": "Wall push-ups or knee push-ups",
                            "harder": "Decline push-ups or add resistance band",
                        },
                    },
                    {
                        "name": "Dumbbell Shoulder Press",
                        "sets": 3,
                        "reps": "10-12",
                        "rest": "60-90 seconds",
                        "notes": "Start with weights at shoulder level, press overhead without locking elbows",
                        "progression": {
                            "easier": "Seated shoulder press with lighter weights",
                            "harder": "Standing single-arm press or increase weight",
                        },
                    },
                ],
                "cooldown": [
                    "Chest stretch (30 seconds per side)",
                    "Tricep stretch (30 seconds per side)",
                    "Child's pose (30 seconds)",
                ],
            }
        ],
        "progression_notes": (
            "To progress this plan, first increase reps to the upper end of ranges, then add sets, "
            "then increase resistance. Aim to increase either reps, sets, or resistance every 1-2 weeks."
        ),
    }
}

GOAL_CONSIDERATIONS = {
    "fat_loss": [
        "Include foods with high satiety to manage hunger",
        "Emphasize protein and fiber-rich foods",
        "Include low-calorie, high-volume foods",
    ],
    "muscle_gain": [
        "Prioritize complete protein sources",
        "Include nutrient-dense carb sources for energy",
        "Ensure adequate healthy fats for hormone production",
    ],
    "endurance": [
        "Favor complex carbohydrates around training sessions",
        "Include electrolyte-rich foods",
    ],
}

DIET_TYPE_CONSIDERATIONS = {
    "vegetarian": [
        "Ensure complete proteins through complementary plant sources",
        "Include diverse plant proteins (legumes, tofu, tempeh, seitan, dairy)",
    ],
    "vegan": [
        "Ensure complete proteins through complementary plant sources",
        "Include B12, iron, and omega-3 rich foods",
        "Focus on diverse plant proteins (legumes, tofu, tempeh, seitan)",
    ],
}

INTENSITY_CONSIDERATIONS = {
    "High": [
        "Include higher intensity work with appropriate recovery",
        "Focus on efficient, compound movements",
        "Include optional intensity techniques for advanced users",
    ],
    "Moderate": [
        "Balance challenging work with adequate recovery",
        "Mix compound and isolation exercises",
        "Include progressive overload each week",
    ],
    "Moderate-Low": [
        "Emphasize proper form and technique",
        "Start with lower volume and gradually increase",
        "Include more rest between challenging sets",
    ],
    "Variable": [
        "Design a sustainable approach with varied intensity",
        "Include both challenging and recovery-focused sessions",
        "Focus on enjoyable, sustainable exercise selection",
    ],
}

LEVEL_CONSIDERATIONS = {
    "Beginner": [
        "Focus on foundational movement patterns",
        "Include detailed form instructions",
        "Start with lower volume and emphasize technique",
    ],
    "Advanced": [
        "Include more advanced exercise variations",
        "Include options for intensity techniques",
    ],
}

HOME_CONSIDERATIONS = [
    "Ensure exercises are apartment/home-friendly (low noise, minimal space requirements)",
    "Provide alternatives for equipment limitations",
]


def listing(items: Sequence[str]) -> str:
    """Список через запятую или "none reported", чтобы модель не додумывала ограничения"""
    items = [item for item in items if item]
    return ", ".join(items) if items else NONE_REPORTED


def _bullets(lines: List[str]) -> str:
    return "\n".join(f"- {line}" for line in lines) if lines else "- None"


def build_diet_prompt(questionnaire: DietQuestionnaire, targets: NutritionTargets,
                      allocation: Sequence[MealAllocation], health_conditions: Sequence[str] = ()) -> str:
    """Промпт для 3-дневного плана питания"""
    goal_name = GOALS.get(questionnaire.goal, questionnaire.goal)
    meal_types = ", ".join(f'"{meal.meal_type}"' for meal in allocation)
    distribution = "\n".join(
        f"  * {meal.meal_type} ({meal.timing}): ~{meal.calories} calories, {meal.protein}g protein, "
        f"{meal.carbs}g carbs, {meal.fat}g fats"
        for meal in allocation
    )
    considerations = (GOAL_CONSIDERATIONS.get(questionnaire.goal, [])
                      + DIET_TYPE_CONSIDERATIONS.get(questionnaire.diet_type, []))

    return f"""You are a nutritionist creating a {DIET_PLAN_DAYS}-day meal plan. Return a VALID JSON OBJECT ONLY with NO text outside the JSON structure. DO NOT use code blocks, markdown, or backticks.

### USER PROFILE:
- Goal: {goal_name}
- Daily targets: {targets.calories} calories, {targets.protein}g protein, {targets.carbs}g carbs, {targets.fat}g fats
- Diet type: {questionnaire.diet_type}
- Food restrictions: {listing(questionnaire.food_restrictions)}
- Allergies: {listing(questionnaire.allergies)}
- Health conditions: {listing(health_conditions)}

### MEAL STRUCTURE:
- Meals per day: {len(allocation)}
- Daily meal distribution:
{distribution}

### MEAL PLANNING REQUIREMENTS:
1) Create a {DIET_PLAN_DAYS}-day plan with realistic, culturally appropriate foods for each meal type
2) Strictly adhere to the daily calorie and macro targets (±5% tolerance)
3) Each meal should be appropriate for its type and time of day
4) No dietary restrictions violations or allergens
5) Include variety across days while maintaining some staple foods
6) Focus on commonly available, affordable ingredients with specific quantities

### SPECIAL CONSIDERATIONS:
{_bullets(considerations)}

### OUTPUT FORMAT - IMPORTANT:
1) The top-level object has one key "meal_plan": array of day objects
2) Each day must have:
   - "day": integer (1-{DIET_PLAN_DAYS})
   - "meals": array of meal objects
   - "daily_totals": object with "calories", "protein", "carbs" and "fats" numbers
3) Each meal must contain:
   - "meal_type": string ({meal_types})
   - "time": string (meal timing)
   - "foods": array of STRINGS ONLY, formatted exactly as "item, quantity, N cal, Ng protein, Ng carbs, Ng fats"
4) Do NOT create nested food objects. Use simple strings as shown below.

EXAMPLE FORMAT:
{json.dumps(DIET_EXAMPLE, indent=2)}

Remember: Return ONLY valid JSON with no explanations, backticks, or markdown.
"""


def build_workout_prompt(questionnaire: WorkoutQuestionnaire, allocation: Sequence[SessionAllocation],
                         tables: MetricsTables = DEFAULT_TABLES) -> str:
    """Промпт для недельного плана тренировок"""
    intensity = intensity_level(questionnaire.goal_timeline, tables)
    style = workout_style(questionnaire.equipment_access, questionnaire.workout_locations)
    split = ", ".join(session.focus for session in allocation)
    minutes = allocation[0].minutes if allocation else 0

    equipment = questionnaire.equipment_access
    if "None/minimal equipment" in equipment:
        equipment_text = "Bodyweight exercises only"
    else:
        equipment_text = ", ".join(equipment) if equipment else "No equipment"

    considerations = (INTENSITY_CONSIDERATIONS.get(intensity, [])
                      + LEVEL_CONSIDERATIONS.get(questionnaire.fitness_level, []))
    if "Home" in questionnaire.workout_locations:
        considerations += HOME_CONSIDERATIONS

    return f"""You are a certified personal trainer creating a 1-week workout plan that can be repeated. Return a VALID JSON OBJECT ONLY with NO text outside the JSON structure. DO NOT use code blocks, markdown, or backticks.

### USER PROFILE:
- Fitness goal: {questionnaire.fitness_goal}
- Fitness level: {questionnaire.fitness_level}
- Timeline: {questionnaire.goal_timeline}
- Intensity level: {intensity}
- Health conditions: {listing(questionnaire.health_conditions)}
- Movement restrictions: {listing(questionnaire.movement_restrictions)}

### WORKOUT STRUCTURE:
- Days per week: {len(allocation)}
- Preferred days: {", ".join(questionnaire.preferred_days) or "Flexible"}
- Session duration: {questionnaire.session_duration} (about {minutes} minutes)
- Workout style: {style}
- Workout split: {split}
- Training environments: {listing(questionnaire.workout_locations)}
- Available equipment: {equipment_text}

### WORKOUT PLANNING REQUIREMENTS:
1) Create a comprehensive 1-week plan with exactly {len(allocation)} workout days following the split above
2) Structure each workout with warm-up, main exercises, and cool-down components
3) Include appropriate sets, reps, and rest periods for each exercise
4) Account for proper recovery between similar muscle groups
5) Ensure workouts are realistic for the specified time duration
6) Include clear instructions and form cues for each exercise
7) Avoid any movements specified in the restrictions
8) Design exercises with progression options (easier and harder variations)

### SPECIAL CONSIDERATIONS:
{_bullets(considerations)}

### OUTPUT FORMAT - IMPORTANT:
1) The top-level object has one key "workout_plan": object containing the weekly plan
2) The workout plan must include:
   - "days": ARRAY of daily workout objects
   - "progression_notes": string with guidance on how to progress in subsequent weeks
3) Each daily workout must contain:
   - "day": integer (1-7)
   - "focus": string (e.g., "Push", "Pull", "Legs", "Full Body")
   - "duration": string (approximate workout time)
   - "warmup": array of STRINGS describing warmup activities (3-5 minutes total)
   - "exercises": ARRAY of exercise objects
   - "cooldown": array of STRINGS describing cooldown/stretching (3-5 minutes total)
4) Each exercise object must include:
   - "name": string
   - "sets": integer
   - "reps": string (a range or a time duration)
   - "rest": string
   - "notes": string (form cues or special instructions)
   - "progression": object with "easier" and "harder" strings

EXAMPLE FORMAT:
{json.dumps(WORKOUT_EXAMPLE, indent=2, ensure_ascii=False)}

Remember: Return ONLY valid JSON with no explanations, backticks, or markdown.
"""


def _known(value, suffix: str = "") -> str:
    return f"{value}{suffix}" if value is not None else "not specified"


def build_coach_prompt(profile: Optional[Profile], metrics: HealthMetrics,
                       history: Sequence[Dict[str, str]], message: str, name: Optional[str] = None) -> str:
    """
    Промпт для AI-коуча с профилем, показателями и последними репликами

    history - сообщения вида {"role": "user" | "assistant", "content": ...}
    """
    profile = profile or Profile()
    goal = GOALS.get(profile.goal, profile.goal) if profile.goal else None
    height_unit = "in" if profile.height_unit == "in" else "cm"
    weight_unit = "lbs" if profile.weight_unit == "lbs" else "kg"

    conversation = "\n".join(
        f"{'User' if entry['role'] == 'user' else 'Coach'}: {entry['content']}"
        for entry in history
    ) or "No previous messages"

    return f"""You are an AI health and fitness coach providing personalized guidance to the user.

## USER PROFILE:
- Name: {name or "User"}
- Primary fitness goal: {_known(goal)}
- Age: {_known(profile.age)}
- Height: {_known(profile.height, " " + height_unit)}
- Weight: {_known(profile.weight, " " + weight_unit)}
- BMI: {_known(metrics.bmi)} ({_known(metrics.bmi_category)})
- Health conditions: {listing(profile.health_conditions)}
- Daily calorie target: {_known(metrics.calorie_target, " calories")}

## COACHING STYLE:
- Be supportive, encouraging, and science-based
- Keep answers concise: 2-4 sentences unless the user asks for detail
- Give practical steps the user can apply today
- Do not make medical diagnoses
- Use 1-2 emojis at most

## SAFETY GUIDELINES:
- Recommend consulting a healthcare professional for medical concerns
- Do not promise specific outcomes
- Never recommend extreme diets or dangerous exercises
- Do not give advice about medications

## PREVIOUS CONVERSATION:
{conversation}

## CURRENT USER MESSAGE:
{message}

Respond as the user's health coach:"""

"""
Модели данных профиля, целей и планов
"""
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union


@dataclass
class Profile:
    """Профиль пользователя с физическими параметрами"""
    sex: Optional[str] = None  # male/female
    age: Optional[int] = None
    date_of_birth: Optional[date] = None
    height: Optional[float] = None
    height_unit: str = "cm"  # cm / in
    weight: Optional[float] = None
    weight_unit: str = "kg"  # kg / lbs
    target_weight: Optional[float] = None
    activity_level: Optional[str] = None  # sedentary, light, moderate, active, very_active
    goal: Optional[str] = None  # fat_loss, muscle_gain, maintenance, endurance, general_wellness
    health_conditions: List[str] = field(default_factory=list)
    movement_restrictions: List[str] = field(default_factory=list)
    food_restrictions: List[str] = field(default_factory=list)
    allergies: List[str] = field(default_factory=list)


@dataclass
class DietQuestionnaire:
    """Анкета для генерации плана питания"""
    goal: str = "maintenance"
    calories: Optional[int] = None
    protein: Optional[int] = None
    carbs: Optional[int] = None
    fat: Optional[int] = None
    diet_type: str = "balanced"
    meals_per_day: int = 3
    food_restrictions: List[str] = field(default_factory=list)
    allergies: List[str] = field(default_factory=list)


@dataclass
class WorkoutQuestionnaire:
    """Анкета для генерации плана тренировок"""
    fitness_goal: str = "General fitness"
    fitness_level: str = "Intermediate"
    goal_timeline: str = "Within 3-6 months (Moderate)"
    days_per_week: int = 3
    session_duration: str = "30-45 minutes"
    health_conditions: List[str] = field(default_factory=list)
    movement_restrictions: List[str] = field(default_factory=list)
    preferred_days: List[str] = field(default_factory=list)
    workout_locations: List[str] = field(default_factory=list)
    equipment_access: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NutritionTargets:
    """Дневная норма КБЖУ"""
    calories: int
    protein: int  # грамм
    carbs: int  # грамм
    fat: int  # грамм


@dataclass
class HealthMetrics:
    """Производные показатели профиля; None означает "нет данных" """
    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
    bmr: Optional[int] = None
    tdee: Optional[int] = None
    calorie_target: Optional[int] = None
    targets: Optional[NutritionTargets] = None
    water_liters: Optional[float] = None
    projection: Optional[List[Dict[str, float]]] = None


@dataclass(frozen=True)
class MealAllocation:
    """Норма одного приема пищи"""
    meal_type: str
    timing: str
    ratio: float
    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class SessionAllocation:
    """Одна тренировка недели"""
    day: int
    focus: str
    ratio: float
    minutes: int


@dataclass
class MacroTotals:
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


@dataclass
class FoodItem:
    name: str
    quantity: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    source: str = ""


@dataclass
class Meal:
    meal_type: str
    time: str
    name: str
    description: str
    foods: List[FoodItem] = field(default_factory=list)
    totals: MacroTotals = field(default_factory=MacroTotals)


@dataclass
class DietDay:
    day: int
    meals: List[Meal] = field(default_factory=list)
    totals: MacroTotals = field(default_factory=MacroTotals)


@dataclass
class DietPlan:
    """Нормализованный план питания"""
    days: List[DietDay] = field(default_factory=list)
    domain: str = "diet"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DietPlan":
        days = []
        for day in data.get("days", []):
            meals = [
                Meal(
                    meal_type=meal["meal_type"],
                    time=meal["time"],
                    name=meal["name"],
                    description=meal["description"],
                    foods=[FoodItem(**food) for food in meal.get("foods", [])],
                    totals=MacroTotals(**meal["totals"]),
                )
                for meal in day.get("meals", [])
            ]
            days.append(DietDay(day=day["day"], meals=meals, totals=MacroTotals(**day["totals"])))
        return cls(days=days)


@dataclass
class Exercise:
    name: str
    sets: int = 3
    reps: str = "10-12"
    rest: str = ""
    notes: str = ""
    easier: str = ""
    harder: str = ""


@dataclass
class WorkoutDay:
    day: int
    focus: str
    duration: str
    warmup: List[str] = field(default_factory=list)
    exercises: List[Exercise] = field(default_factory=list)
    cooldown: List[str] = field(default_factory=list)
    total_sets: int = 0
    estimated_calories: int = 0


@dataclass
class WorkoutPlan:
    """Нормализованный план тренировок"""
    days: List[WorkoutDay] = field(default_factory=list)
    progression_notes: str = ""
    domain: str = "workout"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutPlan":
        days = []
        for day in data.get("days", []):
            day = dict(day)
            day["exercises"] = [Exercise(**ex) for ex in day.get("exercises", [])]
            days.append(WorkoutDay(**day))
        return cls(days=days, progression_notes=data.get("progression_notes", ""))


NormalizedPlan = Union[DietPlan, WorkoutPlan]


def plan_from_dict(domain: str, data: Dict[str, Any]) -> NormalizedPlan:
    """Восстановить план из сохраненного словаря"""
    if domain == "diet":
        return DietPlan.from_dict(data)
    if domain == "workout":
        return WorkoutPlan.from_dict(data)
    raise ValueError(f"Unknown plan domain: {domain}")


@dataclass
class PlanRecord:
    """Сохраненный план пользователя"""
    owner_id: str
    domain: str  # diet / workout
    plan: NormalizedPlan
    source_snapshot: Dict[str, Any]
    created_at: datetime
    is_active: bool = True
    id: Optional[Any] = None

    def to_row(self) -> Dict[str, Any]:
        """Строка для таблицы plans"""
        row = {
            "owner_id": self.owner_id,
            "domain": self.domain,
            "plan": asdict(self.plan),
            "source_snapshot": self.source_snapshot,
            "created_at": self.created_at.isoformat(),
            "is_active": self.is_active,
        }
        if self.id is not None:
            row["id"] = self.id
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PlanRecord":
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            owner_id=row["owner_id"],
            domain=row["domain"],
            plan=plan_from_dict(row["domain"], row["plan"]),
            source_snapshot=row.get("source_snapshot") or {},
            created_at=created_at,
            is_active=row.get("is_active", True),
            id=row.get("id"),
        )

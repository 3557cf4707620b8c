"""
Конвейер генерации планов: цели -> промпт -> модель -> разбор -> нормализация -> сохранение
"""
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple
import logging

from fitplan.config import DEFAULT_TABLES, MetricsTables
from fitplan.database.models import (
    DietQuestionnaire,
    NutritionTargets,
    PlanRecord,
    Profile,
    WorkoutQuestionnaire,
)
from fitplan.database.queries import PlanStore
from fitplan.services.openai_service import OpenAIService
from fitplan.services.prompts import build_diet_prompt, build_workout_prompt
from fitplan.utils.allocator import allocate_meals, allocate_sessions
from fitplan.utils.calculators import calculate_macros, compute_health_metrics
from fitplan.utils.errors import GenerationInProgress, InputIncomplete
from fitplan.utils.normalizer import normalize_plan
from fitplan.utils.recovery import recover_plan

logger = logging.getLogger(__name__)


@dataclass
class PreparedPrompt:
    """Промпт и снимок данных, из которых он собран"""
    text: str
    snapshot: Dict[str, Any]


def resolve_nutrition_targets(questionnaire: DietQuestionnaire, profile: Optional[Profile],
                              tables: MetricsTables = DEFAULT_TABLES) -> NutritionTargets:
    """
    Дневная норма из анкеты, а если ее там нет - из профиля с целью из анкеты

    Если в анкете есть только калории, недостающие БЖУ считаются от этих калорий.

    Raises:
        InputIncomplete: нормы нет в анкете и ее нельзя рассчитать по профилю
    """
    given = (questionnaire.calories, questionnaire.protein, questionnaire.carbs, questionnaire.fat)
    if all(value is not None for value in given):
        return NutritionTargets(*given)

    if questionnaire.calories is not None:
        derived = calculate_macros(questionnaire.calories, questionnaire.goal, tables)
        return NutritionTargets(
            calories=questionnaire.calories,
            protein=questionnaire.protein if questionnaire.protein is not None else derived.protein,
            carbs=questionnaire.carbs if questionnaire.carbs is not None else derived.carbs,
            fat=questionnaire.fat if questionnaire.fat is not None else derived.fat,
        )

    if profile is not None:
        metrics = compute_health_metrics(replace(profile, goal=questionnaire.goal), tables)
        if metrics.targets is not None:
            return metrics.targets

    missing = ["calories"]
    if profile is None:
        missing.append("profile")
    else:
        missing += [name for name in ("height", "weight", "sex", "age")
                    if getattr(profile, name) is None and not (name == "age" and profile.date_of_birth)]
    raise InputIncomplete(missing)


def merge_lists(*groups: Sequence[str]) -> List[str]:
    """Объединить списки без повторов (без учета регистра), порядок сохраняется"""
    merged = []
    seen = set()
    for group in groups:
        for item in group:
            key = item.strip().lower()
            if key and key not in seen:
                seen.add(key)
                merged.append(item.strip())
    return merged


def prepare_diet_prompt(questionnaire: DietQuestionnaire, profile: Optional[Profile] = None,
                        tables: MetricsTables = DEFAULT_TABLES) -> PreparedPrompt:
    targets = resolve_nutrition_targets(questionnaire, profile, tables)
    allocation = allocate_meals(targets, questionnaire.meals_per_day, questionnaire.goal, tables)

    # ограничения из профиля тоже попадают в промпт
    health_conditions = []
    if profile is not None:
        questionnaire = replace(
            questionnaire,
            food_restrictions=merge_lists(questionnaire.food_restrictions, profile.food_restrictions),
            allergies=merge_lists(questionnaire.allergies, profile.allergies),
        )
        health_conditions = merge_lists(profile.health_conditions)

    return PreparedPrompt(
        text=build_diet_prompt(questionnaire, targets, allocation, health_conditions),
        snapshot={
            "questionnaire": asdict(questionnaire),
            "health_conditions": health_conditions,
            "targets": asdict(targets),
            "allocation": [asdict(meal) for meal in allocation],
        },
    )


def prepare_workout_prompt(questionnaire: WorkoutQuestionnaire, profile: Optional[Profile] = None,
                           tables: MetricsTables = DEFAULT_TABLES) -> PreparedPrompt:
    if profile is not None:
        questionnaire = replace(
            questionnaire,
            health_conditions=merge_lists(questionnaire.health_conditions, profile.health_conditions),
            movement_restrictions=merge_lists(questionnaire.movement_restrictions, profile.movement_restrictions),
        )
    allocation = allocate_sessions(questionnaire.days_per_week, questionnaire.session_duration, tables)
    return PreparedPrompt(
        text=build_workout_prompt(questionnaire, allocation, tables),
        snapshot={
            "questionnaire": asdict(questionnaire),
            "allocation": [asdict(session) for session in allocation],
        },
    )


PROMPT_BUILDERS: Dict[str, Callable[..., PreparedPrompt]] = {
    "diet": prepare_diet_prompt,
    "workout": prepare_workout_prompt,
}


class PlanService:
    """
    Единый конвейер для планов питания и тренировок

    Одновременная генерация одного и того же плана для одного пользователя
    отклоняется с GenerationInProgress.
    """

    def __init__(self, openai_service: OpenAIService, store: PlanStore,
                 tables: MetricsTables = DEFAULT_TABLES):
        self.openai = openai_service
        self.store = store
        self.tables = tables
        self._in_flight: Set[Tuple[str, str]] = set()

    async def generate(self, owner_id: str, domain: str, questionnaire,
                       profile: Optional[Profile] = None) -> PlanRecord:
        """
        Сгенерировать, нормализовать и сохранить план

        Raises:
            InputIncomplete, CompletionUnavailable, RecoveryFailure,
            NormalizationFailure, GenerationInProgress
        """
        builder = PROMPT_BUILDERS.get(domain)
        if builder is None:
            raise ValueError(f"Unknown plan domain: {domain}")

        key = (owner_id, domain)
        if key in self._in_flight:
            raise GenerationInProgress(owner_id, domain)
        self._in_flight.add(key)

        try:
            prepared = builder(questionnaire, profile, self.tables)
            logger.info(f"Генерация плана {domain} для пользователя {owner_id}")

            raw_text = await self.openai.complete(prepared.text)
            recovered = recover_plan(raw_text)
            logger.info(f"План {domain} разобран на стадии {recovered.stage}")

            plan = normalize_plan(recovered.tree, domain)
            return await self.store.put(owner_id, domain, plan, prepared.snapshot)
        finally:
            self._in_flight.discard(key)

    async def generate_diet_plan(self, owner_id: str, questionnaire: DietQuestionnaire,
                                 profile: Optional[Profile] = None) -> PlanRecord:
        return await self.generate(owner_id, "diet", questionnaire, profile)

    async def generate_workout_plan(self, owner_id: str, questionnaire: WorkoutQuestionnaire,
                                    profile: Optional[Profile] = None) -> PlanRecord:
        return await self.generate(owner_id, "workout", questionnaire, profile)

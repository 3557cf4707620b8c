"""
Запросы к Supabase: планы, профили и анкеты
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from fitplan.config import PLAN_HISTORY
from fitplan.database.models import NormalizedPlan, PlanRecord
from fitplan.utils.errors import PlanNotFound

logger = logging.getLogger(__name__)

QUESTIONNAIRE_TABLES = {
    "diet": "diet_questionnaires",
    "workout": "fitness_questionnaires",
}


class PlanStore:
    """Хранилище планов с ключом (owner_id, domain)"""

    def __init__(self, supabase_client, history: str = PLAN_HISTORY):
        self.client = supabase_client
        self.history = history

    # ===== PLANS =====
    async def put(self, owner_id: str, domain: str, plan: NormalizedPlan,
                  source_snapshot: Dict[str, Any], created_at: Optional[datetime] = None) -> PlanRecord:
        """
        Сохранить новый активный план

        Сначала вставляется новый план, затем предыдущие планы пользователя
        этого домена деактивируются (или удаляются, если PLAN_HISTORY=replace).
        Если вставка не удалась, старый активный план остается на месте.
        """
        record = PlanRecord(
            owner_id=owner_id,
            domain=domain,
            plan=plan,
            source_snapshot=source_snapshot,
            created_at=created_at or datetime.now(timezone.utc),
            is_active=True,
        )
        result = self.client.table("plans").insert(record.to_row()).execute()
        if result.data:
            record.id = result.data[0].get("id")

        previous = self.client.table("plans")
        previous = previous.delete() if self.history == "replace" else previous.update({"is_active": False})
        previous = previous.eq("owner_id", owner_id).eq("domain", domain)
        if record.id is not None:
            previous = previous.neq("id", record.id)
        else:
            previous = previous.neq("created_at", record.created_at.isoformat())
        previous.execute()

        logger.info(f"План {domain} сохранен для пользователя {owner_id}")
        return record

    async def get(self, owner_id: str, domain: str) -> PlanRecord:
        """Активный план пользователя; PlanNotFound, если его нет"""
        result = self.client.table("plans").select("*")\
            .eq("owner_id", owner_id)\
            .eq("domain", domain)\
            .eq("is_active", True)\
            .order("created_at", desc=True)\
            .limit(1)\
            .execute()
        if not result.data:
            raise PlanNotFound(owner_id, domain)
        return PlanRecord.from_row(result.data[0])

    async def list_plans(self, owner_id: str, domain: str, limit: int = 10) -> List[PlanRecord]:
        """История планов, новые первыми"""
        result = self.client.table("plans").select("*")\
            .eq("owner_id", owner_id)\
            .eq("domain", domain)\
            .order("created_at", desc=True)\
            .limit(limit)\
            .execute()
        return [PlanRecord.from_row(row) for row in result.data]

    # ===== PROFILES & QUESTIONNAIRES =====
    async def get_profile(self, owner_id: str) -> Optional[Dict]:
        """Получить профиль пользователя"""
        result = self.client.table("user_profiles").select("*").eq("user_id", owner_id).execute()
        return result.data[0] if result.data else None

    async def get_questionnaire(self, owner_id: str, domain: str) -> Optional[Dict]:
        """Анкета питания или тренировок"""
        table = QUESTIONNAIRE_TABLES[domain]
        result = self.client.table(table).select("*").eq("user_id", owner_id).execute()
        return result.data[0] if result.data else None

    async def save_questionnaire(self, owner_id: str, domain: str, data: Dict) -> Dict:
        """Создать или обновить анкету"""
        table = QUESTIONNAIRE_TABLES[domain]
        row = {**data, "user_id": owner_id}
        result = self.client.table(table).upsert(row, on_conflict="user_id").execute()
        return result.data[0]

    async def save_profile(self, owner_id: str, data: Dict) -> Dict:
        """Создать или обновить профиль пользователя"""
        row = {**data, "user_id": owner_id}
        result = self.client.table("user_profiles").upsert(row, on_conflict="user_id").execute()
        logger.info(f"Профиль пользователя {owner_id} сохранен")
        return result.data[0]

"""
Сервис для работы с Supabase
"""
from supabase import create_client, Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class SupabaseService:
    """Сервис для работы с Supabase"""

    def __init__(self, url: str, key: str):
        """Инициализация клиента Supabase"""
        self.client: Client = create_client(url, key)
        logger.info("Supabase клиент инициализирован")

    def get_secret(self, secret_name: str) -> Optional[str]:
        """
        Получить секрет из таблицы app_settings (key/value)

        Используется, если секрета нет в переменных окружения.
        """
        result = self.client.table("app_settings").select("value").eq("key", secret_name).execute()
        if result.data:
            return result.data[0]["value"]
        logger.warning(f"Секрет {secret_name} не найден в app_settings")
        return None

    def get_client(self) -> Client:
        """Получить клиент Supabase"""
        return self.client

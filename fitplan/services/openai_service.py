"""
Сервис для работы с OpenAI API
"""
from typing import Optional
import logging

from openai import APIError, AsyncOpenAI

from fitplan.config import OPENAI_MAX_TOKENS, OPENAI_MODEL, OPENAI_TEMPERATURE, SYSTEM_INSTRUCTION
from fitplan.utils.errors import CompletionUnavailable

logger = logging.getLogger(__name__)


class OpenAIService:
    """
    Текстовые ответы ChatGPT для генерации планов

    Ответ возвращается как есть: это недоверенный текст, который может быть
    обрезан или обернут в markdown. Повторных попыток здесь нет.
    """

    def __init__(self, api_key: str, model: str = OPENAI_MODEL,
                 temperature: float = OPENAI_TEMPERATURE, max_tokens: int = OPENAI_MAX_TOKENS,
                 client: Optional[AsyncOpenAI] = None):
        """Инициализация клиента OpenAI"""
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info(f"OpenAI клиент инициализирован (модель {model})")

    async def complete(self, prompt: str, instruction: str = SYSTEM_INSTRUCTION,
                       temperature: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
        """
        Отправить промпт и получить сырой текст ответа

        temperature и max_tokens переопределяют настройки сервиса для одного запроса.

        Raises:
            CompletionUnavailable: "request_failed" при сетевой ошибке или ошибке API
                (можно повторить), "empty_content" при пустом ответе
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": prompt}
                ],
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=self.max_tokens if max_tokens is None else max_tokens
            )
        except APIError as e:
            logger.error(f"Ошибка запроса к OpenAI: {e}")
            raise CompletionUnavailable(CompletionUnavailable.REQUEST_FAILED, retryable=True, detail=str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            logger.error("OpenAI вернул пустой ответ")
            raise CompletionUnavailable(CompletionUnavailable.EMPTY_CONTENT, retryable=False)

        content = content.strip()
        logger.debug(f"Сырой ответ OpenAI: {content}")
        return content

"""
Типизированные ошибки генерации планов
"""
from typing import Any, Iterable


class PlanGenerationError(Exception):
    """Базовая ошибка конвейера генерации плана"""


class InputIncomplete(PlanGenerationError):
    """Не хватает данных профиля для расчета целей"""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = tuple(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class CompletionUnavailable(PlanGenerationError):
    """Внешний сервис генерации не ответил или вернул пустой ответ"""

    REQUEST_FAILED = "request_failed"
    EMPTY_CONTENT = "empty_content"

    def __init__(self, reason: str, retryable: bool, detail: str = ""):
        self.reason = reason
        self.retryable = retryable
        self.detail = detail
        super().__init__(f"Completion unavailable ({reason}): {detail}" if detail else f"Completion unavailable ({reason})")


class RecoveryFailure(PlanGenerationError):
    """Из ответа модели не удалось извлечь JSON; сырой текст сохраняется"""

    NO_JSON_FOUND = "no_json_found"
    MALFORMED_JSON = "malformed_json"

    def __init__(self, reason: str, raw_text: str):
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(f"Plan recovery failed: {reason}")


class NormalizationFailure(PlanGenerationError):
    """JSON корректен, но не соответствует ожидаемой структуре плана"""

    def __init__(self, domain: str, expectation: str, raw_tree: Any):
        self.domain = domain
        self.expectation = expectation
        self.raw_tree = raw_tree
        super().__init__(f"Cannot normalize {domain} plan: {expectation}")


class GenerationInProgress(PlanGenerationError):
    """Для этого пользователя генерация уже запущена"""

    def __init__(self, owner_id: str, domain: str):
        self.owner_id = owner_id
        self.domain = domain
        super().__init__(f"A {domain} plan is already being generated for {owner_id}")


class PlanNotFound(PlanGenerationError):
    """У пользователя нет активного плана"""

    def __init__(self, owner_id: str, domain: str):
        self.owner_id = owner_id
        self.domain = domain
        super().__init__(f"No active {domain} plan for {owner_id}")

"""
Извлечение JSON-плана из ответа языковой модели

Модель иногда оборачивает ответ в ```json ... ``` или добавляет пояснения,
несмотря на инструкцию. Стадии выполняются строго по порядку, первая
успешная побеждает:

1. strip_fence - убрать ограждение ``` в начале и конце и пробелы
2. строгий json.loads очищенного текста (стадия fenced_extract, если ограждение было снято)
3. fenced_extract - найти в исходном тексте первый блок ``` ... ``` и разобрать его
4. иначе RecoveryFailure с исходным текстом

Повторных попыток внутри нет. Структура плана здесь не проверяется,
это делает нормализатор.
"""
from dataclasses import dataclass
from typing import Any
import json
import logging
import re

from fitplan.utils.errors import RecoveryFailure

logger = logging.getLogger(__name__)

DIRECT_PARSE = "direct_parse"
FENCED_EXTRACT = "fenced_extract"

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")
_FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?([\s\S]*?)```")
_JSON_START = re.compile(r"[{\[]")


@dataclass(frozen=True)
class RecoveredPlan:
    """Разобранное дерево и стадия, на которой удалось его получить"""
    tree: Any
    stage: str


def strip_fence(text: str) -> str:
    """Убрать ограждающие ``` (с необязательным языком) и пробелы по краям"""
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def extract_fenced_block(text: str):
    """Содержимое первого блока ``` ... ``` или None"""
    match = _FENCED_BLOCK.search(text)
    if not match:
        return None
    return match.group(1).strip()


def recover_plan(raw_text: str) -> RecoveredPlan:
    """
    Получить JSON-дерево из ответа модели

    Raises:
        RecoveryFailure: reason "no_json_found", если JSON в тексте нет совсем,
            или "malformed_json", если похожий на JSON текст не разбирается
    """
    raw_text = raw_text or ""
    stripped = strip_fence(raw_text)
    # если ограждение было, это уже извлечение из блока
    stage = DIRECT_PARSE if stripped == raw_text.strip() else FENCED_EXTRACT

    try:
        tree = json.loads(stripped)
        return RecoveredPlan(tree=tree, stage=stage)
    except json.JSONDecodeError as e:
        logger.info(f"Ответ модели не является чистым JSON: {e}")

    block = extract_fenced_block(raw_text)
    if block is not None:
        try:
            tree = json.loads(block)
            logger.info("JSON извлечен из блока кода")
            return RecoveredPlan(tree=tree, stage=FENCED_EXTRACT)
        except json.JSONDecodeError as e:
            logger.info(f"Блок кода не содержит корректный JSON: {e}")

    reason = RecoveryFailure.MALFORMED_JSON if _JSON_START.search(raw_text) else RecoveryFailure.NO_JSON_FOUND
    logger.error(f"Не удалось извлечь план из ответа модели ({reason}), длина ответа {len(raw_text)}")
    raise RecoveryFailure(reason, raw_text)

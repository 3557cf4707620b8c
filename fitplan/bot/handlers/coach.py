"""
Чат с AI-коучем, который знает профиль и показатели пользователя
"""
from telegram import Update
from telegram.ext import ContextTypes
from fitplan.bot.keyboards.inline import InlineKeyboards
from fitplan.bot.states import BotState
from fitplan.config import (
    COACH_HISTORY_MESSAGES,
    COACH_INSTRUCTION,
    COACH_MAX_TOKENS,
    COACH_STORED_MESSAGES,
    COACH_TEMPERATURE,
)
from fitplan.database.models import HealthMetrics
from fitplan.services.prompts import build_coach_prompt
from fitplan.utils.calculators import compute_health_metrics
from fitplan.utils.errors import CompletionUnavailable
from fitplan.utils.validators import normalize_profile
import logging

logger = logging.getLogger(__name__)


async def coach_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать общение с AI-коучем"""
    if update.callback_query:
        await update.callback_query.answer()

    message = """💬 AI-КОУЧ

Задай мне любой вопрос о питании, тренировках или здоровье!
Я учитываю твой профиль и показатели.

Примеры:
• "Сколько белка мне нужно?"
• "Как не срываться вечером?"
• "Чем заменить бег, если болят колени?"

Чтобы выйти, нажми «Главное меню» 🤖"""

    context.user_data['state'] = BotState.COACH_CHAT
    await update.effective_message.reply_text(message, reply_markup=InlineKeyboards.coach_actions())


async def coach_reset_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать разговор заново"""
    query = update.callback_query
    await query.answer()

    context.user_data.pop('chat_context', None)
    context.user_data['state'] = BotState.COACH_CHAT

    await query.edit_message_text("🧹 История разговора очищена. Задай новый вопрос:")


async def handle_coach_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Ответ коуча с учетом профиля и последних сообщений"""
    user_message = update.message.text
    user = update.effective_user

    await update.message.reply_text("🤖 Думаю...")

    store = context.bot_data['store']
    openai_service = context.bot_data['openai']

    raw_profile = await store.get_profile(str(user.id))
    profile = normalize_profile(raw_profile) if raw_profile else None
    metrics = compute_health_metrics(profile) if profile else HealthMetrics()

    # Получаем контекст разговора (если есть)
    chat_context = context.user_data.get('chat_context', [])
    prompt = build_coach_prompt(
        profile, metrics, chat_context[-COACH_HISTORY_MESSAGES:], user_message, name=user.first_name
    )

    try:
        response = await openai_service.complete(
            prompt, COACH_INSTRUCTION, temperature=COACH_TEMPERATURE, max_tokens=COACH_MAX_TOKENS
        )
    except CompletionUnavailable as e:
        logger.error(f"Ошибка AI чата для пользователя {user.id}: {e}")
        await update.message.reply_text(
            "❌ Ошибка связи с AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return

    chat_context.append({"role": "user", "content": user_message})
    chat_context.append({"role": "assistant", "content": response})
    context.user_data['chat_context'] = chat_context[-COACH_STORED_MESSAGES:]

    await update.message.reply_text(response, reply_markup=InlineKeyboards.coach_actions())

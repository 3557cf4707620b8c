"""
Обработчики генерации и просмотра планов
"""
from telegram import Update
from telegram.ext import ContextTypes
from fitplan.bot.formatting import (
    format_diet_plan,
    format_health_metrics,
    format_plan_history,
    format_workout_plan,
    split_message,
)
from fitplan.bot.keyboards.inline import InlineKeyboards
from fitplan.config import HISTORY_LIMIT
from fitplan.utils.calculators import compute_health_metrics
from fitplan.utils.errors import (
    CompletionUnavailable,
    GenerationInProgress,
    InputIncomplete,
    PlanGenerationError,
    PlanNotFound,
)
from fitplan.utils.validators import (
    normalize_diet_questionnaire,
    normalize_profile,
    normalize_workout_questionnaire,
)
import logging

logger = logging.getLogger(__name__)

QUESTIONNAIRE_PARSERS = {
    "diet": normalize_diet_questionnaire,
    "workout": normalize_workout_questionnaire,
}

PLAN_FORMATTERS = {
    "diet": format_diet_plan,
    "workout": format_workout_plan,
}

DOMAIN_NAMES = {
    "diet": "питания",
    "workout": "тренировок",
}


async def _send_long(message, text: str, reply_markup=None):
    chunks = split_message(text)
    for i, chunk in enumerate(chunks):
        markup = reply_markup if i == len(chunks) - 1 else None
        await message.reply_text(chunk, reply_markup=markup)


async def _answer_callback(update: Update):
    if update.callback_query:
        await update.callback_query.answer()


async def generate_plan(update: Update, context: ContextTypes.DEFAULT_TYPE, domain: str):
    """Сгенерировать план по анкете пользователя"""
    await _answer_callback(update)
    message = update.effective_message
    owner_id = str(update.effective_user.id)
    store = context.bot_data['store']
    plan_service = context.bot_data['plans']

    raw_questionnaire = await store.get_questionnaire(owner_id, domain)
    if not raw_questionnaire:
        await message.reply_text(
            f"⚠️ Сначала заполни анкету {DOMAIN_NAMES[domain]}: /questionnaire_{domain}",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return

    raw_profile = await store.get_profile(owner_id)
    profile = normalize_profile(raw_profile) if raw_profile else None
    questionnaire = QUESTIONNAIRE_PARSERS[domain](raw_questionnaire)

    await message.reply_text(f"⏳ Составляю план {DOMAIN_NAMES[domain]}, это займет до минуты...")

    try:
        record = await plan_service.generate(owner_id, domain, questionnaire, profile)
    except GenerationInProgress:
        await message.reply_text("⏳ План уже генерируется, подожди немного.")
        return
    except InputIncomplete as e:
        await message.reply_text(
            f"⚠️ Не хватает данных для расчета: {', '.join(e.missing_fields)}",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return
    except CompletionUnavailable as e:
        logger.error(f"AI недоступен для пользователя {owner_id}: {e}")
        await message.reply_text("❌ AI сейчас недоступен.", reply_markup=InlineKeyboards.retry(domain))
        return
    except PlanGenerationError as e:
        logger.error(f"Ошибка генерации плана {domain} для пользователя {owner_id}: {e}")
        await message.reply_text(
            "❌ Не удалось разобрать ответ AI. Попробуй еще раз.",
            reply_markup=InlineKeyboards.retry(domain)
        )
        return

    await _send_long(message, PLAN_FORMATTERS[domain](record.plan), InlineKeyboards.plan_actions(domain))


async def diet_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await generate_plan(update, context, "diet")


async def workout_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await generate_plan(update, context, "workout")


async def show_plan(update: Update, context: ContextTypes.DEFAULT_TYPE, domain: str):
    """Показать активный план"""
    await _answer_callback(update)
    message = update.effective_message
    store = context.bot_data['store']

    try:
        record = await store.get(str(update.effective_user.id), domain)
    except PlanNotFound:
        await message.reply_text(
            f"⚠️ У тебя еще нет плана {DOMAIN_NAMES[domain]}.",
            reply_markup=InlineKeyboards.retry(domain)
        )
        return

    header = f"🗓 Создан: {record.created_at:%d.%m.%Y}\n\n"
    await _send_long(message, header + PLAN_FORMATTERS[domain](record.plan), InlineKeyboards.plan_actions(domain))


async def show_diet_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await show_plan(update, context, "diet")


async def show_workout_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await show_plan(update, context, "workout")


async def myplan_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать оба плана"""
    for domain in ("diet", "workout"):
        await show_plan(update, context, domain)


async def metrics_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показатели здоровья по профилю"""
    await _answer_callback(update)
    message = update.effective_message
    store = context.bot_data['store']

    raw_profile = await store.get_profile(str(update.effective_user.id))
    if not raw_profile:
        await message.reply_text(
            "⚠️ Профиль еще не заполнен. Заполни его: /profile",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return

    metrics = compute_health_metrics(normalize_profile(raw_profile))
    await message.reply_text(format_health_metrics(metrics), reply_markup=InlineKeyboards.back_to_menu())


async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """История сгенерированных планов"""
    await _answer_callback(update)
    store = context.bot_data['store']
    owner_id = str(update.effective_user.id)

    history = {}
    for domain in ("diet", "workout"):
        history[domain] = await store.list_plans(owner_id, domain, limit=HISTORY_LIMIT)

    await update.effective_message.reply_text(format_plan_history(history), reply_markup=InlineKeyboards.back_to_menu())

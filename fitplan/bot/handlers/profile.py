"""
Обработчики для работы с профилем пользователя
"""
from telegram import Update
from telegram.ext import ContextTypes
from fitplan.bot.formatting import format_health_metrics, format_profile
from fitplan.bot.keyboards.inline import InlineKeyboards
from fitplan.bot.states import BotState
from fitplan.utils.calculators import compute_health_metrics
from fitplan.utils.validators import DataValidator, normalize_profile, parse_list_answer
import logging

logger = logging.getLogger(__name__)


async def _answer_callback(update: Update):
    if update.callback_query:
        await update.callback_query.answer()


async def start_profile(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать заполнение профиля с первого вопроса"""
    message = """📊 СОЗДАНИЕ ПРОФИЛЯ

Для расчета показателей и планов мне нужно узнать о тебе больше.

Пожалуйста, укажи свой возраст (в годах):"""

    context.user_data['state'] = BotState.PROFILE_AGE
    context.user_data['profile_data'] = {}
    await update.effective_message.reply_text(message)


async def profile_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Показать профиль или начать его создание"""
    await _answer_callback(update)
    store = context.bot_data['store']

    raw_profile = await store.get_profile(str(update.effective_user.id))
    if not raw_profile:
        await start_profile(update, context)
        return

    await update.effective_message.reply_text(
        format_profile(normalize_profile(raw_profile)),
        reply_markup=InlineKeyboards.profile_actions()
    )


async def edit_profile_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Заполнить профиль заново"""
    await _answer_callback(update)
    await start_profile(update, context)


# Обработчики текстовых ответов для создания профиля
async def handle_profile_age(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка возраста"""
    valid, age, error = DataValidator.validate_age(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data['profile_data'] = {'age': age}
    context.user_data['state'] = BotState.PROFILE_GENDER

    await update.message.reply_text(
        "👤 Укажи свой пол:",
        reply_markup=InlineKeyboards.gender_selection()
    )


async def handle_gender_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора пола"""
    query = update.callback_query
    await query.answer()

    gender = query.data.split('_', 1)[1]  # gender_male -> male
    context.user_data.setdefault('profile_data', {})['gender'] = gender
    context.user_data['state'] = BotState.PROFILE_HEIGHT

    await query.edit_message_text("📏 Укажи свой рост (в сантиметрах):")


async def handle_profile_height(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка роста"""
    valid, height, error = DataValidator.validate_height(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('profile_data', {})['height'] = height
    context.user_data['state'] = BotState.PROFILE_CURRENT_WEIGHT

    await update.message.reply_text("⚖️ Укажи свой текущий вес (в килограммах):")


async def handle_profile_current_weight(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка текущего веса"""
    valid, weight, error = DataValidator.validate_weight(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('profile_data', {})['current_weight'] = weight
    context.user_data['state'] = BotState.PROFILE_TARGET_WEIGHT

    await update.message.reply_text("🎯 Укажи свой целевой вес (в килограммах):")


async def handle_profile_target_weight(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка целевого веса"""
    valid, weight, error = DataValidator.validate_weight(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('profile_data', {})['target_weight'] = weight
    context.user_data['state'] = BotState.PROFILE_ACTIVITY

    await update.message.reply_text(
        "💪 Выбери уровень своей физической активности:",
        reply_markup=InlineKeyboards.activity_level()
    )


async def handle_activity_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора активности"""
    query = update.callback_query
    await query.answer()

    activity = query.data.split('_', 1)[1]  # activity_very_active -> very_active
    context.user_data.setdefault('profile_data', {})['activity_level'] = activity
    context.user_data['state'] = BotState.PROFILE_GOAL

    await query.edit_message_text(
        "🎯 Какая у тебя цель?",
        reply_markup=InlineKeyboards.goal_selection()
    )


async def handle_goal_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка выбора цели"""
    query = update.callback_query
    await query.answer()

    goal = query.data.split('_', 1)[1]  # goal_fat_loss -> fat_loss
    context.user_data.setdefault('profile_data', {})['goal'] = goal
    context.user_data['state'] = BotState.PROFILE_HEALTH

    await query.edit_message_text(
        "🩺 Есть ли у тебя заболевания или ограничения по здоровью?\n\n"
        "Перечисли через запятую или напиши «нет»:"
    )


async def handle_profile_health(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка ограничений по здоровью и сохранение профиля"""
    store = context.bot_data['store']
    user_id = str(update.effective_user.id)
    profile_data = context.user_data.setdefault('profile_data', {})
    profile_data['health_conditions'] = parse_list_answer(update.message.text)

    try:
        saved = await store.save_profile(user_id, profile_data)
    except Exception as e:
        logger.error(f"Ошибка сохранения профиля пользователя {user_id}: {e}")
        await update.message.reply_text(
            "❌ Произошла ошибка при сохранении профиля. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return

    context.user_data['state'] = BotState.IDLE
    context.user_data.pop('profile_data', None)

    metrics = compute_health_metrics(normalize_profile(saved))
    await update.message.reply_text(
        f"✅ ПРОФИЛЬ СОХРАНЕН!\n\n{format_health_metrics(metrics)}\n\n"
        "Теперь заполни анкеты питания и тренировок, чтобы получить планы 🎉",
        reply_markup=InlineKeyboards.main_menu()
    )

"""
Анкеты питания и тренировок, которые заполняются прямо в боте
"""
from telegram import Update
from telegram.ext import ContextTypes
from fitplan.bot.keyboards.inline import InlineKeyboards
from fitplan.bot.states import BotState
from fitplan.config import DEFAULT_TABLES
from fitplan.utils.validators import DataValidator, parse_list_answer
import logging

logger = logging.getLogger(__name__)

SESSION_DURATIONS = list(DEFAULT_TABLES.session_minutes)

# место тренировок -> (значение анкеты, доступный инвентарь)
LOCATIONS = {
    "home": ("Home", ["None/minimal equipment"]),
    "gym": ("Gym", ["Free weights", "Weight machines", "Cardio equipment"]),
    "outdoors": ("Outdoors", ["None/minimal equipment"]),
}

SAVED_MESSAGES = {
    "diet": "✅ Анкета питания сохранена!",
    "workout": "✅ Анкета тренировок сохранена!",
}


async def _answer_callback(update: Update):
    if update.callback_query:
        await update.callback_query.answer()


async def _save(update: Update, context: ContextTypes.DEFAULT_TYPE, domain: str):
    """Сохранить собранную анкету и выйти из диалога"""
    store = context.bot_data['store']
    user_id = str(update.effective_user.id)
    data = context.user_data.get('questionnaire_data', {})

    try:
        await store.save_questionnaire(user_id, domain, data)
    except Exception as e:
        logger.error(f"Ошибка сохранения анкеты {domain} пользователя {user_id}: {e}")
        await update.message.reply_text(
            "❌ Не удалось сохранить анкету. Попробуй еще раз.",
            reply_markup=InlineKeyboards.back_to_menu()
        )
        return

    context.user_data['state'] = BotState.IDLE
    context.user_data.pop('questionnaire_data', None)
    logger.info(f"Анкета {domain} пользователя {user_id} сохранена")

    await update.message.reply_text(
        f"{SAVED_MESSAGES[domain]}\n\nТеперь можно составить план.",
        reply_markup=InlineKeyboards.questionnaire_saved(domain)
    )


# ===== АНКЕТА ПИТАНИЯ =====
async def diet_questionnaire_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать анкету питания"""
    await _answer_callback(update)
    context.user_data['state'] = BotState.DIET_GOAL
    context.user_data['questionnaire_data'] = {}

    await update.effective_message.reply_text(
        "📝 АНКЕТА ПИТАНИЯ\n\n🎯 Какая цель у плана питания?",
        reply_markup=InlineKeyboards.goal_selection(prefix="dietgoal")
    )


async def handle_diet_goal_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    context.user_data.setdefault('questionnaire_data', {})['goal'] = query.data.split('_', 1)[1]
    context.user_data['state'] = BotState.DIET_TYPE

    await query.edit_message_text(
        "🥗 Какой тип питания тебе подходит?",
        reply_markup=InlineKeyboards.diet_type_selection()
    )


async def handle_diet_type_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    context.user_data.setdefault('questionnaire_data', {})['diet_type'] = query.data.split('_', 1)[1]
    context.user_data['state'] = BotState.DIET_MEALS

    await query.edit_message_text("🍽 Сколько приемов пищи в день? (от 2 до 6)")


async def handle_diet_meals(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка количества приемов пищи"""
    valid, meals, error = DataValidator.validate_meals_per_day(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('questionnaire_data', {})['meals_per_day'] = meals
    context.user_data['state'] = BotState.DIET_ALLERGIES

    await update.message.reply_text("⚠️ Есть ли у тебя аллергии? Перечисли через запятую или напиши «нет»:")


async def handle_diet_allergies(update: Update, context: ContextTypes.DEFAULT_TYPE):
    context.user_data.setdefault('questionnaire_data', {})['allergies'] = parse_list_answer(update.message.text)
    context.user_data['state'] = BotState.DIET_RESTRICTIONS

    await update.message.reply_text(
        "🚫 Какие продукты исключить из рациона? Перечисли через запятую или напиши «нет»:"
    )


async def handle_diet_restrictions(update: Update, context: ContextTypes.DEFAULT_TYPE):
    context.user_data.setdefault('questionnaire_data', {})['food_restrictions'] = parse_list_answer(update.message.text)
    await _save(update, context, "diet")


# ===== АНКЕТА ТРЕНИРОВОК =====
async def workout_questionnaire_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Начать анкету тренировок"""
    await _answer_callback(update)
    context.user_data['state'] = BotState.WORKOUT_LEVEL
    context.user_data['questionnaire_data'] = {}

    await update.effective_message.reply_text(
        "📝 АНКЕТА ТРЕНИРОВОК\n\n💪 Какой у тебя уровень подготовки?",
        reply_markup=InlineKeyboards.fitness_level_selection()
    )


async def handle_level_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    context.user_data.setdefault('questionnaire_data', {})['fitness_level'] = query.data.split('_', 1)[1]
    context.user_data['state'] = BotState.WORKOUT_DAYS

    await query.edit_message_text("📅 Сколько тренировок в неделю? (от 1 до 7)")


async def handle_workout_days(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработка количества тренировок"""
    valid, days, error = DataValidator.validate_days_per_week(update.message.text)

    if not valid:
        await update.message.reply_text(f"❌ {error}\n\nПопробуй еще раз:")
        return

    context.user_data.setdefault('questionnaire_data', {})['days_per_week'] = days
    context.user_data['state'] = BotState.WORKOUT_DURATION

    await update.message.reply_text(
        "⏱ Сколько длится одна тренировка?",
        reply_markup=InlineKeyboards.session_duration_selection(SESSION_DURATIONS)
    )


async def handle_duration_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    index = int(query.data.split('_', 1)[1])  # duration_1 -> 1
    context.user_data.setdefault('questionnaire_data', {})['session_duration'] = SESSION_DURATIONS[index]
    context.user_data['state'] = BotState.WORKOUT_LOCATION

    await query.edit_message_text(
        "📍 Где ты будешь тренироваться?",
        reply_markup=InlineKeyboards.location_selection()
    )


async def handle_location_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    location, equipment = LOCATIONS[query.data.split('_', 1)[1]]
    data = context.user_data.setdefault('questionnaire_data', {})
    data['workout_locations'] = [location]
    data['equipment_access'] = equipment
    context.user_data['state'] = BotState.WORKOUT_HEALTH

    await query.edit_message_text(
        "🩺 Есть ли заболевания, которые нужно учесть? Перечисли через запятую или напиши «нет»:"
    )


async def handle_workout_health(update: Update, context: ContextTypes.DEFAULT_TYPE):
    context.user_data.setdefault('questionnaire_data', {})['health_conditions'] = parse_list_answer(update.message.text)
    context.user_data['state'] = BotState.WORKOUT_MOVEMENTS

    await update.message.reply_text(
        "🚷 Каких движений нужно избегать (например, прыжки, бег)? Перечисли через запятую или напиши «нет»:"
    )


async def handle_workout_movements(update: Update, context: ContextTypes.DEFAULT_TYPE):
    context.user_data.setdefault('questionnaire_data', {})['movement_restrictions'] = parse_list_answer(update.message.text)
    await _save(update, context, "workout")

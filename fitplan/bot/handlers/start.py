"""
Обработчик команды /start и главное меню
"""
from telegram import Update
from telegram.ext import ContextTypes
from fitplan.bot.keyboards.inline import InlineKeyboards
from fitplan.bot.states import BotState
import logging

logger = logging.getLogger(__name__)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик команды /start"""
    user = update.effective_user
    store = context.bot_data['store']

    profile = await store.get_profile(str(user.id))

    welcome_message = """🤖 Привет! Я составлю для тебя план питания и тренировок.
Цели считаются по твоему профилю, а сам план подбирает AI."""

    if not profile:
        welcome_message += "\n\n⚠️ Профиль еще не заполнен. Начни с команды /profile"
    else:
        welcome_message += "\n\n✅ Твой профиль уже создан!"

    await update.message.reply_text(welcome_message, reply_markup=InlineKeyboards.main_menu())
    logger.info(f"Пользователь {user.id} ({user.username}) запустил бота")


async def main_menu_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Возврат в главное меню"""
    query = update.callback_query
    await query.answer()

    context.user_data['state'] = BotState.IDLE

    await query.edit_message_text(
        text="🏠 Главное меню\n\nВыбери действие:",
        reply_markup=InlineKeyboards.main_menu()
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик команды /help"""
    help_text = """ℹ️ ПОМОЩЬ

🔹 Команды:
/start - главное меню
/diet - сгенерировать план питания на 3 дня
/workout - сгенерировать план тренировок на неделю
/myplan - показать текущие планы
/profile - профиль (возраст, рост, вес, цель)
/questionnaire_diet - анкета питания
/questionnaire_workout - анкета тренировок
/metrics - BMI, BMR, TDEE и норма КБЖУ
/history - история планов
/coach - чат с AI-коучем
/help - эта справка

💡 Если генерация не удалась, нажми «Попробовать еще раз»."""

    if update.message:
        await update.message.reply_text(help_text, reply_markup=InlineKeyboards.back_to_menu())
    else:
        query = update.callback_query
        await query.answer()
        await query.edit_message_text(text=help_text, reply_markup=InlineKeyboards.back_to_menu())

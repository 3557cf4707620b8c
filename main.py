"""
Главный файл запуска Telegram бота генерации планов питания и тренировок
"""
import logging
import os
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    filters,
    ContextTypes
)

# Импорты сервисов
from fitplan.services.supabase_service import SupabaseService
from fitplan.services.openai_service import OpenAIService
from fitplan.services.plan_service import PlanService
from fitplan.database.queries import PlanStore
from fitplan.config import SUPABASE_URL, SUPABASE_KEY

# Импорты обработчиков
from fitplan.bot.states import BotState
from fitplan.bot.handlers.start import start_command, main_menu_callback, help_command
from fitplan.bot.handlers.plans import (
    diet_command,
    workout_command,
    myplan_command,
    metrics_command,
    history_command,
    show_diet_callback,
    show_workout_callback
)
from fitplan.bot.handlers.profile import (
    profile_command,
    edit_profile_callback,
    handle_profile_age,
    handle_gender_callback,
    handle_profile_height,
    handle_profile_current_weight,
    handle_profile_target_weight,
    handle_activity_callback,
    handle_goal_callback,
    handle_profile_health
)
from fitplan.bot.handlers.questionnaire import (
    diet_questionnaire_command,
    workout_questionnaire_command,
    handle_diet_goal_callback,
    handle_diet_type_callback,
    handle_diet_meals,
    handle_diet_allergies,
    handle_diet_restrictions,
    handle_level_callback,
    handle_workout_days,
    handle_duration_callback,
    handle_location_callback,
    handle_workout_health,
    handle_workout_movements
)
from fitplan.bot.handlers.coach import coach_command, coach_reset_callback, handle_coach_message

# Настройка логирования
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)


async def route_text_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Маршрутизация текстовых сообщений в зависимости от состояния"""
    state = context.user_data.get('state', BotState.IDLE)

    # Состояния профиля
    if state == BotState.PROFILE_AGE:
        await handle_profile_age(update, context)
    elif state == BotState.PROFILE_HEIGHT:
        await handle_profile_height(update, context)
    elif state == BotState.PROFILE_CURRENT_WEIGHT:
        await handle_profile_current_weight(update, context)
    elif state == BotState.PROFILE_TARGET_WEIGHT:
        await handle_profile_target_weight(update, context)
    elif state == BotState.PROFILE_HEALTH:
        await handle_profile_health(update, context)

    # Анкета питания
    elif state == BotState.DIET_MEALS:
        await handle_diet_meals(update, context)
    elif state == BotState.DIET_ALLERGIES:
        await handle_diet_allergies(update, context)
    elif state == BotState.DIET_RESTRICTIONS:
        await handle_diet_restrictions(update, context)

    # Анкета тренировок
    elif state == BotState.WORKOUT_DAYS:
        await handle_workout_days(update, context)
    elif state == BotState.WORKOUT_HEALTH:
        await handle_workout_health(update, context)
    elif state == BotState.WORKOUT_MOVEMENTS:
        await handle_workout_movements(update, context)

    # Ждем нажатия кнопки
    elif state in (BotState.PROFILE_GENDER, BotState.PROFILE_ACTIVITY, BotState.PROFILE_GOAL,
                   BotState.DIET_GOAL, BotState.DIET_TYPE, BotState.WORKOUT_LEVEL,
                   BotState.WORKOUT_DURATION, BotState.WORKOUT_LOCATION):
        await update.message.reply_text("👆 Выбери вариант кнопкой выше.")

    # По умолчанию - AI-коуч
    else:
        await handle_coach_message(update, context)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Обработчик ошибок"""
    logger.error(f"Update {update} caused error {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(
            "❌ Произошла ошибка. Попробуй еще раз или напиши /start"
        )


def main():
    """Главная функция запуска бота"""
    logger.info("🚀 Запуск бота...")

    # Инициализация Supabase
    if not SUPABASE_URL or not SUPABASE_KEY:
        logger.error("❌ SUPABASE_URL и SUPABASE_KEY должны быть установлены в .env файле!")
        return

    supabase_service = SupabaseService(SUPABASE_URL, SUPABASE_KEY)

    # Секреты из переменных окружения, иначе из Supabase
    telegram_token = os.getenv("TELEGRAM_BOT_TOKEN") or supabase_service.get_secret("TELEGRAM_BOT_TOKEN")
    openai_api_key = os.getenv("OPENAI_API_KEY") or supabase_service.get_secret("OPENAI_API_KEY")

    if not telegram_token:
        logger.error("❌ TELEGRAM_BOT_TOKEN не найден!")
        return

    if not openai_api_key:
        logger.error("❌ OPENAI_API_KEY не найден!")
        return

    # Инициализация сервисов
    store = PlanStore(supabase_service.get_client())
    openai_service = OpenAIService(openai_api_key)
    plan_service = PlanService(openai_service, store)

    application = Application.builder().token(telegram_token).build()

    # Сервисы доступны обработчикам через bot_data
    application.bot_data['store'] = store
    application.bot_data['plans'] = plan_service
    application.bot_data['openai'] = openai_service

    # Команды
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("diet", diet_command))
    application.add_handler(CommandHandler("workout", workout_command))
    application.add_handler(CommandHandler("myplan", myplan_command))
    application.add_handler(CommandHandler("metrics", metrics_command))
    application.add_handler(CommandHandler("history", history_command))
    application.add_handler(CommandHandler("profile", profile_command))
    application.add_handler(CommandHandler("questionnaire_diet", diet_questionnaire_command))
    application.add_handler(CommandHandler("questionnaire_workout", workout_questionnaire_command))
    application.add_handler(CommandHandler("coach", coach_command))

    # Callback'и
    application.add_handler(CallbackQueryHandler(main_menu_callback, pattern="^main_menu$"))
    application.add_handler(CallbackQueryHandler(help_command, pattern="^help$"))
    application.add_handler(CallbackQueryHandler(diet_command, pattern="^gen_diet$"))
    application.add_handler(CallbackQueryHandler(workout_command, pattern="^gen_workout$"))
    application.add_handler(CallbackQueryHandler(show_diet_callback, pattern="^show_diet$"))
    application.add_handler(CallbackQueryHandler(show_workout_callback, pattern="^show_workout$"))
    application.add_handler(CallbackQueryHandler(metrics_command, pattern="^metrics$"))
    application.add_handler(CallbackQueryHandler(history_command, pattern="^history$"))

    # Профиль
    application.add_handler(CallbackQueryHandler(profile_command, pattern="^profile$"))
    application.add_handler(CallbackQueryHandler(edit_profile_callback, pattern="^edit_profile$"))
    application.add_handler(CallbackQueryHandler(handle_gender_callback, pattern="^gender_"))
    application.add_handler(CallbackQueryHandler(handle_activity_callback, pattern="^activity_"))
    application.add_handler(CallbackQueryHandler(handle_goal_callback, pattern="^goal_"))

    # Анкеты
    application.add_handler(CallbackQueryHandler(diet_questionnaire_command, pattern="^questionnaire_diet$"))
    application.add_handler(CallbackQueryHandler(workout_questionnaire_command, pattern="^questionnaire_workout$"))
    application.add_handler(CallbackQueryHandler(handle_diet_goal_callback, pattern="^dietgoal_"))
    application.add_handler(CallbackQueryHandler(handle_diet_type_callback, pattern="^diettype_"))
    application.add_handler(CallbackQueryHandler(handle_level_callback, pattern="^level_"))
    application.add_handler(CallbackQueryHandler(handle_duration_callback, pattern="^duration_"))
    application.add_handler(CallbackQueryHandler(handle_location_callback, pattern="^location_"))

    # AI-коуч
    application.add_handler(CallbackQueryHandler(coach_command, pattern="^coach$"))
    application.add_handler(CallbackQueryHandler(coach_reset_callback, pattern="^coach_reset$"))

    # Текстовые сообщения
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, route_text_message))

    application.add_error_handler(error_handler)

    logger.info("✅ Бот успешно запущен и готов к работе!")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()

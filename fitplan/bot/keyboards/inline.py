"""
Inline клавиатуры для навигации в боте
"""
from typing import Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup


class InlineKeyboards:
    """Класс для создания inline клавиатур"""

    @staticmethod
    def main_menu() -> InlineKeyboardMarkup:
        """Главное меню бота"""
        keyboard = [
            [
                InlineKeyboardButton("🍽 Новый план питания", callback_data="gen_diet"),
                InlineKeyboardButton("🏋️ Новый план тренировок", callback_data="gen_workout")
            ],
            [
                InlineKeyboardButton("📋 Мой план питания", callback_data="show_diet"),
                InlineKeyboardButton("📋 Мои тренировки", callback_data="show_workout")
            ],
            [
                InlineKeyboardButton("👤 Профиль", callback_data="profile"),
                InlineKeyboardButton("📊 Показатели", callback_data="metrics")
            ],
            [
                InlineKeyboardButton("📝 Анкета питания", callback_data="questionnaire_diet"),
                InlineKeyboardButton("📝 Анкета тренировок", callback_data="questionnaire_workout")
            ],
            [
                InlineKeyboardButton("🗂 История планов", callback_data="history"),
                InlineKeyboardButton("💬 AI-коуч", callback_data="coach")
            ],
            [InlineKeyboardButton("ℹ️ Помощь", callback_data="help")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def profile_actions() -> InlineKeyboardMarkup:
        """Действия с профилем"""
        keyboard = [
            [InlineKeyboardButton("✏️ Изменить профиль", callback_data="edit_profile")],
            [InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def gender_selection() -> InlineKeyboardMarkup:
        """Выбор пола"""
        keyboard = [
            [
                InlineKeyboardButton("👨 Мужской", callback_data="gender_male"),
                InlineKeyboardButton("👩 Женский", callback_data="gender_female")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def activity_level() -> InlineKeyboardMarkup:
        """Выбор уровня активности"""
        keyboard = [
            [InlineKeyboardButton("🪑 Сидячий образ жизни", callback_data="activity_sedentary")],
            [InlineKeyboardButton("🚶 Легкая активность (1-3 раза/неделю)", callback_data="activity_light")],
            [InlineKeyboardButton("🏃 Умеренная активность (3-5 раз/неделю)", callback_data="activity_moderate")],
            [InlineKeyboardButton("💪 Высокая активность (6-7 раз/неделю)", callback_data="activity_active")],
            [InlineKeyboardButton("🔥 Очень высокая (2 раза/день)", callback_data="activity_very_active")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def goal_selection(prefix: str = "goal") -> InlineKeyboardMarkup:
        """Выбор цели"""
        keyboard = [
            [InlineKeyboardButton("📉 Похудение", callback_data=f"{prefix}_fat_loss")],
            [InlineKeyboardButton("📈 Набор мышечной массы", callback_data=f"{prefix}_muscle_gain")],
            [InlineKeyboardButton("⚖️ Поддержание веса", callback_data=f"{prefix}_maintenance")],
            [InlineKeyboardButton("🏃 Выносливость", callback_data=f"{prefix}_endurance")],
            [InlineKeyboardButton("🌿 Общее самочувствие", callback_data=f"{prefix}_general_wellness")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def diet_type_selection() -> InlineKeyboardMarkup:
        """Выбор типа питания"""
        keyboard = [
            [
                InlineKeyboardButton("🍱 Сбалансированное", callback_data="diettype_balanced"),
                InlineKeyboardButton("🐟 Пескетарианское", callback_data="diettype_pescatarian")
            ],
            [
                InlineKeyboardButton("🥚 Вегетарианское", callback_data="diettype_vegetarian"),
                InlineKeyboardButton("🌱 Веганское", callback_data="diettype_vegan")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def fitness_level_selection() -> InlineKeyboardMarkup:
        """Выбор уровня подготовки"""
        keyboard = [
            [InlineKeyboardButton("🌱 Новичок", callback_data="level_Beginner")],
            [InlineKeyboardButton("💪 Средний", callback_data="level_Intermediate")],
            [InlineKeyboardButton("🔥 Продвинутый", callback_data="level_Advanced")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def session_duration_selection(durations: Sequence[str]) -> InlineKeyboardMarkup:
        """Выбор длительности тренировки"""
        keyboard = [
            [InlineKeyboardButton(f"⏱ {duration}", callback_data=f"duration_{i}")]
            for i, duration in enumerate(durations)
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def location_selection() -> InlineKeyboardMarkup:
        """Выбор места тренировок"""
        keyboard = [
            [
                InlineKeyboardButton("🏠 Дома", callback_data="location_home"),
                InlineKeyboardButton("🏋️ В зале", callback_data="location_gym"),
                InlineKeyboardButton("🌳 На улице", callback_data="location_outdoors")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def questionnaire_saved(domain: str) -> InlineKeyboardMarkup:
        """Составить план после сохранения анкеты"""
        keyboard = [
            [InlineKeyboardButton("✨ Составить план", callback_data=f"gen_{domain}")],
            [InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def coach_actions() -> InlineKeyboardMarkup:
        """Действия в чате с коучем"""
        keyboard = [
            [
                InlineKeyboardButton("🧹 Новый разговор", callback_data="coach_reset"),
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def retry(domain: str) -> InlineKeyboardMarkup:
        """Повторить генерацию после ошибки"""
        keyboard = [
            [InlineKeyboardButton("🔄 Попробовать еще раз", callback_data=f"gen_{domain}")],
            [InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def plan_actions(domain: str) -> InlineKeyboardMarkup:
        """Действия с планом"""
        keyboard = [
            [
                InlineKeyboardButton("🔄 Пересоздать", callback_data=f"gen_{domain}"),
                InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")
            ]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def back_to_menu() -> InlineKeyboardMarkup:
        """Кнопка возврата в главное меню"""
        keyboard = [[InlineKeyboardButton("🏠 Главное меню", callback_data="main_menu")]]
        return InlineKeyboardMarkup(keyboard)

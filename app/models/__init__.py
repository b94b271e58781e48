from .user import User, UserRole
from .habit import Habit, HabitType, HabitFrequency
from .habit_log import HabitLog
from .achievement import Achievement, UserAchievement

__all__ = [
    "User",
    "UserRole",
    "Habit",
    "HabitType",
    "HabitFrequency",
    "HabitLog",
    "Achievement",
    "UserAchievement",
]

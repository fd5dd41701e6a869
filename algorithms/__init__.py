from .math_tools import MathTools
from .exercise_parser import ExerciseParser
from .workout_calculations import WorkoutCalculations
from .weight_converter import WeightConverter
from .calendar_tools import week_dates

__all__ = [
    "MathTools",
    "ExerciseParser",
    "WorkoutCalculations",
    "WeightConverter",
    "week_dates",
]

from .math_tools import MathTools
from .day_month import DayMonth
from .set_normalizer import SetNormalizer

__all__ = ["MathTools", "DayMonth", "SetNormalizer"]

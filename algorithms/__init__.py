from .math_tools import MathTools
from .estimator import Estimator

__all__ = ["MathTools", "Estimator"]

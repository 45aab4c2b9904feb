import math


class MathTools:
    """Provides small numeric helpers shared by the estimators."""

    MINUTES_PER_HOUR: float = 60.0
    SECONDS_PER_MINUTE: float = 60.0

    @staticmethod
    def round_half_up(value: float, increment: float) -> float:
        """Round ``value`` to the nearest multiple of ``increment``, ties upward."""
        if increment <= 0:
            raise ValueError("increment must be positive")
        return math.floor(value / increment + 0.5) * increment

    @classmethod
    def hours(cls, minutes: float) -> float:
        return minutes / cls.MINUTES_PER_HOUR

    @classmethod
    def minutes(cls, seconds: float) -> float:
        return seconds / cls.SECONDS_PER_MINUTE

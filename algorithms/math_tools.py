class MathTools:
    """Provides small numeric helpers shared by the estimators."""

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def ema(previous: float, observed: float, alpha: float) -> float:
        """Return one exponential moving average step from ``previous`` toward ``observed``."""
        if not 0.0 <= alpha <= 1.0:
            raise ValueError("alpha must be within [0, 1]")
        return alpha * observed + (1 - alpha) * previous

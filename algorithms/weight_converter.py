class WeightConverter:
    """Utility for converting between kg and lbs."""

    LBS_PER_KG = 2.2046226218
    UNITS = ("kg", "lbs")

    @staticmethod
    def kg_to_lbs(kg: float) -> float:
        return round(kg * WeightConverter.LBS_PER_KG, 2)

    @staticmethod
    def lbs_to_kg(lbs: float) -> float:
        return round(lbs / WeightConverter.LBS_PER_KG, 2)

    @staticmethod
    def to_kg(value: float, unit: str) -> float:
        """Return ``value`` expressed in ``unit`` as kilograms."""
        if unit not in WeightConverter.UNITS:
            raise ValueError(f"unknown weight unit: {unit}")
        return value if unit == "kg" else value / WeightConverter.LBS_PER_KG

    @staticmethod
    def from_kg(kg: float, unit: str) -> float:
        if unit not in WeightConverter.UNITS:
            raise ValueError(f"unknown weight unit: {unit}")
        return kg if unit == "kg" else kg * WeightConverter.LBS_PER_KG

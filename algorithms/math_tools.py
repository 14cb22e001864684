from typing import Iterable


class MathTools:
    """Provides essential mathematical utilities for workout calculations."""

    @staticmethod
    def volume(sets: Iterable[tuple[float, float]]) -> float:
        """Compute training volume as the sum of reps times weight."""
        vol = 0.0
        for reps, weight in sets:
            vol += reps * weight
        return vol

    @staticmethod
    def clean_number(value: float) -> float | int:
        """Return ``value`` as ``int`` when it has no fractional part."""
        if float(value).is_integer():
            return int(value)
        return value

"""Domain models for hydration tracking."""

from dataclasses import dataclass
from datetime import date

GLASS_ML = 250


@dataclass(frozen=True)
class WaterIntake:
    """Water consumed on one day against the daily target."""

    day: date
    target_ml: int
    consumed_ml: int

    @property
    def glasses(self) -> int:
        return self.consumed_ml // GLASS_ML

    @property
    def target_glasses(self) -> int:
        return -(-self.target_ml // GLASS_ML)

    @property
    def progress_pct(self) -> float:
        if self.target_ml <= 0:
            return 0.0
        return round(min(100.0, self.consumed_ml / self.target_ml * 100), 1)

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

INTENSITIES: tuple[str, ...] = ("light", "moderate", "heavy")


def _default_recovery_times() -> Mapping[str, float]:
    return MappingProxyType({"light": 36.0, "moderate": 54.0, "heavy": 72.0})


@dataclass(frozen=True)
class RecoveryConstants:
    """Fixed tuning table for the recovery pipeline.

    Passed explicitly into every step so tests can run the pipeline with
    alternate constants.
    """

    lookback_days: int = 7
    bout_window_hours: float = 24.0
    secondary_set_factor: float = 0.5
    weighted_multiplier: float = 1.5
    light_threshold: float = 4.0  # effective sets below this -> light
    moderate_threshold: float = 8.0  # below this -> moderate, else heavy
    recovery_time_hours: Mapping[str, float] = field(default_factory=_default_recovery_times)
    not_recovered_fraction: float = 0.33

    def __post_init__(self) -> None:
        missing = [i for i in INTENSITIES if i not in self.recovery_time_hours]
        if missing:
            raise ValueError(f"recovery_time_hours missing intensities: {missing}")
        for intensity in INTENSITIES:
            if self.recovery_time_hours[intensity] <= 0:
                raise ValueError(
                    f"recovery_time_hours[{intensity!r}] must be positive"
                )
        if self.lookback_days <= 0:
            raise ValueError("lookback_days must be positive")
        if self.bout_window_hours < 0:
            raise ValueError("bout_window_hours must not be negative")
        if self.light_threshold > self.moderate_threshold:
            raise ValueError("light_threshold must not exceed moderate_threshold")
        # Freeze caller-supplied dicts as well.
        object.__setattr__(
            self, "recovery_time_hours", MappingProxyType(dict(self.recovery_time_hours))
        )


DEFAULT_CONSTANTS = RecoveryConstants()


@dataclass(frozen=True)
class Config:
    database_url: str
    db_role: str | None = None

    @classmethod
    def from_env(cls) -> "Config":
        database_url = os.environ.get("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL must be set")

        return cls(
            database_url=database_url,
            db_role=os.environ.get("RECOVERY_DB_ROLE") or None,
        )

"""Configuration classes for graphengine algorithms."""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Numeric tolerances shared by the algorithm families."""

    # Residual capacity at or below this value is treated as saturated
    capacity_tolerance: float = 1e-12

    # Johnson reweighting may undershoot zero by float rounding up to this slack
    reweight_tolerance: float = 1e-9

    def is_positive_capacity(self, value: float) -> bool:
        """Return True if ``value`` is a usable (non-saturated) capacity."""
        return value > self.capacity_tolerance


# Global configuration instance
ENGINE_CONFIG = EngineConfig()

from __future__ import annotations


class ForecastError(Exception):
    """Base class for forecasting errors."""


class InvalidParameters(ForecastError, ValueError):
    """Raised before any computation when the run parameters are unusable."""


class SimulationCancelled(ForecastError):
    def __init__(self, completed: int, total: int, reason: str = "cancelled"):
        self.completed = completed
        self.total = total
        self.reason = reason
        super().__init__(f"Simulation {reason} after {completed}/{total} iterations")

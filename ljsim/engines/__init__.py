"""Simulation engine implementations."""

from .md import MDEngine, MDResult
from .montecarlo import MCPhase, MonteCarloEngine, MonteCarloResult
from .reporters import (
    CallbackReporter,
    EnergyHistoryReporter,
    EnergyReporter,
    Reporter,
    ReporterGroup,
)
from .stepsize import AdaptiveStepController, FixedStepController

__all__ = [
    "MDEngine",
    "MDResult",
    "MonteCarloEngine",
    "MonteCarloResult",
    "MCPhase",
    "AdaptiveStepController",
    "FixedStepController",
    "Reporter",
    "ReporterGroup",
    "EnergyReporter",
    "EnergyHistoryReporter",
    "CallbackReporter",
]

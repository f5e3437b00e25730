"""Exception hierarchy for simulation failures."""


class SimulationError(Exception):
    """Base class for all errors that abort a simulation run."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid run parameters, detected before any step runs."""


class BackendError(SimulationError, RuntimeError):
    """A compute backend failed to produce an evaluation."""


class DeviceError(BackendError):
    """Failure reported by an accelerator device."""

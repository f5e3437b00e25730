"""
ljsim - Lennard-Jones particle simulations with pluggable compute backends.

Two engines share one pairwise evaluation contract:

- Metropolis Monte Carlo with whole-system trial moves and adaptive
  trial amplitude
- Constant-energy molecular dynamics with semi-implicit Euler integration

Pair energies and forces come from a CPU backend (optionally threaded) or
an accelerator backend that drives kernels on a device queue.

Quick Start:
    >>> from ljsim import simulate
    >>> result = simulate.monte_carlo(max_iterations=4000, seed=1, verbose=False)
    >>> print(f"Energy per particle: {result.final_energy:.4f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .backends import AcceleratorBackend, CPUBackend, HostKernelDevice
from .config import SimulationConfig
from .engines import MDEngine, MonteCarloEngine
from .errors import BackendError, ConfigurationError, DeviceError, SimulationError
from .forcefields import ShiftedLennardJones
from .integrators import SemiImplicitEulerIntegrator

# Core components for advanced users
from .system import Box, ParticleSystem

__all__ = [
    "simulate",
    "plotting",
    "SimulationConfig",
    "Box",
    "ParticleSystem",
    "ShiftedLennardJones",
    "CPUBackend",
    "AcceleratorBackend",
    "HostKernelDevice",
    "MonteCarloEngine",
    "MDEngine",
    "SemiImplicitEulerIntegrator",
    "SimulationError",
    "ConfigurationError",
    "BackendError",
    "DeviceError",
]

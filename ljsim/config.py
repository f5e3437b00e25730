"""Run configuration for Monte Carlo and molecular dynamics simulations."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError


@dataclass(frozen=True)
class SimulationConfig:
    """
    Startup constants of a simulation run.

    All quantities are in reduced Lennard-Jones units (sigma = epsilon = 1,
    unit mass, k_B = 1). Fields that only one method uses are ignored by the
    other.

    Attributes:
        n_particles: Number of particles N, fixed for the run.
        cutoff: Interaction cutoff radius rc.
        box_size: Edge length L of the cubic periodic box.
        temperature: Metropolis temperature T (Monte Carlo).
        timestep: Integration timestep dt (molecular dynamics).
        initial_amplitude: Initial trial-move amplitude (Monte Carlo).
        max_accepted: Accepted-move ceiling nmax (Monte Carlo).
        max_iterations: Trial ceiling (Monte Carlo) or step count (MD).
        lattice_spacing: Distance between initial lattice sites per axis.
        lattice_margin: Distance from the box faces to the first lattice site.
        lattice_centered: Build the lattice in [-L/2, L/2) instead of [0, L).
        report_interval: Steps between energy reports, 0 disables reports.
        adaptive_step: Tune the trial amplitude from the acceptance rate.
        adaptation_window: Number of trials per adaptation window.
        upper_acceptance: Accepted count above which the amplitude halves.
        lower_acceptance: Accepted count below which the amplitude doubles.
        n_workers: Worker threads used by the CPU backend.
        seed: Random seed, None for a nondeterministic run.
    """

    n_particles: int = 32
    cutoff: float = 3.0
    box_size: float = 6.0
    temperature: float = 1.3
    timestep: float = 0.0005
    initial_amplitude: float = 0.005
    max_accepted: int = 20000
    max_iterations: int = 40000
    lattice_spacing: float = 1.2
    lattice_margin: float = 1.1
    lattice_centered: bool = False
    report_interval: int = 0
    adaptive_step: bool = True
    adaptation_window: int = 100
    upper_acceptance: int = 55
    lower_acceptance: int = 45
    n_workers: int = 1
    seed: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def monte_carlo_reference(cls, **overrides: Any) -> SimulationConfig:
        """Reference Metropolis run: N=32, rc=3, L=6, T=1.3."""
        return cls(**overrides)

    @classmethod
    def md_reference(cls, **overrides: Any) -> SimulationConfig:
        """Reference MD run with a report every 500 steps."""
        params: dict[str, Any] = {
            "max_iterations": 20000,
            "lattice_spacing": 1.5,
            "lattice_margin": 0.5,
            "report_interval": 500,
        }
        params.update(overrides)
        return cls(**params)

    @classmethod
    def md_cpu_reference(cls, **overrides: Any) -> SimulationConfig:
        """Reference MD run as reported by the CPU variant (every 1000 steps)."""
        params: dict[str, Any] = {"report_interval": 1000}
        params.update(overrides)
        return cls.md_reference(**params)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationConfig:
        """
        Build a configuration from plain data.

        Raises:
            ConfigurationError: If the mapping contains unknown keys.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dictionary."""
        return dataclasses.asdict(self)

    def replace(self, **overrides: Any) -> SimulationConfig:
        """Return a validated copy with some fields replaced."""
        return dataclasses.replace(self, **overrides)

    def validate(self) -> None:
        """
        Check parameter ranges and the minimum-image precondition.

        Raises:
            ConfigurationError: On the first invalid parameter.
        """
        if self.n_particles < 1:
            raise ConfigurationError(
                f"n_particles must be positive, got {self.n_particles}"
            )
        for name in ("cutoff", "box_size", "temperature", "timestep"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if not self.initial_amplitude > 0:
            raise ConfigurationError(
                f"initial_amplitude must be positive, got {self.initial_amplitude}"
            )
        if not self.lattice_spacing > 0:
            raise ConfigurationError(
                f"lattice_spacing must be positive, got {self.lattice_spacing}"
            )
        if self.cutoff > self.box_size / 2:
            raise ConfigurationError(
                f"cutoff {self.cutoff} exceeds half the box size "
                f"{self.box_size / 2}; minimum image is ambiguous"
            )
        if self.max_accepted < 0 or self.max_iterations < 0:
            raise ConfigurationError("iteration ceilings must be non-negative")
        if self.report_interval < 0:
            raise ConfigurationError(
                f"report_interval must be non-negative, got {self.report_interval}"
            )
        if self.adaptation_window < 1:
            raise ConfigurationError(
                f"adaptation_window must be positive, got {self.adaptation_window}"
            )
        if self.lower_acceptance > self.upper_acceptance:
            raise ConfigurationError(
                "lower_acceptance must not exceed upper_acceptance"
            )
        if self.n_workers < 1:
            raise ConfigurationError(
                f"n_workers must be positive, got {self.n_workers}"
            )

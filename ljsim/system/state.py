"""Particle system state representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .box import Box
from .lattice import lattice_positions

if TYPE_CHECKING:
    from ..config import SimulationConfig


@dataclass
class ParticleSystem:
    """
    Positions, velocities and forces of N identical particles in a box.

    Positions are stored unwrapped; periodicity is applied on demand when
    interactions are evaluated. The particle count is fixed at creation.

    Attributes:
        positions: Particle positions, shape (N, 3).
        velocities: Particle velocities, shape (N, 3). Zero for Monte Carlo.
        forces: Net force per particle, shape (N, 3).
        box: Periodic simulation box.
        step: Number of committed steps.
    """

    positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    forces: NDArray[np.floating]
    box: Box
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.asarray(self.positions, dtype=np.float64)
        self.velocities = np.asarray(self.velocities, dtype=np.float64)
        self.forces = np.asarray(self.forces, dtype=np.float64)

        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(
                f"positions must have shape (N, 3), got {self.positions.shape}"
            )
        n_particles = len(self.positions)
        if self.velocities.shape != (n_particles, 3):
            raise ValueError(
                f"velocities shape {self.velocities.shape} incompatible with "
                f"{n_particles} particles"
            )
        if self.forces.shape != (n_particles, 3):
            raise ValueError(
                f"forces shape {self.forces.shape} incompatible with "
                f"{n_particles} particles"
            )

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return len(self.positions)

    @classmethod
    def create(
        cls,
        positions: ArrayLike,
        box: Box,
        velocities: ArrayLike | None = None,
        step: int = 0,
    ) -> ParticleSystem:
        """
        Create a system with zero forces and optionally zero velocities.

        Args:
            positions: Particle positions, shape (N, 3).
            box: Simulation box.
            velocities: Particle velocities, shape (N, 3). Defaults to zeros.
            step: Initial step number.

        Returns:
            New ParticleSystem instance.
        """
        positions = np.asarray(positions, dtype=np.float64)
        if velocities is None:
            velocities = np.zeros_like(positions)
        return cls(
            positions=positions,
            velocities=velocities,
            forces=np.zeros_like(positions),
            box=box,
            step=step,
        )

    @classmethod
    def from_config(cls, config: SimulationConfig) -> ParticleSystem:
        """Place config.n_particles particles on the configured initial lattice."""
        positions = lattice_positions(
            config.n_particles,
            config.box_size,
            spacing=config.lattice_spacing,
            margin=config.lattice_margin,
            centered=config.lattice_centered,
        )
        return cls.create(positions, Box.cubic(config.box_size))

    def copy(self) -> ParticleSystem:
        """Create a deep copy of this system."""
        return ParticleSystem(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            forces=self.forces.copy(),
            box=self.box,  # Box is immutable
            step=self.step,
        )

    def snapshot(self) -> FrozenParticleSystem:
        """Create an immutable snapshot of this system."""
        return FrozenParticleSystem(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            forces=self.forces.copy(),
            box=self.box,
            step=self.step,
        )

    def restore(self, snapshot: FrozenParticleSystem) -> None:
        """Overwrite positions, velocities and forces with a snapshot's values."""
        if snapshot.n_particles != self.n_particles:
            raise ValueError(
                f"snapshot has {snapshot.n_particles} particles, "
                f"system has {self.n_particles}"
            )
        self.positions[...] = snapshot.positions
        self.velocities[...] = snapshot.velocities
        self.forces[...] = snapshot.forces
        self.step = snapshot.step

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy with unit masses."""
        return float(0.5 * np.sum(self.velocities**2))


@dataclass(frozen=True)
class FrozenParticleSystem:
    """
    Immutable snapshot of a particle system.

    Taken before a Monte Carlo trial so a rejected move can be undone exactly.
    """

    positions: NDArray[np.floating]
    velocities: NDArray[np.floating]
    forces: NDArray[np.floating]
    box: Box
    step: int

    def __post_init__(self) -> None:
        """Make arrays read-only."""
        self.positions.flags.writeable = False
        self.velocities.flags.writeable = False
        self.forces.flags.writeable = False

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return len(self.positions)

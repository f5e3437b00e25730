"""Molecular dynamics engine."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..backends import ComputeBackend
    from ..integrators import Integrator
    from ..system import ParticleSystem


@dataclass
class MDResult:
    """
    Results from a molecular dynamics run.

    Potential and kinetic energies per particle are both sampled at the
    start of each reporting step, before the particles move.
    """

    # Sampled every report_interval steps
    steps: NDArray[np.integer] = field(
        default_factory=lambda: np.array([], dtype=np.int64)
    )
    potential_energy: NDArray[np.floating] = field(
        default_factory=lambda: np.array([])
    )
    kinetic_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    positions: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    velocities: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    n_steps: int = 0
    timestep: float = 0.0
    n_particles: int = 0
    wall_time: float = 0.0

    @property
    def energy_drift(self) -> float:
        """Return the change in sampled total energy per particle over the run."""
        total = self.potential_energy + self.kinetic_energy
        if len(total) < 2:
            return 0.0
        return float(total[-1] - total[0])


class MDEngine:
    """
    Molecular dynamics engine with a fixed number of steps.

    Each step evaluates pairwise forces on the current (unwrapped) positions,
    sums them into net forces and hands them to the integrator. Every
    ``report_interval`` steps, counted from step 0, the potential energy per
    particle (energy matrix sum / 2N) is sampled before the integration moves
    the particles. No thermostat is applied, so the sampled energy may drift.

    Example usage:
        engine = MDEngine(
            system=ParticleSystem.from_config(config),
            backend=CPUBackend(box, ShiftedLennardJones(3.0)),
            integrator=SemiImplicitEulerIntegrator(dt=0.0005),
            report_interval=500,
        )
        result = engine.run(20000)

    Attributes:
        report_interval: Steps between energy samples, 0 disables sampling.
    """

    def __init__(
        self,
        system: ParticleSystem,
        backend: ComputeBackend,
        integrator: Integrator,
        report_interval: int = 500,
        reporters: list[Reporter] | None = None,
    ) -> None:
        """
        Initialize MD engine.

        Args:
            system: Initial particle system, owned by the engine for the run.
            backend: Compute backend for forces and energies.
            integrator: Time integrator.
            report_interval: Steps between energy samples.
            reporters: Reporters called at each sample.
        """
        if report_interval < 0:
            raise ValueError(
                f"report_interval must be non-negative, got {report_interval}"
            )
        self._system = system
        self._backend = backend
        self._integrator = integrator
        self.report_interval = report_interval
        self._reporters = ReporterGroup(reporters)

        self._steps: list[int] = []
        self._potential: list[float] = []
        self._kinetic: list[float] = []
        self._last_potential_energy = 0.0
        self._total_steps = 0
        self._wall_time = 0.0

    @property
    def system(self) -> ParticleSystem:
        """Return current particle system."""
        return self._system

    @property
    def backend(self) -> ComputeBackend:
        """Return compute backend."""
        return self._backend

    @property
    def integrator(self) -> Integrator:
        """Return integrator."""
        return self._integrator

    @property
    def potential_energy(self) -> float:
        """Return last computed potential energy."""
        return self._last_potential_energy

    @property
    def history(self) -> list[tuple[int, float]]:
        """Return sampled (step, potential energy per particle) pairs."""
        return list(zip(self._steps, self._potential))

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def _should_sample(self, step: int) -> bool:
        return self.report_interval > 0 and step % self.report_interval == 0

    def step(self) -> None:
        """
        Perform a single simulation step.

        1. Evaluate pairwise forces and energies
        2. Sum net forces
        3. Sample potential and kinetic energy on reporting steps
        4. Integrate velocities, then positions
        """
        system = self._system
        evaluation = self._backend.evaluate(system.positions, compute_forces=True)
        forces = evaluation.net_forces
        self._last_potential_energy = evaluation.total_energy

        step = system.step
        if self._should_sample(step):
            n = system.n_particles
            energy = evaluation.total_energy / n
            self._steps.append(step)
            self._potential.append(energy)
            self._kinetic.append(system.kinetic_energy / n)
            self._reporters.report(step, system, energy=energy)

        self._system = self._integrator.step(system, forces)

    def run(self, n_steps: int) -> MDResult:
        """
        Run simulation for specified number of steps.

        Args:
            n_steps: Number of steps to run.

        Returns:
            MDResult with the sampled energies and final state.
        """
        self._reporters.initialize(self._system)
        start_time = time.perf_counter()
        try:
            for _ in range(n_steps):
                self.step()
                self._total_steps += 1
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._reporters.finalize(self._system)

        return self.result()

    def result(self) -> MDResult:
        """Summarize the run so far."""
        return MDResult(
            steps=np.array(self._steps, dtype=np.int64),
            potential_energy=np.array(self._potential),
            kinetic_energy=np.array(self._kinetic),
            positions=self._system.positions.copy(),
            velocities=self._system.velocities.copy(),
            n_steps=self._total_steps,
            timestep=self._integrator.timestep,
            n_particles=self._system.n_particles,
            wall_time=self._wall_time,
        )

"""Metropolis Monte Carlo engine."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .reporters import Reporter, ReporterGroup
from .stepsize import AdaptiveStepController

if TYPE_CHECKING:
    from ..backends import ComputeBackend
    from ..system import ParticleSystem


class MCPhase(Enum):
    """Phases of the Monte Carlo state machine."""

    INITIALIZING = "initializing"
    PROPOSING = "proposing"
    EVALUATING = "evaluating"
    ACCEPTING = "accepting"
    REJECTING = "rejecting"
    TERMINATED = "terminated"


@dataclass
class MonteCarloResult:
    """Results from a Monte Carlo run."""

    # Energy of each accepted configuration, in order
    energies: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    # One entry per trial, True where the move was accepted
    trace: NDArray[np.bool_] = field(
        default_factory=lambda: np.array([], dtype=bool)
    )
    positions: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    initial_energy: float = 0.0
    final_energy: float = 0.0
    best_energy: float = 0.0
    n_trials: int = 0
    n_accepted: int = 0
    acceptance_ratio: float = 0.0
    amplitude: float = 0.0
    n_particles: int = 0
    wall_time: float = 0.0


class MonteCarloEngine:
    """
    Metropolis Monte Carlo engine over whole-system trial moves.

    Every trial displaces all particles at once, asks the backend for the
    energy of the trial configuration and either commits it or restores the
    pre-trial snapshot. The run ends when ``max_accepted`` moves have been
    accepted or ``max_iterations`` trials have been made.

    Two behaviors are kept exactly as in the reference runs:

    - Each particle draws three uniform offsets but the first one is applied
      to all three axes.
    - A move that raises the energy is accepted when
      ``exp((E_old - E_new) / T) <= u`` for a uniform draw ``u``, i.e. when
      the Boltzmann factor is small, not when it is large.

    Example usage:
        engine = MonteCarloEngine(
            system=ParticleSystem.from_config(config),
            backend=CPUBackend(box, ShiftedLennardJones(3.0)),
            temperature=1.3,
            max_accepted=20000,
            max_iterations=40000,
            rng=np.random.default_rng(1),
        )
        result = engine.run()

    Attributes:
        system: Particle system being sampled.
        backend: Compute backend for energies.
        temperature: Metropolis temperature.
        controller: Trial amplitude controller.
    """

    def __init__(
        self,
        system: ParticleSystem,
        backend: ComputeBackend,
        temperature: float,
        max_accepted: int,
        max_iterations: int,
        controller: AdaptiveStepController | None = None,
        rng: np.random.Generator | int | None = None,
        reporters: list[Reporter] | None = None,
    ) -> None:
        """
        Initialize the engine and compute the baseline energy.

        Args:
            system: Initial particle system, owned by the engine for the run.
            backend: Compute backend for energies.
            temperature: Metropolis temperature T.
            max_accepted: Accepted-move ceiling.
            max_iterations: Trial ceiling.
            controller: Amplitude controller; defaults to adaptive control
                starting at 0.005.
            rng: Random generator or seed.
            reporters: Reporters called after each trial.
        """
        if temperature <= 0:
            raise ValueError(f"temperature must be positive, got {temperature}")
        self._system = system
        self._backend = backend
        self.temperature = temperature
        self.max_accepted = max_accepted
        self.max_iterations = max_iterations
        self.controller = controller if controller is not None else AdaptiveStepController()
        self._rng = (
            rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        )
        self._reporters = ReporterGroup(reporters)

        self._phase = MCPhase.INITIALIZING
        self._n_trials = 0
        self._n_accepted = 0
        self._history: list[float] = []
        self._trace: list[bool] = []
        self._wall_time = 0.0

        self._energy = self._evaluate()
        self._initial_energy = self._energy
        self._best_energy = self._energy

    @property
    def system(self) -> ParticleSystem:
        """Return current particle system."""
        return self._system

    @property
    def backend(self) -> ComputeBackend:
        """Return compute backend."""
        return self._backend

    @property
    def phase(self) -> MCPhase:
        """Return the current state machine phase."""
        return self._phase

    @property
    def energy(self) -> float:
        """Return the energy of the current configuration."""
        return self._energy

    @property
    def best_energy(self) -> float:
        """Return the lowest energy seen so far."""
        return self._best_energy

    @property
    def n_trials(self) -> int:
        """Return number of trials made."""
        return self._n_trials

    @property
    def n_accepted(self) -> int:
        """Return number of accepted trials."""
        return self._n_accepted

    @property
    def history(self) -> list[float]:
        """Return energies of accepted moves."""
        return self._history

    @property
    def trace(self) -> list[bool]:
        """Return the accept/reject outcome of every trial."""
        return self._trace

    @property
    def terminated(self) -> bool:
        """Check whether an iteration ceiling has been reached."""
        return (
            self._n_accepted == self.max_accepted
            or self._n_trials == self.max_iterations
        )

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def _evaluate(self) -> float:
        return self._backend.evaluate(self._system.positions).total_energy

    def _propose(self) -> NDArray[np.floating]:
        """Draw the trial displacement of every particle, shape (N, 3)."""
        amplitude = self.controller.amplitude
        draws = self._rng.random((self._system.n_particles, 3))
        offsets = draws * amplitude - amplitude / 2
        # OPEN QUESTION: intentional? The x offset is used for all three axes.
        return np.repeat(offsets[:, :1], 3, axis=1)

    def _accepts(self, old: float, new: float, u: float) -> bool:
        if new < old:
            return True
        # OPEN QUESTION: likely inverted relative to u <= probability.
        probability = math.exp((old - new) / self.temperature)
        return probability <= u

    def step(self) -> bool:
        """
        Perform one trial.

        Returns:
            True if the trial was accepted, False if it was rejected or the
            run had already reached a ceiling.
        """
        if self._phase is MCPhase.TERMINATED:
            return False

        self.controller.maybe_adjust(self._n_trials)
        if self.terminated:
            self._phase = MCPhase.TERMINATED
            return False

        self._phase = MCPhase.PROPOSING
        snapshot = self._system.snapshot()
        self._system.positions += self._propose()

        self._phase = MCPhase.EVALUATING
        new_energy = self._evaluate()
        u = self._rng.random()

        accepted = self._accepts(self._energy, new_energy, u)
        if accepted:
            self._phase = MCPhase.ACCEPTING
            self._energy = new_energy
            self._history.append(new_energy)
            self._n_accepted += 1
            self.controller.record(True)
            if new_energy < self._best_energy:
                self._best_energy = new_energy
        else:
            self._phase = MCPhase.REJECTING
            self._system.restore(snapshot)

        self._trace.append(accepted)
        self._reporters.report(
            self._n_trials,
            self._system,
            energy=self._energy / self._system.n_particles,
            accepted=accepted,
        )
        self._n_trials += 1
        return accepted

    def run(self) -> MonteCarloResult:
        """
        Run trials until an iteration ceiling is reached.

        Returns:
            MonteCarloResult summarizing the run.
        """
        self._reporters.initialize(self._system)
        start_time = time.perf_counter()
        try:
            while self._phase is not MCPhase.TERMINATED:
                self.step()
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._reporters.finalize(self._system)

        return self.result()

    def result(self) -> MonteCarloResult:
        """Summarize the run so far."""
        n = self._system.n_particles
        # Without any accepted move the baseline configuration is the answer
        last_energy = self._history[-1] if self._history else self._initial_energy
        ratio = self._n_accepted / self.max_iterations if self.max_iterations else 0.0

        return MonteCarloResult(
            energies=np.array(self._history),
            trace=np.array(self._trace, dtype=bool),
            positions=self._system.positions.copy(),
            initial_energy=self._initial_energy,
            final_energy=last_energy / n,
            best_energy=self._best_energy,
            n_trials=self._n_trials,
            n_accepted=self._n_accepted,
            acceptance_ratio=ratio,
            amplitude=self.controller.amplitude,
            n_particles=n,
            wall_time=self._wall_time,
        )

"""Tests for the Metropolis Monte Carlo engine."""

import math

import numpy as np
import pytest

from ljsim.backends import ComputeBackend, CPUBackend, Evaluation
from ljsim.config import SimulationConfig
from ljsim.engines import (
    AdaptiveStepController,
    EnergyHistoryReporter,
    MCPhase,
    MonteCarloEngine,
)
from ljsim.errors import BackendError
from ljsim.forcefields import ShiftedLennardJones
from ljsim.system import Box, ParticleSystem


class ScriptedBackend(ComputeBackend):
    """
    Backend that returns a prescribed total energy per call.

    ``energy_fn(call_index)`` gives the total energy; call 0 is the
    baseline evaluation made when the engine is created.
    """

    def __init__(self, energy_fn):
        super().__init__(Box.cubic(6.0), ShiftedLennardJones(3.0))
        self.energy_fn = energy_fn
        self.calls = 0

    @property
    def name(self):
        return "scripted"

    def evaluate(self, positions, compute_forces=False):
        n = len(positions)
        # Spread the total over the off-diagonal so that sum / 2 == total
        matrix = np.full((n, n), 0.0)
        if n > 1:
            matrix[0, 1] = matrix[1, 0] = self.energy_fn(self.calls)
        self.calls += 1
        return Evaluation(energy_matrix=matrix)


class BrokenBackend(ScriptedBackend):
    """Backend that fails on the first trial evaluation."""

    def evaluate(self, positions, compute_forces=False):
        if self.calls > 0:
            raise BackendError("device lost")
        return super().evaluate(positions, compute_forces)


def two_particles():
    positions = np.array([[1.0, 1.0, 1.0], [2.5, 1.0, 1.0]])
    return ParticleSystem.create(positions, Box.cubic(6.0))


def make_engine(backend, seed=0, max_accepted=1000, max_iterations=1000, **kwargs):
    return MonteCarloEngine(
        system=kwargs.pop("system", None) or two_particles(),
        backend=backend,
        temperature=kwargs.pop("temperature", 1.3),
        max_accepted=max_accepted,
        max_iterations=max_iterations,
        rng=seed,
        **kwargs,
    )


def first_trial_draws(seed, n_particles):
    """Replay the generator: (N, 3) offsets draw, then one acceptance draw."""
    rng = np.random.default_rng(seed)
    draws = rng.random((n_particles, 3))
    u = rng.random()
    return draws, u


@pytest.fixture
def reference_engine():
    """Engine on the reference 32-particle lattice with the CPU backend."""

    def factory(seed, max_iterations=100):
        config = SimulationConfig.monte_carlo_reference(seed=seed)
        system = ParticleSystem.from_config(config)
        backend = CPUBackend(system.box, ShiftedLennardJones(config.cutoff))
        return MonteCarloEngine(
            system=system,
            backend=backend,
            temperature=config.temperature,
            max_accepted=config.max_accepted,
            max_iterations=max_iterations,
            rng=seed,
        )

    return factory


class TestInitialization:
    """Test engine construction."""

    def test_baseline_energy(self):
        backend = ScriptedBackend(lambda call: -4.0)
        engine = make_engine(backend)
        assert engine.energy == -4.0
        assert engine.best_energy == -4.0
        assert engine.phase is MCPhase.INITIALIZING
        assert backend.calls == 1

    def test_default_controller(self):
        engine = make_engine(ScriptedBackend(lambda call: 0.0))
        assert isinstance(engine.controller, AdaptiveStepController)
        assert engine.controller.amplitude == 0.005

    def test_invalid_temperature(self):
        with pytest.raises(ValueError):
            make_engine(ScriptedBackend(lambda call: 0.0), temperature=0.0)


class TestTrialMoves:
    """Test proposal and acceptance."""

    def test_downhill_always_accepted(self):
        engine = make_engine(ScriptedBackend(lambda call: -float(call)))
        for _ in range(20):
            assert engine.step()
        assert engine.n_accepted == 20
        assert engine.history == [-float(k) for k in range(1, 21)]

    def test_offsets_shared_across_axes(self):
        """Test the first draw of each particle displaces all three axes.

        OPEN QUESTION: intentional? Three draws are made per particle but
        only the first is used.
        """
        seed = 5
        engine = make_engine(ScriptedBackend(lambda call: -float(call)), seed=seed)
        before = engine.system.positions.copy()
        assert engine.step()

        draws, _ = first_trial_draws(seed, 2)
        amplitude = engine.controller.amplitude
        expected = draws[:, 0] * amplitude - amplitude / 2
        moved = engine.system.positions - before

        for axis in range(3):
            assert np.allclose(moved[:, axis], expected, atol=1e-12)
        assert np.all(np.abs(moved) <= amplitude / 2 + 1e-12)

    def test_large_uphill_move_accepted(self):
        """Test the acceptance test passes when exp(-dE/T) <= u.

        OPEN QUESTION: likely inverted. The move below has a Boltzmann
        factor smaller than u, so the conventional u <= exp(-dE/T) would
        reject it.
        """
        seed = 2
        temperature = 1.3
        _, u = first_trial_draws(seed, 2)
        delta = -temperature * math.log(u) + 0.5
        assert math.exp(-delta / temperature) < u

        engine = make_engine(
            ScriptedBackend(lambda call: 0.0 if call == 0 else delta),
            seed=seed,
            temperature=temperature,
        )
        assert engine.step()
        assert engine.energy == delta

    def test_small_uphill_move_rejected(self):
        """Test a move whose Boltzmann factor exceeds u is rejected."""
        seed = 2
        temperature = 1.3
        _, u = first_trial_draws(seed, 2)
        delta = -temperature * math.log(u) / 2
        assert math.exp(-delta / temperature) > u

        engine = make_engine(
            ScriptedBackend(lambda call: 0.0 if call == 0 else delta),
            seed=seed,
            temperature=temperature,
        )
        assert not engine.step()
        assert engine.energy == 0.0
        assert engine.n_accepted == 0
        assert engine.n_trials == 1

    def test_rejection_restores_positions_exactly(self):
        engine = make_engine(ScriptedBackend(lambda call: 1e-9 * call))
        before = engine.system.positions.tobytes()
        for _ in range(10):
            assert not engine.step()
            assert engine.system.positions.tobytes() == before

    def test_rejection_on_real_backend(self, reference_engine):
        """Test every rejected trial leaves the configuration byte-identical."""
        engine = reference_engine(seed=4, max_iterations=60)
        rejections = 0
        while engine.phase is not MCPhase.TERMINATED:
            before = engine.system.positions.tobytes()
            accepted = engine.step()
            if engine.phase is MCPhase.TERMINATED:
                break
            if not accepted:
                rejections += 1
                assert engine.system.positions.tobytes() == before
        assert rejections > 0


class TestTermination:
    """Test the two iteration ceilings."""

    def test_accepted_ceiling(self):
        engine = make_engine(
            ScriptedBackend(lambda call: -float(call)),
            max_accepted=5,
            max_iterations=100,
        )
        result = engine.run()

        assert engine.phase is MCPhase.TERMINATED
        assert result.n_accepted == 5
        assert result.n_trials == 5
        assert result.acceptance_ratio == pytest.approx(5 / 100)

    def test_trial_ceiling(self):
        engine = make_engine(
            ScriptedBackend(lambda call: 1e-9 * call),
            max_accepted=100,
            max_iterations=20,
        )
        result = engine.run()

        assert result.n_trials == 20
        assert result.n_accepted == 0
        assert len(result.trace) == 20
        assert result.acceptance_ratio == 0.0

    def test_step_after_termination(self):
        engine = make_engine(
            ScriptedBackend(lambda call: -float(call)), max_accepted=1
        )
        engine.run()
        assert not engine.step()
        assert engine.n_trials == 1

    def test_final_energy_without_acceptance(self):
        """Test the baseline is reported when nothing was accepted."""
        engine = make_engine(
            ScriptedBackend(lambda call: -3.0 if call == 0 else -3.0 + 1e-9),
            max_iterations=10,
        )
        result = engine.run()
        assert result.n_accepted == 0
        assert result.final_energy == pytest.approx(-3.0 / 2)

    def test_final_energy_is_last_accepted(self):
        engine = make_engine(
            ScriptedBackend(lambda call: -float(call)),
            max_accepted=4,
        )
        result = engine.run()
        assert result.final_energy == pytest.approx(-4.0 / 2)
        assert result.best_energy == -4.0
        assert result.initial_energy == 0.0


class TestBookkeeping:
    """Test history, trace and adaptation during runs."""

    def test_history_matches_trace(self, reference_engine):
        result = reference_engine(seed=1).run()

        assert len(result.trace) == result.n_trials
        assert len(result.energies) == int(result.trace.sum()) == result.n_accepted
        assert np.all(np.isfinite(result.energies))
        assert np.isfinite(result.final_energy)
        assert result.best_energy <= result.initial_energy

    def test_reproducible_with_seed(self, reference_engine):
        first = reference_engine(seed=9).run()
        second = reference_engine(seed=9).run()

        assert np.array_equal(first.trace, second.trace)
        assert np.array_equal(first.energies, second.energies)
        assert np.array_equal(first.positions, second.positions)

    def test_amplitude_halves_after_accepting_window(self):
        engine = make_engine(
            ScriptedBackend(lambda call: -float(call)), max_iterations=150
        )
        result = engine.run()
        assert result.n_accepted == 150
        assert result.amplitude == pytest.approx(0.0025)

    def test_reporters_receive_trials(self):
        reporter = EnergyHistoryReporter(frequency=10)
        engine = make_engine(
            ScriptedBackend(lambda call: -float(call)),
            max_iterations=35,
            reporters=[reporter],
        )
        engine.run()
        assert list(reporter.steps) == [0, 10, 20, 30]
        # Energy per particle after trial k is -(k + 1) / 2
        assert reporter.energies[0] == pytest.approx(-0.5)

    def test_backend_error_aborts_run(self):
        engine = make_engine(BrokenBackend(lambda call: 0.0))
        with pytest.raises(BackendError, match="device lost"):
            engine.run()
        assert engine.n_trials == 0

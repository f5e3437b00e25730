"""
Simple high-level simulation API.

This module builds the initial lattice, backend and engine from a
SimulationConfig and runs them in one call.

Example:
    >>> from ljsim import simulate
    >>> result = simulate.monte_carlo(max_iterations=2000, seed=1)
    >>> print(result.final_energy)
"""

from __future__ import annotations

from typing import Any

from .backends import ComputeBackend, get_backend
from .backends.dispatcher import BackendType
from .config import SimulationConfig
from .engines import (
    AdaptiveStepController,
    EnergyReporter,
    FixedStepController,
    MDEngine,
    MDResult,
    MonteCarloEngine,
    MonteCarloResult,
    Reporter,
)
from .forcefields import ShiftedLennardJones
from .integrators import SemiImplicitEulerIntegrator
from .system import Box, ParticleSystem


def _resolve_config(
    config: SimulationConfig | None,
    default: SimulationConfig,
    overrides: dict[str, Any],
) -> SimulationConfig:
    base = config if config is not None else default
    return base.replace(**overrides) if overrides else base


def _make_backend(
    backend: BackendType | ComputeBackend,
    config: SimulationConfig,
    backend_options: dict[str, Any] | None,
) -> ComputeBackend:
    box = Box.cubic(config.box_size)
    potential = ShiftedLennardJones(cutoff=config.cutoff)
    options = dict(backend_options or {})
    if backend == "cpu":
        options.setdefault("n_workers", config.n_workers)
    return get_backend(backend, box, potential, **options)


def monte_carlo(
    config: SimulationConfig | None = None,
    backend: BackendType | ComputeBackend = "cpu",
    backend_options: dict[str, Any] | None = None,
    reporters: list[Reporter] | None = None,
    verbose: bool = True,
    **overrides: Any,
) -> MonteCarloResult:
    """
    Run a Metropolis Monte Carlo simulation.

    Args:
        config: Run configuration; defaults to the reference Monte Carlo run.
        backend: Backend name or instance. Instances are used but not closed.
        backend_options: Extra arguments for backend creation.
        reporters: Additional reporters.
        verbose: Print a summary at the end of the run.
        **overrides: Configuration fields to override.

    Returns:
        MonteCarloResult of the run.

    Raises:
        ConfigurationError: If the configuration is invalid.
        BackendError: If an evaluation fails.

    Example:
        >>> result = monte_carlo(max_iterations=4000, seed=7, verbose=False)
        >>> print(f"{result.final_energy:.4f}")
    """
    config = _resolve_config(
        config, SimulationConfig.monte_carlo_reference(), overrides
    )
    system = ParticleSystem.from_config(config)

    controller_cls = AdaptiveStepController if config.adaptive_step else FixedStepController
    controller = controller_cls(
        amplitude=config.initial_amplitude,
        window=config.adaptation_window,
        upper=config.upper_acceptance,
        lower=config.lower_acceptance,
    )

    all_reporters = list(reporters or [])
    if verbose and config.report_interval > 0:
        all_reporters.append(EnergyReporter(frequency=config.report_interval))

    owned = not isinstance(backend, ComputeBackend)
    compute = _make_backend(backend, config, backend_options)
    try:
        if verbose:
            print(
                f"Monte Carlo: N={config.n_particles}, L={config.box_size}, "
                f"rc={config.cutoff}, T={config.temperature}, backend={compute.name}"
            )
        engine = MonteCarloEngine(
            system=system,
            backend=compute,
            temperature=config.temperature,
            max_accepted=config.max_accepted,
            max_iterations=config.max_iterations,
            controller=controller,
            rng=config.seed,
            reporters=all_reporters,
        )
        result = engine.run()
    finally:
        if owned:
            compute.close()

    if verbose:
        print(f"\nenergy is {result.final_energy:f} ")
        print(f"good iters percent {result.acceptance_ratio:f} ")
        print(f"\nTotal execution time in seconds =  {result.wall_time:f}")

    return result


def molecular_dynamics(
    config: SimulationConfig | None = None,
    backend: BackendType | ComputeBackend = "cpu",
    backend_options: dict[str, Any] | None = None,
    reporters: list[Reporter] | None = None,
    verbose: bool = True,
    **overrides: Any,
) -> MDResult:
    """
    Run a constant-energy molecular dynamics simulation.

    Args:
        config: Run configuration; defaults to the reference MD run.
        backend: Backend name or instance. Instances are used but not closed.
        backend_options: Extra arguments for backend creation.
        reporters: Additional reporters.
        verbose: Print energy reports and a summary.
        **overrides: Configuration fields to override.

    Returns:
        MDResult of the run.

    Raises:
        ConfigurationError: If the configuration is invalid.
        BackendError: If an evaluation fails.
    """
    config = _resolve_config(config, SimulationConfig.md_reference(), overrides)
    system = ParticleSystem.from_config(config)

    all_reporters = list(reporters or [])
    if verbose and config.report_interval > 0:
        all_reporters.append(EnergyReporter(frequency=config.report_interval))

    owned = not isinstance(backend, ComputeBackend)
    compute = _make_backend(backend, config, backend_options)
    try:
        if verbose:
            print(
                f"Molecular dynamics: N={config.n_particles}, L={config.box_size}, "
                f"rc={config.cutoff}, dt={config.timestep}, backend={compute.name}"
            )
        engine = MDEngine(
            system=system,
            backend=compute,
            integrator=SemiImplicitEulerIntegrator(dt=config.timestep),
            report_interval=config.report_interval,
            reporters=all_reporters,
        )
        result = engine.run(config.max_iterations)
    finally:
        if owned:
            compute.close()

    if verbose:
        print(f"\nTotal execution time in seconds =  {result.wall_time:f}")

    return result

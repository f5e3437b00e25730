"""
Plotting helpers for simulation results.

Example:
    >>> from ljsim import simulate, plotting
    >>> result = simulate.monte_carlo(max_iterations=4000, verbose=False)
    >>> plotting.energy(result, show=False)
    >>> plotting.save("mc_energy.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .engines import MDResult, MonteCarloResult

try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def rolling_acceptance(trace: np.ndarray, window: int = 100) -> np.ndarray:
    """
    Fraction of accepted trials in consecutive windows of a trial trace.

    Args:
        trace: Boolean accept/reject outcome of every trial.
        window: Trials per window. A trailing partial window is dropped.

    Returns:
        Array of acceptance fractions, one per full window.
    """
    if window < 1:
        raise ValueError(f"window must be positive, got {window}")
    trace = np.asarray(trace, dtype=bool)
    n_windows = len(trace) // window
    if n_windows == 0:
        return np.array([])
    blocks = trace[: n_windows * window].reshape(n_windows, window)
    return blocks.mean(axis=1)


def energy(
    result: MonteCarloResult | MDResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot the energy trajectory of a run.

    Monte Carlo results are plotted per accepted move; MD results show the
    sampled potential, kinetic and total energy per particle against step.

    Args:
        result: MonteCarloResult or MDResult.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    if hasattr(result, "trace"):
        per_particle = result.energies / max(result.n_particles, 1)
        ax.plot(np.arange(1, len(per_particle) + 1), per_particle, "b-", lw=0.7)
        ax.axhline(
            y=result.final_energy,
            color="r",
            linestyle="--",
            alpha=0.5,
            label=f"Final = {result.final_energy:.4f}",
        )
        ax.set_xlabel("Accepted move")
        ax.set_title(
            f"Monte Carlo energy (acceptance {result.acceptance_ratio:.3f})"
        )
    else:
        total = result.potential_energy + result.kinetic_energy
        ax.plot(result.steps, result.potential_energy, "b-", label="Potential")
        ax.plot(result.steps, result.kinetic_energy, "r-", label="Kinetic")
        ax.plot(result.steps, total, "k-", lw=2, label="Total")
        ax.set_xlabel("Step")
        ax.set_title(f"MD energy (drift {result.energy_drift:.2e})")

    ax.set_ylabel("Energy per particle")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def acceptance(
    result: MonteCarloResult,
    window: int = 100,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot the acceptance fraction per window of a Monte Carlo run.

    Args:
        result: MonteCarloResult from a run.
        window: Trials per window.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fractions = rolling_acceptance(result.trace, window)
    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(np.arange(len(fractions)) * window, fractions, "g-", lw=1)
    ax.set_xlabel("Trial")
    ax.set_ylabel("Accepted fraction")
    ax.set_ylim(0, 1)
    ax.set_title(f"Acceptance per {window} trials")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    print(f"Saved plot to {filename}")


def show() -> None:
    """Display all open figures."""
    _check_matplotlib()
    plt.show()

#!/usr/bin/env python
"""
Quick start example - the simplest way to run a simulation.

Runs shortened versions of the reference Monte Carlo and molecular
dynamics scenarios through the high-level API.

Usage:
    python examples/quickstart.py
"""

import sys

from ljsim import SimulationError, simulate


def main():
    print("=" * 60)
    print("ljsim Quick Start")
    print("=" * 60)

    try:
        # 1. Metropolis Monte Carlo, 32 particles at T = 1.3
        print("\n1. Monte Carlo (CPU backend):")
        print("-" * 40)
        mc = simulate.monte_carlo(max_iterations=4000, max_accepted=2000, seed=1)
        print(f"   Lowest energy seen: {mc.best_energy / mc.n_particles:.4f}")

        # 2. Same run on the accelerator backend (host device)
        print("\n2. Monte Carlo (accelerator backend):")
        print("-" * 40)
        simulate.monte_carlo(
            backend="accelerator", max_iterations=4000, max_accepted=2000, seed=1
        )

        # 3. Constant-energy MD with a report every 500 steps
        print("\n3. Molecular dynamics:")
        print("-" * 40)
        md = simulate.molecular_dynamics(max_iterations=2000)
        print(f"   Sampled energy drift: {md.energy_drift:.3e}")
    except SimulationError as e:
        print(f"Simulation failed: {e}", file=sys.stderr)
        return 1

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())

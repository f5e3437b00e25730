#!/usr/bin/env python
"""
Example: reference constant-energy molecular dynamics run.

32 particles start at rest on a lattice with spacing 1.5 and evolve for
20000 semi-implicit Euler steps of dt = 0.0005. The potential energy per
particle is printed every 500 steps (every 1000 with --cpu-reporting).

Usage:
    python examples/run_molecular_dynamics.py
    python examples/run_molecular_dynamics.py --backend accelerator --wrap
"""

import argparse
import sys

from ljsim import SimulationConfig, SimulationError, plotting, simulate


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--backend", choices=["cpu", "accelerator"], default="cpu")
    parser.add_argument("--workers", type=int, default=1, help="CPU worker threads")
    parser.add_argument("--steps", type=int, default=20000)
    parser.add_argument(
        "--wrap",
        action="store_true",
        help="Fold positions into the centered cell before upload (accelerator)",
    )
    parser.add_argument(
        "--cpu-reporting", action="store_true", help="Report every 1000 steps"
    )
    parser.add_argument("--plot", action="store_true", help="Save an energy plot")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    preset = (
        SimulationConfig.md_cpu_reference
        if args.cpu_reporting
        else SimulationConfig.md_reference
    )
    backend_options = {"wrap_inputs": True} if args.wrap else None

    try:
        config = preset(max_iterations=args.steps, n_workers=args.workers)
        if args.backend == "cpu" and backend_options:
            print("--wrap only applies to the accelerator backend", file=sys.stderr)
            backend_options = None
        result = simulate.molecular_dynamics(
            config, backend=args.backend, backend_options=backend_options
        )
    except SimulationError as e:
        print(f"MD run failed: {e}", file=sys.stderr)
        return 1

    print(f"Samples: {len(result.steps)}, energy drift: {result.energy_drift:.3e}")

    if args.plot:
        plotting.energy(result, show=False)
        plotting.save("md_energy.png")

    return 0


if __name__ == "__main__":
    sys.exit(main())

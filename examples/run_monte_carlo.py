#!/usr/bin/env python
"""
Example: reference Metropolis Monte Carlo run.

32 Lennard-Jones particles in a periodic cube of edge 6 with cutoff 3 at
T = 1.3. The run stops after 20000 accepted moves or 40000 trials and
prints the energy per particle of the last accepted configuration.

Usage:
    python examples/run_monte_carlo.py
    python examples/run_monte_carlo.py --backend accelerator --seed 3 --plot
"""

import argparse
import sys

from ljsim import SimulationConfig, SimulationError, plotting, simulate


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--backend", choices=["cpu", "accelerator"], default="cpu")
    parser.add_argument("--workers", type=int, default=1, help="CPU worker threads")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--trials", type=int, default=40000)
    parser.add_argument(
        "--fixed-step", action="store_true", help="Disable amplitude adaptation"
    )
    parser.add_argument("--plot", action="store_true", help="Save energy plots")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = SimulationConfig.monte_carlo_reference(
            max_iterations=args.trials,
            n_workers=args.workers,
            adaptive_step=not args.fixed_step,
            seed=args.seed,
        )
        result = simulate.monte_carlo(config, backend=args.backend)
    except SimulationError as e:
        print(f"Monte Carlo run failed: {e}", file=sys.stderr)
        return 1

    print(f"Trials: {result.n_trials}, accepted: {result.n_accepted}")
    print(f"Final trial amplitude: {result.amplitude:g}")

    if args.plot:
        plotting.energy(result, show=False)
        plotting.save("mc_energy.png")
        plotting.acceptance(result, window=config.adaptation_window, show=False)
        plotting.save("mc_acceptance.png")

    return 0


if __name__ == "__main__":
    sys.exit(main())

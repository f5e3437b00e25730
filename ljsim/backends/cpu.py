"""In-process CPU backend parallelized over worker threads."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import BackendError
from ..neighborlists import ImageNeighborList
from .base import ComputeBackend, Evaluation

if TYPE_CHECKING:
    from ..forcefields import PairPotential
    from ..system import Box


def partition_atoms(n_atoms: int, n_workers: int, rank: int) -> tuple[int, int]:
    """
    Get the contiguous particle range handled by one worker.

    Args:
        n_atoms: Total number of particles.
        n_workers: Number of workers.
        rank: Index of this worker.

    Returns:
        Tuple of (start_index, end_index) for this worker.
    """
    atoms_per_worker = n_atoms // n_workers
    remainder = n_atoms % n_workers

    if rank < remainder:
        start = rank * (atoms_per_worker + 1)
        end = start + atoms_per_worker + 1
    else:
        start = rank * atoms_per_worker + remainder
        end = start + atoms_per_worker

    return start, end


class CPUBackend(ComputeBackend):
    """
    Reference backend evaluating every ordered pair on the host.

    The outer loop over particles is split into contiguous row ranges, one
    per worker thread. Workers read the shared position array and write only
    their own rows of the result matrices, so no synchronization is needed
    beyond waiting for all of them.

    Example:
        with CPUBackend(Box.cubic(6.0), ShiftedLennardJones(3.0), n_workers=4) as cpu:
            energy = cpu.evaluate(positions).total_energy
    """

    def __init__(
        self,
        box: Box,
        potential: PairPotential,
        n_workers: int = 1,
    ) -> None:
        """
        Initialize CPU backend.

        Args:
            box: Periodic simulation box.
            potential: Pair potential to evaluate.
            n_workers: Number of worker threads; 1 evaluates inline.
        """
        super().__init__(box, potential)
        if n_workers < 1:
            raise ValueError(f"n_workers must be positive, got {n_workers}")
        self._n_workers = n_workers
        self._neighbors = ImageNeighborList(box, potential.cutoff)
        self._executor: ThreadPoolExecutor | None = None
        if n_workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=n_workers, thread_name_prefix="ljsim-cpu"
            )

    @property
    def name(self) -> str:
        """Return backend name."""
        return "cpu"

    @property
    def n_workers(self) -> int:
        """Return number of worker threads."""
        return self._n_workers

    def _fill_rows(
        self,
        positions: NDArray[np.floating],
        start: int,
        stop: int,
        energies: NDArray[np.floating],
        forces: NDArray[np.floating] | None,
    ) -> None:
        for i, images in self._neighbors.rows(positions, start, stop):
            if len(images) == 0:
                continue
            pair_energy, pair_force = self._potential.pair_terms(
                images.displacements, images.d2
            )
            energies[i, images.indices] = pair_energy
            if forces is not None:
                forces[i, images.indices] = pair_force

    def evaluate(
        self, positions: ArrayLike, compute_forces: bool = False
    ) -> Evaluation:
        """Evaluate the energy (and force) matrices for all ordered pairs."""
        positions = np.array(positions, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")
        n = len(positions)

        energies = np.zeros((n, n), dtype=np.float64)
        forces = np.zeros((n, n, 3), dtype=np.float64) if compute_forces else None

        try:
            if self._executor is None:
                self._fill_rows(positions, 0, n, energies, forces)
            else:
                futures = [
                    self._executor.submit(
                        self._fill_rows,
                        positions,
                        *partition_atoms(n, self._n_workers, rank),
                        energies,
                        forces,
                    )
                    for rank in range(self._n_workers)
                ]
                for future in futures:
                    future.result()
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(f"CPU evaluation failed: {e}") from e

        return Evaluation(energy_matrix=energies, force_matrix=forces)

    def close(self) -> None:
        """Shut down the worker threads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

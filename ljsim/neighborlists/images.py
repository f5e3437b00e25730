"""Minimum-image neighbor enumeration over the 27 periodic replicas."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from ..system import Box


@dataclass(frozen=True)
class NeighborImages:
    """
    Neighbor images of one particle within the cutoff.

    Attributes:
        indices: Index j of each neighbor, shape (K,).
        displacements: Vectors r_j(image) - r_i, shape (K, 3).
        d2: Squared distances, shape (K,).
    """

    indices: NDArray[np.integer]
    displacements: NDArray[np.floating]
    d2: NDArray[np.floating]

    def __len__(self) -> int:
        return len(self.indices)


class ImageNeighborList:
    """
    Explicit replica enumeration of short-range neighbors.

    For a particle i, every other particle j is displaced by each of the 27
    shifts in {-L, 0, L}^3 and the image closest to i is kept if its squared
    distance is strictly below cutoff². The box must satisfy cutoff <= L/2 so
    that at most one image of each j qualifies.

    Attributes:
        box: Periodic simulation box.
    """

    def __init__(self, box: Box, cutoff: float) -> None:
        """
        Initialize the enumerator.

        Args:
            box: Periodic simulation box.
            cutoff: Neighbor cutoff radius.

        Raises:
            ConfigurationError: If cutoff > L / 2.
        """
        box.check_cutoff(cutoff)
        self.box = box
        self._cutoff = float(cutoff)
        self._shifts = box.image_shifts

    @property
    def cutoff(self) -> float:
        """Return the cutoff distance."""
        return self._cutoff

    def neighbors(self, index: int, positions: ArrayLike) -> NeighborImages:
        """
        Enumerate the neighbor images of one particle.

        Args:
            index: Particle index i.
            positions: All positions, shape (N, 3), wrapped or not.

        Returns:
            NeighborImages sorted by neighbor index.
        """
        positions = np.asarray(positions, dtype=np.float64)
        # (27, N, 3) displacements (r_j + shift) - r_i
        candidates = (
            positions[np.newaxis, :, :] + self._shifts[:, np.newaxis, :]
        ) - positions[index]
        d2 = np.einsum("sjk,sjk->sj", candidates, candidates)
        best = np.argmin(d2, axis=0)
        columns = np.arange(len(positions))
        best_d2 = d2[best, columns]

        mask = best_d2 < self._cutoff * self._cutoff
        mask[index] = False
        indices = columns[mask]
        return NeighborImages(
            indices=indices,
            displacements=candidates[best[mask], indices],
            d2=best_d2[mask],
        )

    def count(self, index: int, positions: ArrayLike) -> int:
        """Return the number of neighbor images of one particle."""
        return len(self.neighbors(index, positions))

    def rows(
        self, positions: ArrayLike, start: int = 0, stop: int | None = None
    ) -> Iterator[tuple[int, NeighborImages]]:
        """
        Iterate over (i, neighbors of i) for a contiguous range of particles.

        Args:
            positions: All positions, shape (N, 3).
            start: First particle index.
            stop: One past the last particle index, defaults to N.
        """
        positions = np.asarray(positions, dtype=np.float64)
        stop = len(positions) if stop is None else stop
        for i in range(start, stop):
            yield i, self.neighbors(i, positions)

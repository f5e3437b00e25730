"""Initial lattice placement."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError


def _axis_sites(start: float, stop: float, spacing: float) -> list[float]:
    # Accumulate like a running loop counter so site coordinates match
    # start + spacing + spacing + ... exactly.
    sites = []
    value = start
    while value < stop:
        sites.append(value)
        value += spacing
    return sites


def lattice_positions(
    n_particles: int,
    box_size: float,
    spacing: float,
    margin: float = 0.5,
    centered: bool = False,
) -> NDArray[np.floating]:
    """
    Place particles on a simple cubic lattice inside the box.

    Sites run from ``margin`` to ``box_size - margin`` (exclusive) on each
    axis, or from ``-(box_size - margin) / 2`` to ``(box_size - margin) / 2``
    when ``centered``. The x coordinate varies slowest. Only the first
    ``n_particles`` sites are used, so the filled lattice need not be
    balanced.

    Args:
        n_particles: Number of particles to place.
        box_size: Edge length of the cubic box.
        spacing: Distance between neighboring sites along an axis.
        margin: Distance kept free at the box faces.
        centered: Build the lattice around the origin.

    Returns:
        Positions array of shape (n_particles, 3).

    Raises:
        ConfigurationError: If fewer than n_particles sites fit in the box.
    """
    if spacing <= 0:
        raise ConfigurationError(f"lattice spacing must be positive, got {spacing}")

    if centered:
        half_extent = (box_size - margin) / 2
        sites = _axis_sites(-half_extent, half_extent, spacing)
    else:
        sites = _axis_sites(margin, box_size - margin, spacing)

    capacity = len(sites) ** 3
    if capacity < n_particles:
        raise ConfigurationError(
            f"lattice holds {capacity} sites but {n_particles} particles were "
            f"requested; decrease the lattice spacing"
        )

    positions = np.empty((n_particles, 3), dtype=np.float64)
    count = 0
    for x in sites:
        for y in sites:
            for z in sites:
                if count == n_particles:
                    return positions
                positions[count] = (x, y, z)
                count += 1
    return positions

"""
Single-precision Lennard-Jones kernels for accelerator devices.

Kernels share one calling convention: they receive a dict of input buffers
and a dict of scalar arguments and return a dict of output buffers. Inputs
use the device layout: positions as float32 rows of four components
(x, y, z, padding), matching the 16-byte float3 alignment of device memory.

The math mirrors ShiftedLennardJones and ImageNeighborList in float32:
each work item (i, j) enumerates the 27 replicas of j, keeps the nearest
image, and writes the shifted energy and force for pairs inside the cutoff.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from itertools import product

import numpy as np
from numpy.typing import NDArray

Kernel = Callable[
    [Mapping[str, NDArray[np.floating]], Mapping[str, float]],
    dict[str, NDArray[np.floating]],
]


def _image_shifts(box_size: np.float32) -> NDArray[np.float32]:
    steps = (-box_size, np.float32(0.0), box_size)
    return np.array(
        [(x, y, z) for z, y, x in product(steps, repeat=3)], dtype=np.float32
    )


def _nearest_pairs(
    positions: NDArray[np.float32], args: Mapping[str, float]
) -> tuple[NDArray[np.float32], NDArray[np.float32], NDArray[np.bool_]]:
    box_size = np.float32(args["box_size"])
    cutoff = np.float32(args["cutoff"])
    xyz = positions[:, :3]
    n = len(xyz)

    # (N, N, 27, 3) displacements (r_j + shift) - r_i
    candidates = (
        xyz[np.newaxis, :, np.newaxis, :] + _image_shifts(box_size)
    ) - xyz[:, np.newaxis, np.newaxis, :]
    d2 = np.einsum("ijsk,ijsk->ijs", candidates, candidates)
    best = np.argmin(d2, axis=2)
    rows, cols = np.indices((n, n))
    disp = candidates[rows, cols, best]
    d2 = d2[rows, cols, best]

    mask = d2 < cutoff * cutoff
    np.fill_diagonal(mask, False)
    return disp, d2, mask


def _lj_terms(
    d2: NDArray[np.float32], mask: NDArray[np.bool_], args: Mapping[str, float]
) -> tuple[NDArray[np.float32], NDArray[np.float32]]:
    epsilon = np.float32(args["epsilon"])
    sigma6 = np.float32(args["sigma"]) ** 6
    sigma12 = sigma6 * sigma6
    shift = np.float32(args["shift"])

    safe = np.where(mask, d2, np.float32(1.0))
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        r6 = safe * safe * safe
        r12 = r6 * r6
        r8 = r6 * safe
        r14 = r12 * safe
        energy = np.float32(4.0) * epsilon * (sigma12 / r12 - sigma6 / r6) - shift
        multiplier = np.float32(12.0) * epsilon * (sigma12 / r14 - sigma6 / r8)
    zero = np.float32(0.0)
    return np.where(mask, energy, zero), np.where(mask, multiplier, zero)


def lj_energy(
    buffers: Mapping[str, NDArray[np.floating]], args: Mapping[str, float]
) -> dict[str, NDArray[np.floating]]:
    """Pairwise energy kernel: positions (N, 4) -> energy (N * N,)."""
    positions = np.asarray(buffers["positions"], dtype=np.float32)
    _, d2, mask = _nearest_pairs(positions, args)
    energy, _ = _lj_terms(d2, mask, args)
    return {"energy": energy.reshape(-1)}


def lj_energy_force(
    buffers: Mapping[str, NDArray[np.floating]], args: Mapping[str, float]
) -> dict[str, NDArray[np.floating]]:
    """Pairwise energy and force kernel: -> energy (N * N,), force (N * N, 4)."""
    positions = np.asarray(buffers["positions"], dtype=np.float32)
    disp, d2, mask = _nearest_pairs(positions, args)
    energy, multiplier = _lj_terms(d2, mask, args)

    n = len(positions)
    force = np.zeros((n * n, 4), dtype=np.float32)
    force[:, :3] = (disp * multiplier[..., np.newaxis]).reshape(-1, 3)
    return {"energy": energy.reshape(-1), "force": force}


KERNELS: dict[str, Kernel] = {
    "lj_energy": lj_energy,
    "lj_energy_force": lj_energy_force,
}

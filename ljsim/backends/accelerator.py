"""Backend that dispatches pairwise evaluation to an accelerator device."""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import BackendError, ConfigurationError
from ..forcefields import ShiftedLennardJones
from .base import ComputeBackend, Evaluation

if TYPE_CHECKING:
    from ..forcefields import PairPotential
    from ..system import Box
    from .devices import KernelDevice


class AcceleratorBackend(ComputeBackend):
    """
    Backend that runs one device kernel per evaluation.

    Each call packs the positions into a float32 (N, 4) buffer, submits the
    kernel over an N x N global work size and blocks until the output
    buffers are read back. There is no overlap between successive calls.
    Results are single precision on the device and converted to float64.

    Any device failure, timeout or malformed output raises BackendError.

    Attributes:
        device: Device that executes the kernels.
        wrap_inputs: Fold positions into (-L/2, L/2] before upload.
        timeout: Seconds to wait for a launch, None to wait indefinitely.
    """

    def __init__(
        self,
        box: Box,
        potential: PairPotential,
        device: KernelDevice,
        wrap_inputs: bool = False,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize accelerator backend.

        Args:
            box: Periodic simulation box.
            potential: Pair potential; must be ShiftedLennardJones since the
                device kernels implement that model.
            device: Device that executes the kernels.
            wrap_inputs: Fold positions into the centered primary cell on the
                host before upload.
            timeout: Seconds to wait for each launch.
        """
        if not isinstance(potential, ShiftedLennardJones):
            raise ConfigurationError(
                f"accelerator kernels implement ShiftedLennardJones, "
                f"got {type(potential).__name__}"
            )
        super().__init__(box, potential)
        self.device = device
        self.wrap_inputs = wrap_inputs
        self.timeout = timeout

    @property
    def name(self) -> str:
        """Return backend name."""
        return f"accelerator:{self.device.name}"

    def _kernel_args(self) -> dict[str, float]:
        potential = self._potential
        return {
            "box_size": self._box.length,
            "cutoff": potential.cutoff,
            "epsilon": potential.epsilon,
            "sigma": potential.sigma,
            "shift": potential.shift,
        }

    def _pack(self, positions: NDArray[np.floating]) -> NDArray[np.float32]:
        if self.wrap_inputs:
            positions = self._box.wrap_centered(positions)
        packed = np.zeros((len(positions), 4), dtype=np.float32)
        packed[:, :3] = positions
        return packed

    def _read_back(
        self,
        outputs: dict[str, NDArray[np.floating]],
        key: str,
        shape: tuple[int, ...],
    ) -> NDArray[np.floating]:
        try:
            buffer = np.asarray(outputs[key], dtype=np.float64)
        except KeyError:
            raise BackendError(f"device returned no '{key}' buffer") from None
        if buffer.size != int(np.prod(shape)):
            raise BackendError(
                f"device '{key}' buffer has {buffer.size} elements, "
                f"expected {int(np.prod(shape))}"
            )
        return buffer.reshape(shape)

    def evaluate(
        self, positions: ArrayLike, compute_forces: bool = False
    ) -> Evaluation:
        """Dispatch one kernel launch and wait for its results."""
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")
        n = len(positions)
        kernel = "lj_energy_force" if compute_forces else "lj_energy"

        try:
            future = self.device.submit(
                kernel,
                {"positions": self._pack(positions)},
                self._kernel_args(),
                global_size=(n, n),
            )
            outputs = future.result(timeout=self.timeout)
        except BackendError:
            raise
        except FutureTimeoutError as e:
            raise BackendError(
                f"{self.device.name} kernel '{kernel}' timed out after {self.timeout} s"
            ) from e
        except Exception as e:
            raise BackendError(
                f"{self.device.name} kernel '{kernel}' failed: {e}"
            ) from e

        energies = self._read_back(outputs, "energy", (n, n))
        forces = None
        if compute_forces:
            forces = self._read_back(outputs, "force", (n, n, 4))[..., :3].copy()

        return Evaluation(energy_matrix=energies, force_matrix=forces)

    def close(self) -> None:
        """Release the device."""
        self.device.close()

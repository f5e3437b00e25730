"""Accelerator device interface and an in-process host device."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor

import numpy as np
from numpy.typing import NDArray

from ..errors import DeviceError
from .kernels import KERNELS, Kernel


class KernelDevice(ABC):
    """
    Abstract base class for devices that run pairwise kernels.

    A device receives host buffers, runs one kernel invocation over a global
    work size, and hands the output buffers back through a future. Platform
    discovery, program compilation and device memory management belong to
    the concrete device.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return device name."""
        ...

    @abstractmethod
    def submit(
        self,
        kernel: str,
        buffers: Mapping[str, NDArray[np.floating]],
        args: Mapping[str, float],
        global_size: tuple[int, ...],
    ) -> Future[dict[str, NDArray[np.floating]]]:
        """
        Enqueue one kernel invocation.

        Args:
            kernel: Kernel name.
            buffers: Input buffers, copied before the call returns.
            args: Scalar kernel arguments.
            global_size: Global work size of the launch.

        Returns:
            Future resolving to the output buffers.

        Raises:
            DeviceError: If the kernel is unknown or the device is closed.
        """
        ...

    def close(self) -> None:
        """Release device resources."""
        pass


class HostKernelDevice(KernelDevice):
    """
    Device that executes kernels on a host thread.

    Launches are queued in order on a single worker thread, so submission
    returns immediately and results are only available after the caller
    waits on the future, as with a real command queue. Useful for testing
    the accelerator dispatch path without hardware.

    Attributes:
        kernel_time: Accumulated kernel execution time in seconds.
        launches: Number of completed kernel launches.
    """

    def __init__(self, kernels: Mapping[str, Kernel] | None = None) -> None:
        """
        Initialize host device.

        Args:
            kernels: Kernel table; defaults to the Lennard-Jones kernels.
        """
        self._kernels = dict(KERNELS if kernels is None else kernels)
        self._queue: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ljsim-device"
        )
        self.kernel_time = 0.0
        self.launches = 0

    @property
    def name(self) -> str:
        """Return device name."""
        return "host"

    def _launch(
        self,
        kernel: Kernel,
        buffers: dict[str, NDArray[np.floating]],
        args: dict[str, float],
        global_size: tuple[int, ...],
    ) -> dict[str, NDArray[np.floating]]:
        start = time.perf_counter()
        outputs = kernel(buffers, args)
        self.kernel_time += time.perf_counter() - start
        self.launches += 1
        return outputs

    def submit(
        self,
        kernel: str,
        buffers: Mapping[str, NDArray[np.floating]],
        args: Mapping[str, float],
        global_size: tuple[int, ...],
    ) -> Future[dict[str, NDArray[np.floating]]]:
        """Queue a kernel launch on the host worker thread."""
        if self._queue is None:
            raise DeviceError("device is closed")
        try:
            func = self._kernels[kernel]
        except KeyError:
            raise DeviceError(f"Unknown kernel: {kernel}") from None

        uploaded = {key: np.array(value, copy=True) for key, value in buffers.items()}
        return self._queue.submit(
            self._launch, func, uploaded, dict(args), tuple(global_size)
        )

    def close(self) -> None:
        """Drain the queue and stop the worker thread."""
        if self._queue is not None:
            self._queue.shutdown(wait=True)
            self._queue = None

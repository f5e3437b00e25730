"""Compute backends for pairwise energy and force evaluation."""

from .accelerator import AcceleratorBackend
from .base import ComputeBackend, Evaluation
from .cpu import CPUBackend
from .devices import HostKernelDevice, KernelDevice
from .dispatcher import create_backend, get_backend

__all__ = [
    "ComputeBackend",
    "Evaluation",
    "CPUBackend",
    "AcceleratorBackend",
    "KernelDevice",
    "HostKernelDevice",
    "create_backend",
    "get_backend",
]

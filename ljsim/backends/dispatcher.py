"""Backend dispatcher for selecting compute backends at configuration time."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from .base import ComputeBackend

if TYPE_CHECKING:
    from ..forcefields import PairPotential
    from ..system import Box

# Available backend types
BackendType = Literal["cpu", "accelerator"]


def get_backend(
    backend: BackendType | ComputeBackend,
    box: Box,
    potential: PairPotential,
    **kwargs,
) -> ComputeBackend:
    """
    Get a compute backend instance.

    Args:
        backend: Backend specification. Can be:
            - String: Create backend by name
            - ComputeBackend: Use provided instance directly
        box: Periodic simulation box.
        potential: Pair potential to evaluate.
        **kwargs: Additional arguments for backend initialization.

    Returns:
        ComputeBackend instance.

    Examples:
        >>> backend = get_backend("cpu", box, potential, n_workers=4)
        >>> backend = get_backend("accelerator", box, potential, device=HostKernelDevice())
    """
    if isinstance(backend, ComputeBackend):
        return backend
    return create_backend(backend, box, potential, **kwargs)


def create_backend(
    name: BackendType,
    box: Box,
    potential: PairPotential,
    **kwargs,
) -> ComputeBackend:
    """
    Create a compute backend by name.

    Args:
        name: Backend name.
        box: Periodic simulation box.
        potential: Pair potential to evaluate.
        **kwargs: Backend-specific arguments. The accelerator backend uses a
            HostKernelDevice when no ``device`` is given.

    Returns:
        ComputeBackend instance.

    Raises:
        ValueError: If backend name is unknown.
    """
    if name == "cpu":
        from .cpu import CPUBackend

        return CPUBackend(box, potential, **kwargs)

    elif name == "accelerator":
        from .accelerator import AcceleratorBackend
        from .devices import HostKernelDevice

        device = kwargs.pop("device", None)
        if device is not None:
            return AcceleratorBackend(box, potential, device, **kwargs)

        device = HostKernelDevice()
        try:
            return AcceleratorBackend(box, potential, device, **kwargs)
        except Exception:
            device.close()
            raise

    else:
        raise ValueError(f"Unknown backend: {name}. Available: cpu, accelerator")

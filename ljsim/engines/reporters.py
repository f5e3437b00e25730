"""Periodic energy output for Monte Carlo and MD runs."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TextIO

import numpy as np

if TYPE_CHECKING:
    from ..system import ParticleSystem


class Reporter(ABC):
    """
    Receives the run state every ``frequency`` steps.

    Engines call ``report`` with the MD step or Monte Carlo trial index,
    the current particle system and keyword data. Both engines pass
    ``energy`` (potential energy per particle); the Monte Carlo engine also
    passes ``accepted`` for the trial just made.
    """

    def __init__(self, frequency: int = 1) -> None:
        if frequency < 1:
            raise ValueError(f"frequency must be positive, got {frequency}")
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        """Steps between reports."""
        return self._frequency

    def should_report(self, step: int) -> bool:
        return step % self._frequency == 0

    @abstractmethod
    def report(self, step: int, system: ParticleSystem, **kwargs: Any) -> None:
        """Handle one report."""
        ...

    def initialize(self, system: ParticleSystem) -> None:
        """Called once before the first step."""

    def finalize(self, system: ParticleSystem) -> None:
        """Called once after the last step, even if the run failed."""


class ReporterGroup:
    """Fans reports out to the reporters due at each step."""

    def __init__(self, reporters: Iterable[Reporter] | None = None) -> None:
        self._members: list[Reporter] = list(reporters or ())

    def __len__(self) -> int:
        return len(self._members)

    def add(self, reporter: Reporter) -> None:
        self._members.append(reporter)

    def initialize(self, system: ParticleSystem) -> None:
        for member in self._members:
            member.initialize(system)

    def report(self, step: int, system: ParticleSystem, **kwargs: Any) -> None:
        for member in self._members:
            if member.should_report(step):
                member.report(step, system, **kwargs)

    def finalize(self, system: ParticleSystem) -> None:
        for member in self._members:
            member.finalize(system)


class EnergyReporter(Reporter):
    """
    Prints ``energy is <value>`` lines with the energy per particle.

    Args:
        frequency: Steps between lines.
        file: Stream to write to, stdout by default.
        show_step: Prefix each line with ``step <n>:``.
    """

    def __init__(
        self,
        frequency: int = 500,
        file: TextIO | None = None,
        show_step: bool = False,
    ) -> None:
        super().__init__(frequency)
        self._stream = file
        self._show_step = show_step

    def report(self, step: int, system: ParticleSystem, **kwargs: Any) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        prefix = f"step {step}: " if self._show_step else ""
        stream.write(f"{prefix}energy is {kwargs.get('energy', 0.0):f} \n")
        stream.flush()


class EnergyHistoryReporter(Reporter):
    """Keeps (step, energy per particle) samples in memory."""

    def __init__(self, frequency: int = 100) -> None:
        super().__init__(frequency)
        self._samples: list[tuple[int, float]] = []

    def report(self, step: int, system: ParticleSystem, **kwargs: Any) -> None:
        self._samples.append((step, float(kwargs.get("energy", 0.0))))

    @property
    def steps(self) -> np.ndarray:
        return np.array([s for s, _ in self._samples], dtype=np.int64)

    @property
    def energies(self) -> np.ndarray:
        return np.array([e for _, e in self._samples])

    def clear(self) -> None:
        self._samples.clear()


class CallbackReporter(Reporter):
    """
    Forwards each report to ``callback(step, system, data)``.

    ``data`` is the dict of keyword values passed by the engine.
    """

    def __init__(
        self,
        callback: Callable[[int, ParticleSystem, dict[str, Any]], None],
        frequency: int = 1,
    ) -> None:
        super().__init__(frequency)
        self._callback = callback

    def report(self, step: int, system: ParticleSystem, **kwargs: Any) -> None:
        self._callback(step, system, kwargs)

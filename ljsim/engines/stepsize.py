"""Adaptive control of the Monte Carlo trial amplitude."""

from __future__ import annotations


class AdaptiveStepController:
    """
    Tune the trial amplitude from the acceptance count of fixed windows.

    Trials are grouped into non-overlapping windows. At each window boundary
    the number of accepted trials in the window decides the new amplitude:

    - more than ``upper`` accepted: amplitude is halved
    - fewer than ``lower`` accepted: amplitude is doubled
    - otherwise: unchanged

    and the window counter restarts at zero. Note the direction: frequent
    acceptance shrinks the moves, which is the inverse of the usual
    heuristic. The thresholds are kept as they govern the reference runs.

    Attributes:
        amplitude: Current trial amplitude.
        window: Number of trials per window.
        upper: Accepted count above which the amplitude halves.
        lower: Accepted count below which the amplitude doubles.
        window_accepted: Accepted trials in the current window.
        adjustments: Number of window boundaries processed.
    """

    def __init__(
        self,
        amplitude: float = 0.005,
        window: int = 100,
        upper: int = 55,
        lower: int = 45,
    ) -> None:
        if amplitude <= 0:
            raise ValueError(f"amplitude must be positive, got {amplitude}")
        if window < 1:
            raise ValueError(f"window must be positive, got {window}")
        self.amplitude = amplitude
        self.window = window
        self.upper = upper
        self.lower = lower
        self.window_accepted = 0
        self.adjustments = 0

    def __repr__(self) -> str:
        return (
            f"AdaptiveStepController(amplitude={self.amplitude}, "
            f"window_accepted={self.window_accepted}/{self.window})"
        )

    def record(self, accepted: bool) -> None:
        """Count one trial outcome in the current window."""
        if accepted:
            self.window_accepted += 1

    def end_of_window(self) -> float:
        """
        Apply the adjustment rule and start a new window.

        Returns:
            The amplitude for the next window.
        """
        if self.window_accepted > self.upper:
            self.amplitude /= 2
        if self.window_accepted < self.lower:
            self.amplitude *= 2
        self.window_accepted = 0
        self.adjustments += 1
        return self.amplitude

    def maybe_adjust(self, trial_index: int) -> bool:
        """
        Close the window if ``trial_index`` falls on a window boundary.

        Args:
            trial_index: Number of trials completed so far.

        Returns:
            True if a window was closed.
        """
        if trial_index != 0 and trial_index % self.window == 0:
            self.end_of_window()
            return True
        return False


class FixedStepController(AdaptiveStepController):
    """Controller that counts acceptances but never changes the amplitude."""

    def end_of_window(self) -> float:
        self.window_accepted = 0
        self.adjustments += 1
        return self.amplitude

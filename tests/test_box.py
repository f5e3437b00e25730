"""Tests for Box class."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from ljsim.errors import ConfigurationError, SimulationError
from ljsim.system.box import Box


class TestBoxCreation:
    """Test box creation methods."""

    def test_cubic_box(self):
        """Test creating a cubic box."""
        box = Box.cubic(6.0)
        assert box.length == 6.0
        assert box.half_length == 3.0

    def test_length_converted_to_float(self):
        """Test integer lengths are stored as floats."""
        box = Box.cubic(6)
        assert isinstance(box.length, float)

    @pytest.mark.parametrize("length", [0.0, -1.0])
    def test_invalid_length(self, length):
        """Test that non-positive lengths raise errors."""
        with pytest.raises(ValueError):
            Box.cubic(length)

    def test_box_is_frozen(self):
        """Test that the box cannot be modified."""
        box = Box.cubic(6.0)
        with pytest.raises(FrozenInstanceError):
            box.length = 7.0


class TestImageShifts:
    """Test the 27 periodic replica offsets."""

    def test_shape_and_values(self):
        """Test every shift component is one of -L, 0, L."""
        shifts = Box.cubic(6.0).image_shifts
        assert shifts.shape == (27, 3)
        assert set(np.unique(shifts)) == {-6.0, 0.0, 6.0}
        assert len(np.unique(shifts, axis=0)) == 27

    def test_ordering(self):
        """Test x varies fastest and z slowest."""
        shifts = Box.cubic(6.0).image_shifts
        assert np.array_equal(shifts[0], [-6.0, -6.0, -6.0])
        assert np.array_equal(shifts[1], [0.0, -6.0, -6.0])
        assert np.array_equal(shifts[3], [-6.0, 0.0, -6.0])
        assert np.array_equal(shifts[9], [-6.0, -6.0, 0.0])
        assert np.array_equal(shifts[13], [0.0, 0.0, 0.0])


class TestWrapping:
    """Test coordinate wrapping."""

    def test_wrap_positions(self):
        """Test wrapping into [0, L)."""
        box = Box.cubic(6.0)
        wrapped = box.wrap_positions(np.array([[-0.5, 6.5, 12.0]]))
        assert np.allclose(wrapped, [[5.5, 0.5, 0.0]])

    def test_wrap_centered_half_open(self):
        """Test that +L/2 is kept and -L/2 maps to +L/2."""
        box = Box.cubic(6.0)
        assert box.wrap_centered(3.0) == 3.0
        assert box.wrap_centered(-3.0) == 3.0
        assert box.wrap_centered(4.0) == pytest.approx(-2.0)
        assert box.wrap_centered(-4.0) == pytest.approx(2.0)

    def test_wrap_centered_range(self):
        """Test wrapped values always fall in (-L/2, L/2]."""
        box = Box.cubic(6.0)
        rng = np.random.default_rng(0)
        values = rng.uniform(-30.0, 30.0, size=(200, 3))
        wrapped = box.wrap_centered(values)
        assert np.all(wrapped > -3.0)
        assert np.all(wrapped <= 3.0)
        # Only whole box lengths are removed
        periods = (values - wrapped) / 6.0
        assert np.allclose(periods, np.round(periods))


class TestMinimumImage:
    """Test minimum image convention."""

    def test_minimum_image_across_boundary(self):
        """Test displacement across the periodic boundary."""
        box = Box.cubic(6.0)
        dr = box.minimum_image(np.array([0.5, 0.0, 0.0]), np.array([5.5, 0.0, 0.0]))
        assert np.allclose(dr, [-1.0, 0.0, 0.0])

    def test_minimum_image_distance(self):
        """Test distances under the minimum image convention."""
        box = Box.cubic(6.0)
        d = box.minimum_image_distance(
            np.array([0.5, 0.5, 0.5]), np.array([5.5, 5.5, 5.5])
        )
        assert np.isclose(d, np.sqrt(3.0))

    def test_nearest_image(self):
        """Test explicit replica enumeration with a cutoff."""
        box = Box.cubic(6.0)
        disp, within = box.nearest_image(
            np.array([0.0, 0.0, 0.0]), np.array([5.0, 0.0, 0.0]), cutoff=3.0
        )
        assert np.allclose(disp, [-1.0, 0.0, 0.0])
        assert within

    def test_nearest_image_strict_cutoff(self):
        """Test that a pair exactly at the cutoff is outside."""
        box = Box.cubic(6.0)
        disp, within = box.nearest_image(
            np.array([0.0, 0.0, 0.0]), np.array([3.0, 0.0, 0.0]), cutoff=3.0
        )
        assert np.isclose(np.linalg.norm(disp), 3.0)
        assert not within

    def test_enumeration_agrees_with_wrapping(self):
        """Test both minimum image strategies give the same displacement."""
        box = Box.cubic(6.0)
        rng = np.random.default_rng(42)
        positions = rng.uniform(0.0, 6.0, size=(40, 3))

        for r1, r2 in zip(positions[:20], positions[20:]):
            wrapped = box.minimum_image(r1, r2)
            enumerated, _ = box.nearest_image(r1, r2)
            assert np.allclose(wrapped, enumerated)


class TestCutoffCheck:
    """Test the minimum image precondition."""

    def test_half_box_allowed(self):
        """Test rc = L/2 is accepted."""
        Box.cubic(6.0).check_cutoff(3.0)

    def test_cutoff_too_large(self):
        """Test rc > L/2 is rejected."""
        with pytest.raises(ConfigurationError):
            Box.cubic(6.0).check_cutoff(3.01)

    def test_error_hierarchy(self):
        """Test the error is both a SimulationError and a ValueError."""
        with pytest.raises(SimulationError):
            Box.cubic(4.0).check_cutoff(3.0)
        with pytest.raises(ValueError):
            Box.cubic(4.0).check_cutoff(3.0)

"""Tests for the shifted Lennard-Jones pair potential."""

import numpy as np
import pytest

from ljsim.forcefields import PairPotential, ShiftedLennardJones


@pytest.fixture
def lj():
    """Reference potential with rc = 3."""
    return ShiftedLennardJones(cutoff=3.0)


class TestShiftedLennardJonesEnergy:
    """Test pair energies."""

    def test_shift_value(self, lj):
        """Test Urc = 4 * (rc^-12 - rc^-6)."""
        expected = 4.0 * (3.0**-12 - 3.0**-6)
        assert np.isclose(lj.shift, expected)

    def test_zero_at_cutoff(self, lj):
        """Test the shifted energy vanishes at rc."""
        assert lj.energy(9.0) == pytest.approx(0.0, abs=1e-14)

    def test_zero_beyond_cutoff(self, lj):
        """Test pairs beyond rc do not interact."""
        energies = lj.energy(np.array([9.0001, 16.0, 100.0]))
        assert np.all(energies == 0.0)

    def test_well_depth(self, lj):
        """Test the minimum lies at 2^(1/6) with depth -epsilon - Urc."""
        r_min2 = 2.0 ** (1.0 / 3.0)
        assert lj.energy(r_min2) == pytest.approx(-1.0 - lj.shift)

    def test_well_shape(self, lj):
        """Test energy is repulsive at short range and attractive further out."""
        d = np.array([0.9, 1.0, 2.0 ** (1.0 / 6.0), 1.5, 2.5])
        energies = lj.energy(d**2)
        assert energies[0] > 0
        assert energies[2] == energies.min()
        assert np.all(np.diff(energies[2:]) > 0)

    def test_overlap_not_finite(self, lj):
        """Test coincident particles give a non-finite energy."""
        assert not np.isfinite(lj.energy(0.0))

    def test_epsilon_scaling(self):
        """Test energies scale linearly with epsilon."""
        lj1 = ShiftedLennardJones(3.0, epsilon=1.0)
        lj2 = ShiftedLennardJones(3.0, epsilon=2.5)
        d2 = np.array([1.1, 1.7, 4.0])
        assert np.allclose(lj2.energy(d2), 2.5 * lj1.energy(d2))

    def test_invalid_cutoff(self):
        """Test that a non-positive cutoff raises errors."""
        with pytest.raises(ValueError):
            ShiftedLennardJones(cutoff=0.0)


class TestShiftedLennardJonesForce:
    """Test force multipliers."""

    def test_zero_at_sigma(self, lj):
        """Test the force vanishes at d = sigma."""
        assert lj.force_multiplier(1.0) == pytest.approx(0.0, abs=1e-14)

    def test_sign(self, lj):
        """Test the multiplier is positive inside sigma and negative outside.

        With forces along r_j - r_i this pulls close pairs together.
        """
        assert lj.force_multiplier(0.81) > 0
        assert lj.force_multiplier(2.25) < 0

    def test_zero_beyond_cutoff(self, lj):
        """Test no force beyond rc."""
        assert lj.force_multiplier(9.5) == 0.0

    def test_closed_form(self, lj):
        """Test the multiplier against 12 * (d^-14 - d^-8)."""
        d = np.array([0.95, 1.3, 2.0, 2.9])
        expected = 12.0 * (d**-14 - d**-8)
        assert np.allclose(lj.force_multiplier(d**2), expected)

    def test_force_at_energy_minimum_is_nonzero(self, lj):
        """Test the force model does not vanish at the energy minimum."""
        assert lj.force_multiplier(2.0 ** (1.0 / 3.0)) < 0

    def test_pair_terms(self, lj):
        """Test batched energies and force vectors."""
        displacements = np.array([[1.2, 0.0, 0.0], [0.0, -1.5, 0.0]])
        d2 = np.einsum("ij,ij->i", displacements, displacements)
        energies, forces = lj.pair_terms(displacements, d2)

        assert energies.shape == (2,)
        assert forces.shape == (2, 3)
        assert np.allclose(energies, lj.energy(d2))
        assert np.allclose(forces, displacements * lj.force_multiplier(d2)[:, None])


class TestPairPotentialInterface:
    """Test the abstract pair potential."""

    def test_is_pair_potential(self, lj):
        assert isinstance(lj, PairPotential)
        assert lj.cutoff == 3.0

    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            PairPotential()

    def test_repr(self, lj):
        assert "cutoff=3.0" in repr(lj)

"""Neighbor enumeration under periodic boundary conditions."""

from .images import ImageNeighborList, NeighborImages

__all__ = ["ImageNeighborList", "NeighborImages"]

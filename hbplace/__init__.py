"""Symmetry-aware block placement with HB*-trees and simulated annealing."""

__version__ = "0.1.0"
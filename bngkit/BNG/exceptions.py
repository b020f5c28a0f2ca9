from __future__ import annotations


class BNGError(RuntimeError):
    """Base class for all BNG-specific errors."""


class BNGInvariantError(BNGError):
    """Raised when an internal or upstream invariant is violated (not recoverable)."""


class CompartmentHierarchyError(BNGInvariantError):
    """Raised when compartments do not form an acyclic, consistent forest."""


class UnknownSpeciesError(BNGInvariantError, KeyError):
    """Raised when a species id is not present in the species registry."""


class UnknownCompartmentError(BNGInvariantError, KeyError):
    """Raised when a compartment id is not present in the model."""


class ExportOptionsError(BNGError, ValueError):
    """Raised for invalid export options (non-finite or non-positive size hints)."""

"""
Public API for :mod:`bngkit.BNG`.

Re-exported classes
-------------------
- :class:`~bngkit.BNG.engine.BNGEngine`
- :class:`~bngkit.BNG.model.BNGData`
- :class:`~bngkit.BNG.config.ExportOptions`
- :class:`~bngkit.BNG.exporter.BNGLExporter`
"""

from __future__ import annotations
from typing import List

from .config import ExportOptions
from .engine import BNGEngine, BNGStats
from .exporter import BNGLExporter
from .hierarchy import compartment_graph, order_compartments
from .io import assemble_bngl, export_bngl_text, write_bngl
from .model import BNGData, Compartment, ComponentType, MoleculeType, ReactionRule
from .rxn_container import RxnClass, RxnContainer
from .species import Cplx, Orientation, Species, SpeciesContainer

__all__: List[str] = [
    "BNGEngine",
    "BNGStats",
    "BNGData",
    "BNGLExporter",
    "ExportOptions",
    "Compartment",
    "ComponentType",
    "MoleculeType",
    "ReactionRule",
    "RxnClass",
    "RxnContainer",
    "Cplx",
    "Orientation",
    "Species",
    "SpeciesContainer",
    "order_compartments",
    "compartment_graph",
    "assemble_bngl",
    "export_bngl_text",
    "write_bngl",
]

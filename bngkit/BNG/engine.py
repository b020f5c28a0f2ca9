from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Set, TextIO

import pandas as pd

from .config import ExportOptions
from .exceptions import BNGInvariantError
from .exporter import BNGLExporter
from .model import BNGData
from .rxn_container import RxnContainer
from .species import Cplx, Orientation, SpeciesContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BNGStats:
    """
    Usage statistics of species and reactant classes.

    :param num_active_species: Species instantiated at least once.
    :param num_species: All species in the registry.
    :param num_rxn_classes: Reaction classes derived by the rule registry.
    :param num_active_reactant_classes: Reactant classes of active species.
    :param num_reactant_classes: Reactant classes derived by the rule registry.
    """

    num_active_species: int
    num_species: int
    num_rxn_classes: int
    num_active_reactant_classes: int
    num_reactant_classes: int

    def format(self) -> str:
        return (
            f"[active/total species {self.num_active_species}/{self.num_species}"
            f", rxn classes {self.num_rxn_classes}"
            f", active/total reactant classes "
            f"{self.num_active_reactant_classes}/{self.num_reactant_classes}]"
        )

    def to_frame(self) -> pd.DataFrame:
        """Return the statistics as a one-row :class:`pandas.DataFrame`."""
        return pd.DataFrame([asdict(self)])


class BNGEngine:
    """
    Facade over the model store, rule registry and species registry.

    :meth:`initialize` has to be called exactly once, after the model is
    built and before any statistics or export call.

    Typical usage::

        engine = BNGEngine(data)
        engine.initialize()
        params, mts, comps, rules = (io.StringIO() for _ in range(4))
        err = engine.export_to_bngl(params, mts, comps, rules)

    :param data: Model store.
    :type data: BNGData
    """

    def __init__(self, data: BNGData) -> None:
        self.data = data
        self.all_rxns = RxnContainer(data)
        self.all_species = SpeciesContainer()
        self._initialized = False

    # -------------------------
    # Registration
    # -------------------------
    def initialize(self) -> None:
        """
        Register every reaction rule of the model in the rule registry.

        :raises BNGInvariantError: If called more than once.
        """
        if self._initialized:
            raise BNGInvariantError("BNGEngine.initialize() was already called.")

        for rule in self.data.get_rxn_rules():
            self.all_rxns.add_and_finalize(rule)
        self._initialized = True
        logger.debug("Initialized with %d reaction rules", len(self.all_rxns))

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _require_initialized(self, what: str) -> None:
        if not self._initialized:
            raise BNGInvariantError(f"BNGEngine.initialize() must be called before {what}.")

    def get_all_rxns(self) -> RxnContainer:
        return self.all_rxns

    def get_all_species(self) -> SpeciesContainer:
        return self.all_species

    # -------------------------
    # Species
    # -------------------------
    def add_species(self, cplx: Cplx, instantiated: bool = False) -> int:
        """
        Register a species for ``cplx`` and return its id.

        :param cplx: Structure of the species.
        :param instantiated: Mark the species as produced during the run.
        :raises BNGInvariantError: If ``instantiated`` is set before
            :meth:`initialize`; the registry is left unchanged.
        """
        if instantiated:
            self._require_initialized("instantiating species")
        species_id = self.all_species.find_or_add(cplx)
        if instantiated:
            self.mark_instantiated(species_id)
        return species_id

    def mark_instantiated(self, species_id: int) -> None:
        """Flag a species as produced and assign its reactant class."""
        self._require_initialized("instantiating species")
        species = self.all_species.get(species_id)
        species.set_was_instantiated(True)
        if not species.has_valid_reactant_class_id():
            self.all_rxns.get_or_assign_reactant_class(species)

    def create_cplx_from_species(
        self,
        species_id: int,
        orientation: Orientation,
        compartment_id: Optional[int],
    ) -> Cplx:
        """
        Create a complex instance from a species template.

        The species in the registry is left untouched; the returned complex
        is an independent copy.

        :param species_id: Id of the template species.
        :param orientation: Orientation of the new instance.
        :param compartment_id: Compartment of the new instance.
        :raises UnknownSpeciesError: If ``species_id`` is not registered.
        :returns: New complex.
        :rtype: Cplx
        """
        ref = self.all_species.get(species_id).cplx
        copy = ref.copy()
        copy.set_orientation(orientation)
        copy.set_compartment_id(compartment_id)
        return copy

    # -------------------------
    # Statistics
    # -------------------------
    def get_stats(self) -> BNGStats:
        """
        Count active species and the reactant classes they use.

        :raises BNGInvariantError: If the species registry holds a ``None``
            entry or the engine was not initialized.
        """
        self._require_initialized("collecting statistics")

        species_vector = self.all_species.get_species_vector()
        active_reactant_classes: Set[int] = set()
        num_active_species = 0
        for s in species_vector:
            if s is None:
                raise BNGInvariantError("Species registry contains an empty entry.")
            if s.was_instantiated():
                num_active_species += 1
                if s.has_valid_reactant_class_id():
                    active_reactant_classes.add(s.get_reactant_class_id())

        return BNGStats(
            num_active_species=num_active_species,
            num_species=len(species_vector),
            num_rxn_classes=self.all_rxns.get_num_rxn_classes(),
            num_active_reactant_classes=len(active_reactant_classes),
            num_reactant_classes=self.all_rxns.get_num_existing_reactant_classes(),
        )

    def get_stats_report(self) -> str:
        return self.get_stats().format()

    # -------------------------
    # Export
    # -------------------------
    def export_to_bngl(
        self,
        out_parameters: TextIO,
        out_molecule_types: TextIO,
        out_compartments: TextIO,
        out_reaction_rules: TextIO,
        rates_for_nfsim: bool = False,
        volume_um3_for_nfsim: float = 1.0,
        area_um2_for_nfsim: float = 1.0,
    ) -> str:
        """
        Write the model as BNGL sections into the four sinks.

        :param rates_for_nfsim: Convert rates for NFSim using the given
            reference compartment sizes.
        :param volume_um3_for_nfsim: Reference volume in um^3 (NFSim only).
        :param area_um2_for_nfsim: Reference area in um^2 (NFSim only).
        :raises BNGInvariantError: If the engine was not initialized.
        :raises ExportOptionsError: If NFSim size hints are invalid.
        :returns: Diagnostics; non-empty when some rules need manual review.
        :rtype: str
        """
        options = ExportOptions(
            rates_for_nfsim=rates_for_nfsim,
            volume_um3_for_nfsim=volume_um3_for_nfsim,
            area_um2_for_nfsim=area_um2_for_nfsim,
        )
        return self.export_with_options(
            out_parameters, out_molecule_types, out_compartments, out_reaction_rules,
            options,
        )

    def export_with_options(
        self,
        out_parameters: TextIO,
        out_molecule_types: TextIO,
        out_compartments: TextIO,
        out_reaction_rules: TextIO,
        options: ExportOptions,
    ) -> str:
        self._require_initialized("export")
        exporter = BNGLExporter(self.data, self.all_rxns)
        err_msg = exporter.export_to_bngl(
            out_parameters, out_molecule_types, out_compartments, out_reaction_rules,
            options,
        )
        if err_msg:
            logger.warning("BNGL export finished with errors, manual review needed")
        return err_msg

    def __repr__(self) -> str:
        return (
            f"BNGEngine(initialized={self._initialized}, "
            f"n_rules={len(self.all_rxns)}, n_species={len(self.all_species)})"
        )

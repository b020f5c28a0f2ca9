from __future__ import annotations

import logging
from typing import Optional, TextIO

from .config import ExportOptions
from .hierarchy import order_compartments
from .model import BNGData
from .names import (
    BEGIN_COMPARTMENTS,
    BEGIN_MOLECULE_TYPES,
    BEGIN_REACTION_RULES,
    END_COMPARTMENTS,
    END_MOLECULE_TYPES,
    END_REACTION_RULES,
    IND,
    MCELL_DIFFUSION_CONSTANT_2D_PREFIX,
    MCELL_DIFFUSION_CONSTANT_3D_PREFIX,
    PARAM_THICKNESS,
    PREFIX_AREA,
    PREFIX_VOLUME,
)
from .rates import export_conversion_parameters, export_rate_parameters
from .rxn_container import RxnContainer
from .utils import f_to_str, is_species_superclass

logger = logging.getLogger(__name__)


class BNGLExporter:
    """
    Writes a finalized model as BNGL sections.

    Every section goes to its own sink; the parameters sink is shared and
    written by all three section emitters, so they must run in the order
    molecule types, reaction rules, compartments (see :meth:`export_to_bngl`).
    The model is never modified.

    :param data: Model store.
    :type data: BNGData
    :param all_rxns: Rule registry filled from ``data``.
    :type all_rxns: RxnContainer
    """

    def __init__(self, data: BNGData, all_rxns: RxnContainer) -> None:
        self.data = data
        self.all_rxns = all_rxns

    def export_to_bngl(
        self,
        out_parameters: TextIO,
        out_molecule_types: TextIO,
        out_compartments: TextIO,
        out_reaction_rules: TextIO,
        options: Optional[ExportOptions] = None,
    ) -> str:
        """
        Write all sections.

        :param out_parameters: Sink for parameter lines (no BEGIN/END).
        :param out_molecule_types: Sink for the molecule types block.
        :param out_compartments: Sink for the compartments block.
        :param out_reaction_rules: Sink for the reaction rules block.
        :param options: Rate conversion mode; plain mode when omitted.
        :returns: Diagnostics of all emitters, empty when nothing failed.
        :rtype: str
        """
        options = options or ExportOptions()

        self.export_molecule_types(out_parameters, out_molecule_types)
        err_msg = self.export_reaction_rules(
            out_parameters, out_reaction_rules, options
        )
        err_msg += self.export_compartments(out_parameters, out_compartments)
        return err_msg

    def export_molecule_types(
        self, out_parameters: TextIO, out_molecule_types: TextIO
    ) -> None:
        out_molecule_types.write(BEGIN_MOLECULE_TYPES + "\n")
        out_parameters.write(f"\n{IND}# diffusion constants\n")

        for mt in self.data.get_elem_mol_types():
            if mt.is_reactive_surface or is_species_superclass(mt.name):
                continue

            out_molecule_types.write(f"{IND}{mt.to_str()}\n")

            prefix = (
                MCELL_DIFFUSION_CONSTANT_2D_PREFIX
                if mt.is_surf
                else MCELL_DIFFUSION_CONSTANT_3D_PREFIX
            )
            out_parameters.write(
                f"{IND}{prefix}{mt.name} {f_to_str(mt.diffusion_constant)}\n"
            )

        out_molecule_types.write(END_MOLECULE_TYPES + "\n")

    def export_reaction_rules(
        self,
        out_parameters: TextIO,
        out_reaction_rules: TextIO,
        options: Optional[ExportOptions] = None,
    ) -> str:
        """
        Write the conversion parameters, rate parameters and rule lines.

        :returns: Diagnostics for rules that could not be converted.
        """
        options = options or ExportOptions()

        out_reaction_rules.write(BEGIN_REACTION_RULES + "\n")
        export_conversion_parameters(out_parameters, options)
        err_msg = export_rate_parameters(
            out_parameters, out_reaction_rules, self.all_rxns
        )
        out_reaction_rules.write(END_REACTION_RULES + "\n")

        logger.debug(
            "Exported %d reaction rules", len(self.all_rxns.get_rxn_rules_vector())
        )
        return err_msg

    def export_compartments(
        self, out_parameters: TextIO, out_compartments: TextIO
    ) -> str:
        """
        Write compartment sizes and the compartments block, parents first.

        :raises CompartmentHierarchyError: If compartments are not a forest.
        :returns: Always an empty string for a valid hierarchy.
        """
        ordered = order_compartments(self.data.get_compartments())
        index = self.data.compartment_index()

        out_compartments.write(BEGIN_COMPARTMENTS + "\n")
        out_parameters.write(f"\n{IND}# compartment sizes\n")

        for comp in ordered:
            if comp.is_default:
                continue

            vol_name = PREFIX_VOLUME + comp.name
            if comp.is_3d:
                out_parameters.write(
                    f"{IND}{vol_name} {f_to_str(comp.volume_or_area)} # um^3\n"
                )
                line = f"{IND}{comp.name} 3 {vol_name}"
            else:
                area_name = PREFIX_AREA + comp.name
                out_parameters.write(
                    f"{IND}{area_name} {f_to_str(comp.volume_or_area)} # um^2\n"
                )
                out_parameters.write(
                    f"{IND}{vol_name} {area_name} * {PARAM_THICKNESS} # um^3\n"
                )
                line = f"{IND}{comp.name} 2 {area_name} * {PARAM_THICKNESS}"

            if comp.has_parent and not index[comp.parent_id].is_default:
                line += " " + index[comp.parent_id].name
            out_compartments.write(line + "\n")

        out_compartments.write(END_COMPARTMENTS + "\n")
        return ""

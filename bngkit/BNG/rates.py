"""
Conversion of reaction rates from the spatial simulator to BNGL.

Rate constants of the spatial model are stored per molecule (volume
bimolecular rates in M^-1 s^-1, surface bimolecular rates in
um^2 N^-1 s^-1) while BioNetGen and NFSim expect rates per number of
molecules in the compartment. The conversion is not hard-coded as a number
in the output: it is written as a small set of named BNGL parameters so that
downstream tooling can redefine the ``VOL_RXN``/``SURF_RXN`` knobs.

Unimolecular rates are exported verbatim, both conventions use 1/s.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, TextIO

from .config import ExportOptions
from .names import (
    IND,
    MCELL_REDEFINE_PREFIX,
    NA_VALUE,
    NA_VALUE_STR,
    PARAM_MCELL2BNG_SURF_CONV,
    PARAM_MCELL2BNG_VOL_CONV,
    PARAM_RATE_CONV_AREA,
    PARAM_RATE_CONV_VOLUME,
    PARAM_SURF_RXN,
    PARAM_THICKNESS,
    PARAM_VOL_RXN,
    SURFACE_COMPARTMENT_THICKNESS,
    UM3_TO_LITRES,
    UM3_TO_LITRES_STR,
)
from .rxn_container import RxnClass, RxnContainer
from .utils import f_to_str, rate_param_name

logger = logging.getLogger(__name__)

__all__ = [
    "export_conversion_parameters",
    "rate_expression",
    "export_rate_parameters",
    "unsupported_rule_message",
    "conversion_factors",
    "effective_rate",
]

_UNSUPPORTED_WHAT = {
    RxnClass.REACTIVE_SURFACE: "reactions with reactive surfaces",
    RxnClass.OTHER: "reactions with this combination of reactants",
}


def export_conversion_parameters(out_parameters: TextIO, options: ExportOptions) -> None:
    """
    Write the global rate conversion parameters.

    :param out_parameters: Parameters sink.
    :type out_parameters: TextIO
    :param options: Export mode and NFSim size hints.
    :type options: ExportOptions
    """
    out_parameters.write(f"\n{IND}# parameters to control rates in MCell and BioNetGen\n")
    out_parameters.write(
        f"{IND}{PARAM_THICKNESS} {f_to_str(SURFACE_COMPARTMENT_THICKNESS)}"
        " # um, assumed thickness of 2D compartments\n"
    )

    if options.rates_for_nfsim:
        out_parameters.write(
            f"{IND}{PARAM_RATE_CONV_VOLUME} {f_to_str(options.volume_um3_for_nfsim)}"
            f" * {UM3_TO_LITRES_STR} # compartment volume in litres\n"
        )
        out_parameters.write(
            f"{IND}{PARAM_RATE_CONV_AREA} {f_to_str(options.area_um2_for_nfsim)}"
            f" * {PARAM_THICKNESS} * {UM3_TO_LITRES_STR}"
            " # surface compartment volume in litres\n"
        )
    else:
        out_parameters.write(
            f"{IND}{PARAM_RATE_CONV_VOLUME} {UM3_TO_LITRES_STR} # um^3 to litres\n"
        )
        out_parameters.write(
            f"{IND}{PARAM_RATE_CONV_AREA} {PARAM_THICKNESS} # um^2 to um^3\n"
        )

    out_parameters.write(
        f"{IND}{PARAM_MCELL2BNG_VOL_CONV} {NA_VALUE_STR} * {PARAM_RATE_CONV_VOLUME}"
        " # volume rate conversion\n"
    )
    out_parameters.write(
        f"{IND}{PARAM_MCELL2BNG_SURF_CONV} {NA_VALUE_STR} * {PARAM_RATE_CONV_AREA}"
        " # surface rate conversion\n"
    )
    out_parameters.write(f"{IND}{PARAM_VOL_RXN} 1 # volume rate scaling\n")
    out_parameters.write(f"{IND}{PARAM_SURF_RXN} 1 # surface rate scaling\n")
    out_parameters.write(
        f"{IND}{MCELL_REDEFINE_PREFIX}{PARAM_VOL_RXN} {PARAM_MCELL2BNG_VOL_CONV}"
        " # used by MCell instead of VOL_RXN\n"
    )
    out_parameters.write(
        f"{IND}{MCELL_REDEFINE_PREFIX}{PARAM_SURF_RXN} {PARAM_MCELL2BNG_SURF_CONV}"
        " # used by MCell instead of SURF_RXN\n"
    )


def rate_expression(rxn_class: RxnClass, base_rate_constant: float) -> Optional[str]:
    """
    BNGL expression for a rule's rate parameter.

    :param rxn_class: Cached classification of the rule.
    :type rxn_class: RxnClass
    :param base_rate_constant: Rate constant in the spatial model's units.
    :type base_rate_constant: float
    :returns: The expression, or ``None`` if the class cannot be expressed
        in BNGL.
    :rtype: Optional[str]
    """
    rate = f_to_str(base_rate_constant)
    if rxn_class is RxnClass.UNIMOL:
        return rate
    if rxn_class is RxnClass.BIMOL_VOL:
        return f"{rate} / {PARAM_MCELL2BNG_VOL_CONV} * {PARAM_VOL_RXN}"
    if rxn_class is RxnClass.BIMOL_SURF:
        return f"{rate} / {PARAM_MCELL2BNG_SURF_CONV} * {PARAM_SURF_RXN}"
    return None


def unsupported_rule_message(rxn_class: RxnClass, rxn_as_bngl: str) -> str:
    what = _UNSUPPORTED_WHAT.get(rxn_class, _UNSUPPORTED_WHAT[RxnClass.OTHER])
    return f"Export of {what} to BNGL is not supported, error for {rxn_as_bngl}.\n"


def export_rate_parameters(
    out_parameters: TextIO,
    out_reaction_rules: TextIO,
    all_rxns: RxnContainer,
) -> str:
    """
    Write one rate parameter and one reaction rule line per registered rule.

    Both lines of a rule use the same index-based parameter name. A rule
    whose class has no BNGL equivalent keeps its rate verbatim, gets a
    diagnostic and does not stop the export.

    :param out_parameters: Parameters sink.
    :param out_reaction_rules: Reaction rules sink (block body only).
    :param all_rxns: Finalized rule registry.
    :returns: Diagnostics, empty if every rule was converted.
    :rtype: str
    """
    err_msg = ""
    out_parameters.write(f"\n{IND}# reaction rates\n")

    for i, rr in enumerate(all_rxns.get_rxn_rules_vector()):
        rxn_as_bngl = rr.to_str()
        rxn_class = all_rxns.get_rxn_class(i)
        rate_param = rate_param_name(i)

        if rxn_class.is_exportable:
            expr = rate_expression(rxn_class, rr.base_rate_constant)
        else:
            msg = unsupported_rule_message(rxn_class, rxn_as_bngl)
            logger.warning("%s", msg.rstrip())
            err_msg += msg
            expr = f_to_str(rr.base_rate_constant)

        out_parameters.write(f"{IND}{rate_param} {expr}\n")
        out_reaction_rules.write(f"{IND}{rxn_as_bngl} {rate_param}\n")

    return err_msg


# ---------------------------------------------------------------------------
# Numeric evaluation of the emitted expressions
# ---------------------------------------------------------------------------


def conversion_factors(options: ExportOptions) -> Dict[str, float]:
    """
    Evaluate the global conversion parameters numerically.

    :param options: Export mode and NFSim size hints.
    :returns: Mapping parameter name -> value, with the same names as the
        emitted parameters.
    :rtype: Dict[str, float]
    """
    thickness = SURFACE_COMPARTMENT_THICKNESS
    if options.rates_for_nfsim:
        conv_volume = float(options.volume_um3_for_nfsim) * UM3_TO_LITRES
        conv_area = float(options.area_um2_for_nfsim) * thickness * UM3_TO_LITRES
    else:
        conv_volume = UM3_TO_LITRES
        conv_area = thickness

    return {
        PARAM_THICKNESS: thickness,
        PARAM_RATE_CONV_VOLUME: conv_volume,
        PARAM_RATE_CONV_AREA: conv_area,
        PARAM_MCELL2BNG_VOL_CONV: NA_VALUE * conv_volume,
        PARAM_MCELL2BNG_SURF_CONV: NA_VALUE * conv_area,
        PARAM_VOL_RXN: 1.0,
        PARAM_SURF_RXN: 1.0,
    }


def effective_rate(
    rxn_class: RxnClass, base_rate_constant: float, options: ExportOptions
) -> float:
    """
    Value the BNGL rate parameter evaluates to with the default knobs.

    Rules that cannot be expressed in BNGL evaluate to their verbatim rate,
    matching what :func:`export_rate_parameters` writes for them.
    """
    factors = conversion_factors(options)
    rate = float(base_rate_constant)
    if rxn_class is RxnClass.BIMOL_VOL:
        return rate / factors[PARAM_MCELL2BNG_VOL_CONV] * factors[PARAM_VOL_RXN]
    if rxn_class is RxnClass.BIMOL_SURF:
        return rate / factors[PARAM_MCELL2BNG_SURF_CONV] * factors[PARAM_SURF_RXN]
    return rate

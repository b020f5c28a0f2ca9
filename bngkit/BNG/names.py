"""
Keywords and reserved identifiers of the generated BNGL text.

All parameter names written by :mod:`bngkit.BNG.rates` and
:mod:`bngkit.BNG.exporter` are defined here so that the definition line and
every reference to it use the same symbol.
"""

from __future__ import annotations

from typing import FrozenSet

# indentation of lines inside a BEGIN/END block
IND = "  "

BEGIN_MODEL = "BEGIN MODEL"
END_MODEL = "END MODEL"
BEGIN_PARAMETERS = "BEGIN PARAMETERS"
END_PARAMETERS = "END PARAMETERS"
BEGIN_MOLECULE_TYPES = "BEGIN MOLECULE_TYPES"
END_MOLECULE_TYPES = "END MOLECULE_TYPES"
BEGIN_REACTION_RULES = "BEGIN REACTION_RULES"
END_REACTION_RULES = "END REACTION_RULES"
BEGIN_COMPARTMENTS = "BEGIN COMPARTMENTS"
END_COMPARTMENTS = "END COMPARTMENTS"

# ---------------------------------------------------------------------------
# Rate conversion parameters
# ---------------------------------------------------------------------------

PARAM_THICKNESS = "THICKNESS"
PARAM_RATE_CONV_VOLUME = "RATE_CONV_VOLUME"
PARAM_RATE_CONV_AREA = "RATE_CONV_AREA"
PARAM_MCELL2BNG_VOL_CONV = "MCELL2BNG_VOL_CONV"
PARAM_MCELL2BNG_SURF_CONV = "MCELL2BNG_SURF_CONV"
PARAM_VOL_RXN = "VOL_RXN"
PARAM_SURF_RXN = "SURF_RXN"
MCELL_REDEFINE_PREFIX = "MCELL_REDEFINE_"
RATE_PARAM_PREFIX = "k"

# Avogadro constant, exact since the 2019 SI redefinition
NA_VALUE = 6.02214076e23
NA_VALUE_STR = "6.02214076e23"

UM3_TO_LITRES = 1e-15
UM3_TO_LITRES_STR = "1e-15"

# um, assumed thickness of 2D compartments
SURFACE_COMPARTMENT_THICKNESS = 0.01

# ---------------------------------------------------------------------------
# Molecule types and compartments
# ---------------------------------------------------------------------------

MCELL_DIFFUSION_CONSTANT_3D_PREFIX = "MCELL_DIFFUSION_CONSTANT_3D_"
MCELL_DIFFUSION_CONSTANT_2D_PREFIX = "MCELL_DIFFUSION_CONSTANT_2D_"

PREFIX_VOLUME = "vol_"
PREFIX_AREA = "area_"

DEFAULT_COMPARTMENT_NAME = "default"

ALL_MOLECULES = "ALL_MOLECULES"
ALL_VOLUME_MOLECULES = "ALL_VOLUME_MOLECULES"
ALL_SURFACE_MOLECULES = "ALL_SURFACE_MOLECULES"

SPECIES_SUPERCLASS_NAMES: FrozenSet[str] = frozenset(
    {ALL_MOLECULES, ALL_VOLUME_MOLECULES, ALL_SURFACE_MOLECULES}
)

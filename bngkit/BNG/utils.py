from __future__ import annotations

import numpy as np

from .names import RATE_PARAM_PREFIX, SPECIES_SUPERCLASS_NAMES


__all__ = [
    "f_to_str",
    "is_species_superclass",
    "rate_param_name",
]

# magnitudes outside of this range are written in scientific notation
_POSITIONAL_MIN = 1e-4
_POSITIONAL_MAX = 1e16


def f_to_str(value: float) -> str:
    """
    Canonical float-to-text conversion used for every number in BNGL output.

    Uses the shortest representation that parses back to exactly the same
    double (numpy ``unique`` mode), so the target tool reads the value
    without loss.

    :param value: Number to format.
    :type value: float
    :returns: Text such as ``"1"``, ``"0.25"`` or ``"1e-15"``.
    :rtype: str
    :raises ValueError: If ``value`` is NaN or infinite.
    """
    v = float(value)
    if not np.isfinite(v):
        raise ValueError(f"Cannot export non-finite value {value!r} to BNGL.")
    if v == 0.0:
        return "0"

    magnitude = abs(v)
    if _POSITIONAL_MIN <= magnitude < _POSITIONAL_MAX:
        return np.format_float_positional(v, unique=True, trim="-")

    text = np.format_float_scientific(v, unique=True, trim="-")
    # numpy writes exponents as e+16 / e-05; BNGL accepts the compact form
    mantissa, exponent = text.split("e")
    return f"{mantissa}e{int(exponent)}"


def is_species_superclass(name: str) -> bool:
    """Return True for wildcard names such as ``ALL_MOLECULES``."""
    return name in SPECIES_SUPERCLASS_NAMES


def rate_param_name(index: int) -> str:
    """Name of the rate parameter bound to the rule at ``index`` (``k0``, ``k1``...)."""
    return f"{RATE_PARAM_PREFIX}{index}"

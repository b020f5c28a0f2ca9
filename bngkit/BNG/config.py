from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .exceptions import ExportOptionsError


@dataclass(frozen=True)
class ExportOptions:
    """
    Mode flags and size hints for BNGL export.

    :param rates_for_nfsim: If True, rates are converted for NFSim, which
        needs the size of a reference compartment; otherwise the plain
        um^3 to litres conversion is used.
    :type rates_for_nfsim: bool
    :param volume_um3_for_nfsim: Reference compartment volume in um^3.
        Only used when ``rates_for_nfsim`` is True.
    :type volume_um3_for_nfsim: float
    :param area_um2_for_nfsim: Reference compartment area in um^2.
        Only used when ``rates_for_nfsim`` is True.
    :type area_um2_for_nfsim: float
    :raises ExportOptionsError: If a size hint used by the selected mode is
        not a finite positive number.
    """

    rates_for_nfsim: bool = False
    volume_um3_for_nfsim: float = 1.0
    area_um2_for_nfsim: float = 1.0

    def __post_init__(self) -> None:
        if not self.rates_for_nfsim:
            return
        for label, value in (
            ("volume_um3_for_nfsim", self.volume_um3_for_nfsim),
            ("area_um2_for_nfsim", self.area_um2_for_nfsim),
        ):
            try:
                v = float(value)
            except (TypeError, ValueError) as exc:
                raise ExportOptionsError(f"{label} must be a number, got {value!r}.") from exc
            if not np.isfinite(v) or v <= 0.0:
                raise ExportOptionsError(
                    f"{label} must be a finite positive number, got {value!r}."
                )

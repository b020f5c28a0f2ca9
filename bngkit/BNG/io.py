from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import ExportOptions
from .engine import BNGEngine
from .names import BEGIN_MODEL, BEGIN_PARAMETERS, END_MODEL, END_PARAMETERS

logger = logging.getLogger(__name__)


def assemble_bngl(
    parameters: str,
    molecule_types: str,
    compartments: str,
    reaction_rules: str,
) -> str:
    """
    Join exported sections into a complete BNGL model.

    The parameters text is wrapped in its own block; the other sections
    already carry their BEGIN/END lines.

    :param parameters: Content of the parameters sink.
    :param molecule_types: Content of the molecule types sink.
    :param compartments: Content of the compartments sink.
    :param reaction_rules: Content of the reaction rules sink.
    :returns: Model text.
    :rtype: str
    """
    body = parameters if parameters.endswith("\n") or not parameters else parameters + "\n"
    parts = [
        BEGIN_MODEL + "\n",
        BEGIN_PARAMETERS + "\n",
        body,
        END_PARAMETERS + "\n\n",
        molecule_types,
        "\n",
        compartments,
        "\n",
        reaction_rules,
        END_MODEL + "\n",
    ]
    return "".join(parts)


def export_bngl_text(
    engine: BNGEngine, options: Optional[ExportOptions] = None
) -> Tuple[str, str]:
    """
    Export ``engine``'s model as one BNGL text.

    :returns: Tuple ``(text, diagnostics)``.
    """
    options = options or ExportOptions()
    params, mol_types, comps, rules = (io.StringIO() for _ in range(4))
    err_msg = engine.export_with_options(params, mol_types, comps, rules, options)
    text = assemble_bngl(
        params.getvalue(), mol_types.getvalue(), comps.getvalue(), rules.getvalue()
    )
    return text, err_msg


def write_bngl(
    engine: BNGEngine,
    path: Union[str, Path],
    options: Optional[ExportOptions] = None,
) -> str:
    """
    Export ``engine``'s model to a ``.bngl`` file.

    :param engine: Initialized engine.
    :param path: Destination file; parent directories must exist.
    :param options: Rate conversion mode.
    :returns: Diagnostics of the export.
    """
    text, err_msg = export_bngl_text(engine, options)
    out_path = Path(path)
    out_path.write_text(text, encoding="utf-8")
    logger.debug("Wrote BNGL model to %s", out_path)
    return err_msg

# Sphinx configuration for the bngkit API reference.
import os
import sys

sys.path.insert(0, os.path.abspath(".."))

import bngkit  # noqa: E402

project = "bngkit"
author = "bngkit developers"

# bngkit.version already falls back to a dev marker when not installed
release = bngkit.__version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
]

# ExportOptions, BNGStats and the model types are dataclasses; list fields
# in declaration order, which is also the BNGL output order.
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "networkx": ("https://networkx.org/documentation/stable", None),
    "pandas": ("https://pandas.pydata.org/docs", None),
}

master_doc = "index"
exclude_patterns = ["_build"]

html_theme = "sphinx_rtd_theme"

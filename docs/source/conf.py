"""Sphinx configuration for Capital Allocate documentation."""

import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "Capital Allocate"
author = "eisenhauerIO"
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "myst_parser",
    "nbsphinx",
]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
templates_path = ["_templates"]
exclude_patterns = ["build"]
html_theme = "sphinx_rtd_theme"
html_theme_options = {
    "navigation_depth": 2,
}

autodoc_member_order = "bysource"
napoleon_numpy_docstring = True

nbsphinx_execute = "always"
nbsphinx_allow_errors = False

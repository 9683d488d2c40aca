from __future__ import annotations

import sys
from pathlib import Path

# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

__version__: str = "unknown"
try:
    from epradpy import __version__ as _epradpy_version
except ImportError:  # pragma: no cover
    pass
else:
    __version__ = _epradpy_version

# -----------------------------------------------------------------------------
# Project information
# -----------------------------------------------------------------------------

project = "EPRad"
author = "EPRad developers"
copyright = f"2026, {author}"
version = release = __version__

# -----------------------------------------------------------------------------
# General configuration
# -----------------------------------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.mathjax",
    "sphinx.ext.napoleon",
    "autoapi.extension",
    "myst_parser",
    "sphinx_autodoc_typehints",
    "sphinx_copybutton",
]

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build", "**/.ipynb_checkpoints"]

language = "en"

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

# -----------------------------------------------------------------------------
# MyST (Markdown)
# -----------------------------------------------------------------------------

myst_enable_extensions = [
    "colon_fence",
    "deflist",
    "dollarmath",
    "linkify",
]
myst_heading_anchors = 3

# -----------------------------------------------------------------------------
# Napoleon (NumPy-style docstrings)
# -----------------------------------------------------------------------------

napoleon_numpy_docstring = True
napoleon_include_init_with_doc = False
napoleon_include_private_with_doc = False
napoleon_include_special_with_doc = True
napoleon_preprocess_types = False
napoleon_attr_annotations = True
napoleon_use_ivar = True

suppress_warnings = [
    "toc.not_included",
    "ref.duplicate",
    "autodoc.duplicate_object",
]

# -----------------------------------------------------------------------------
# autodoc
# -----------------------------------------------------------------------------

autoclass_content = "class"
autodoc_typehints = "none"
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "undoc-members": True,
    "show-inheritance": True,
}

always_document_param_types = True
typehints_fully_qualified = False
typehints_document_rtype = True

# -----------------------------------------------------------------------------
# AutoAPI
# -----------------------------------------------------------------------------

autoapi_type = "python"
autoapi_dirs = [str(ROOT / "epradpy")]
autoapi_root = "autoapi"
autoapi_add_toctree_entry = False
autoapi_keep_files = True
autoapi_own_page_level = "module"
autoapi_options = [
    "members",
    "undoc-members",
    "show-module-summary",
    "show-inheritance",
]

# -----------------------------------------------------------------------------
# Intersphinx
# -----------------------------------------------------------------------------

intersphinx_mapping = {
    "python": ("https://docs.python.org/3/", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
    "pandas": ("https://pandas.pydata.org/docs/", None),
}

# -----------------------------------------------------------------------------
# HTML output
# -----------------------------------------------------------------------------

html_theme = "pydata_sphinx_theme"
html_title = "EPRad documentation"
html_theme_options = {
    "search_bar_text": "Search the docs...",
}

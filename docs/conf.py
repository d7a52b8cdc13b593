# Configuration file for the Sphinx documentation builder.
"""Sphinx configuration file for Sensitive Content Classifier docs."""

import sys
from datetime import datetime, timezone
from importlib.metadata import metadata
from pathlib import Path

# Add the project source directory to the Python path
sys.path.insert(0, str(Path("../src").resolve()))

# Project information
pkg_metadata = metadata("sensitive_content_classifier")
project = pkg_metadata["Name"].replace("-", " ").title()

copyright = str(datetime.now(timezone.utc).year)  # noqa: A001 - required Sphinx config variable
author = pkg_metadata["Author"] or "Sensitive Content Classifier Developers"

# The full version, including alpha/beta/rc tags
release = pkg_metadata["Version"]

# Extensions
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
]

templates_path = ["_templates"]

autosummary_generate = True
add_module_names = False
autodoc_typehints = "description"
autodoc_preserve_defaults = True

exclude_patterns = [
    "_build",
    "Thumbs.db",
    ".DS_Store",
    "**/tests/**",
    "**/__pycache__/**",
    "**/.pytest_cache/**",
    "**/.mypy_cache/**",
    "**/.ruff_cache/**",
]

html_theme = "furo"
html_theme_options = {
    "sidebar_hide_name": False,
    "navigation_with_keys": True,
    "source_branch": "main",
    "source_directory": "docs/",
}
html_static_path = ["_static"]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "httpx": ("https://www.python-httpx.org/", None),
    "PIL": ("https://pillow.readthedocs.io/en/stable/", None),
}

# Create required directories if they don't exist
for path in ["_static", "_templates/autosummary", "api/generated"]:
    Path(path).mkdir(parents=True, exist_ok=True)

# Napoleon settings
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True
napoleon_include_private_with_doc = False
napoleon_use_admonition_for_examples = True
napoleon_use_param = True
napoleon_use_rtype = True

# AutoDoc settings
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "special-members": "__init__",
    "undoc-members": True,
    "exclude-members": "__weakref__",
    "show-inheritance": True,
}

# Sphinx configuration file

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

from workflow_source import __version__  # noqa: E402

project = 'Workflow Source'
author = 'Workflow Source contributors'
release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'

# Entities and models are documented from their dataclass / pydantic fields.
autodoc_default_options = {
    'members': True,
    'member-order': 'groupwise',
    'undoc-members': True,
    'exclude-members': 'model_config,model_fields,model_computed_fields',
}
autodoc_typehints = 'description'

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}

"""
compdoc - Component library documentation builder

Discovers the components of a library, builds their documentation,
rebuilds only what changed while watching, and merges every component
into a locale-aware navigation tree.
"""

__version__ = "0.1.0"
__all__ = [
    "Config",
    "DocService",
    "LibraryBuilder",
]

from compdoc.config import Config
from compdoc.library import LibraryBuilder
from compdoc.main import DocService

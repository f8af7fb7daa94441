"""projectctl - render templates into a project and keep them in sync"""

from ._version import __version__

__all__ = ["__version__"]

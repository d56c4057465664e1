"""prickly: an interactive editor for hierarchical, hash-keyed param documents."""

from prickly.core.constants import APP_VERSION as __version__

__all__ = ["__version__"]

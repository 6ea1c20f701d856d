"""XRS Names: a registry mapping human-readable handles to addresses."""

from .core.config import SERVICE_VERSION as __version__

__all__ = ["__version__"]

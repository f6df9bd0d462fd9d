"""Job-application form detection and autofill engine."""

from importlib import metadata

try:
    __version__ = metadata.version("autoapply-autofill")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]

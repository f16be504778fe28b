"""
modelbridge package initializer.

This package provides a uniform "Model" adapter that lets FastAPI request
handlers fetch, search, count and iterate records through a configured
record class and its manager.

The package exposes a ``__version__`` attribute read from pyproject.toml via
importlib.metadata.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("modelbridge")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]

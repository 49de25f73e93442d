"""simconsole - client-side state layer for the scheduler simulator console."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("simconsole")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

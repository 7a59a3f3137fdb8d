"""rolloutscope - Argo Rollouts status summaries from Argo CD resource trees."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rolloutscope")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
